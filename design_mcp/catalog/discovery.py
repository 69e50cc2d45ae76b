"""
Component Discovery

Walks a registry's component layout on disk and turns every component folder
that carries at least one documentation file into a Component.

Examples are resolved per examples sub-directory in two tiers:
1. a dedicated folder named after the component (``<examples>/<sub>/<Name>/``)
2. otherwise, files in the sub-directory itself whose name contains the
   component name

Results follow the directory listing order of the filesystem and are not
sorted. Filesystem errors are logged and treated as empty results.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .types import Component, ComponentLayout

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def discover_components(
    layout: ComponentLayout,
    workspace_root: Optional[PathLike] = None,
) -> List[Component]:
    """
    Discover the components described by a layout.

    Args:
        layout: Component layout from the registry configuration
        workspace_root: Directory relative base paths are resolved against
            (defaults to the current working directory)

    Returns:
        Components in discovery order. Folders without documentation files
        are not included.
    """
    root = Path(workspace_root) if workspace_root is not None else Path.cwd()
    components: List[Component] = []

    for sub_dir in layout.component_sub_dirs:
        component_base_path = root / layout.base_path / layout.component_dir / sub_dir

        if not _exists(component_base_path):
            logger.warning(f"Component directory does not exist: {component_base_path}")
            continue

        for component_name in get_directories(component_base_path):
            component_path = component_base_path / component_name

            doc_file_paths = find_doc_files(component_path, layout.doc_extensions)
            if not doc_file_paths:
                logger.debug(f"No documentation files found for component: {component_name}")
                continue

            example_file_paths = find_example_files(component_name, layout, root)

            components.append(Component(
                name=component_name,
                doc_file_paths=doc_file_paths,
                example_file_paths=example_file_paths or None,
            ))
            logger.debug(
                f"Registered component: {component_name} with "
                f"{len(doc_file_paths)} doc files and {len(example_file_paths)} example files"
            )

    return components


def get_directories(dir_path: PathLike) -> List[str]:
    """Names of the immediate sub-directories of ``dir_path``."""
    try:
        with os.scandir(dir_path) as entries:
            return [entry.name for entry in entries if entry.is_dir()]
    except OSError as e:
        logger.error(f"Error reading directory {dir_path}: {e}")
        return []


def find_doc_files(component_path: PathLike, extensions: Iterable[str]) -> List[str]:
    """
    Files directly inside ``component_path`` whose extension is one of
    ``extensions`` (exact match on the last suffix, e.g. ``.md``).
    """
    extensions = set(extensions)
    doc_files: List[str] = []

    try:
        for entry in Path(component_path).iterdir():
            if entry.is_file() and entry.suffix in extensions:
                doc_files.append(str(entry))
    except OSError as e:
        logger.error(f"Error finding documentation files in {component_path}: {e}")

    return doc_files


def find_example_files(
    component_name: str,
    layout: ComponentLayout,
    workspace_root: PathLike,
) -> List[str]:
    """
    Resolve the example files of one component across all examples
    sub-directories. Results of the sub-directories are concatenated.
    """
    example_files: List[str] = []

    for examples_sub_dir in layout.examples_sub_dirs:
        examples_base_path = Path(workspace_root) / layout.base_path / layout.examples_dir / examples_sub_dir

        if not _exists(examples_base_path):
            continue

        component_examples_path = examples_base_path / component_name

        if _exists(component_examples_path) and component_examples_path.is_dir():
            example_files.extend(
                find_files_in_directory_root(component_examples_path, layout.example_extensions)
            )
        else:
            example_files.extend(
                find_files_in_directory(examples_base_path, component_name, layout.example_extensions)
            )

    return example_files


def find_files_in_directory(
    dir_path: PathLike,
    component_name: str,
    extensions: Iterable[str],
) -> List[str]:
    """
    Flat-folder lookup: files directly in ``dir_path`` whose stem contains
    ``component_name`` (case-insensitive) and whose last suffix is one of
    ``extensions``.
    """
    extensions = set(extensions)
    needle = component_name.lower()
    files: List[str] = []

    try:
        for entry in Path(dir_path).iterdir():
            if not entry.is_file():
                continue
            stem, ext = os.path.splitext(entry.name)
            if needle in stem.lower() and ext in extensions:
                files.append(str(entry))
    except OSError as e:
        logger.error(f"Error finding files in {dir_path}: {e}")

    return files


def find_files_in_directory_root(dir_path: PathLike, extensions: Iterable[str]) -> List[str]:
    """
    Dedicated-folder lookup: files directly in ``dir_path`` whose name
    contains any of ``extensions``. Substring matching lets multi-part
    suffixes such as ``.stories.tsx`` match. Sub-directories are ignored.
    """
    extensions = list(extensions)
    files: List[str] = []

    try:
        with os.scandir(dir_path) as entries:
            for entry in entries:
                if entry.is_file() and any(ext in entry.name for ext in extensions):
                    files.append(os.path.join(dir_path, entry.name))
    except OSError as e:
        logger.error(f"Error finding files in {dir_path}: {e}")

    return files


def _exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError as e:
        logger.error(f"Error checking {path}: {e}")
        return False
