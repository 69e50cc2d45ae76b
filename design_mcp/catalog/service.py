"""
Registry Catalog Service

Holds the in-memory list of design-system registries. The list is built once
from configuration and the filesystem when the service is constructed; it is
not refreshed when files change afterwards.

Lookups are lenient: a miss returns None, an empty list or an empty string
and is logged, it never raises.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .discovery import discover_components
from .types import Component, Registry, RegistryConfig

logger = logging.getLogger(__name__)


class RegistryService:
    """
    In-memory catalog of registries.

    Mutation methods are not synchronised; callers that share one instance
    across threads must serialise writes themselves.
    """

    def __init__(
        self,
        registries_config: Optional[Sequence[RegistryConfig]] = None,
        workspace_root: Optional[Union[str, Path]] = None,
    ):
        self._registries: List[Registry] = []
        self._registries_config: List[RegistryConfig] = list(registries_config or [])
        self._workspace_root = Path(workspace_root) if workspace_root is not None else Path.cwd()

        self._discover_and_register_components()

        if not self._registries:
            logger.warning("No registries found in configuration.")
        else:
            logger.info(f"Loaded {len(self._registries)} registries from configuration.")

    @property
    def workspace_root(self) -> Path:
        return self._workspace_root

    def get_all_registries(self) -> List[Registry]:
        return self._registries

    def get_registry_by_name(self, name: str) -> Optional[Registry]:
        return next((r for r in self._registries if r.name == name), None)

    def add_registry(self, registry: Registry) -> None:
        self._registries.append(registry)

    def update_registry(self, name: str, updated_registry: Registry) -> None:
        """Replace the first registry called ``name``; no-op if there is none."""
        for index, registry in enumerate(self._registries):
            if registry.name == name:
                self._registries[index] = updated_registry
                return

    def delete_registry(self, name: str) -> None:
        self._registries = [r for r in self._registries if r.name != name]

    def get_components_by_registry_name(self, name: str) -> List[Component]:
        registry = self.get_registry_by_name(name)
        if registry is None:
            logger.warning(f"Registry not found: {name}")
            return []
        return registry.components or []

    def get_component_by_name(self, registry_name: str, component_name: str) -> Optional[Component]:
        registry = self.get_registry_by_name(registry_name)
        if registry is None:
            logger.warning(f"Registry not found: {registry_name}")
            return None

        component = next(
            (c for c in registry.components or [] if c.name == component_name),
            None,
        )
        if component is None:
            logger.warning(f"Component not found: {component_name} in registry: {registry_name}")
        return component

    def get_file_content(self, file_path: Union[str, Path]) -> str:
        """Read a UTF-8 file. Returns an empty string if it is missing or unreadable."""
        path = Path(file_path)
        try:
            if not path.exists():
                logger.warning(f"File not found: {file_path}")
                return ""
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error(f"Error reading file {file_path}: {e}")
            return ""

    def _discover_and_register_components(self) -> None:
        logger.info("Starting component discovery...")

        for registry_config in self._registries_config:
            logger.info(f"Discovering components for registry: {registry_config.name}")

            components = discover_components(registry_config.components, self._workspace_root)
            self.add_registry(Registry(
                name=registry_config.name,
                install_command=registry_config.install_command,
                description=registry_config.description,
                use_cases=list(registry_config.use_cases),
                components=components,
            ))

            logger.info(
                f"Discovered {len(components)} components for registry: {registry_config.name}"
            )

        logger.info(f"Component discovery completed. Total registries: {len(self._registries)}")
