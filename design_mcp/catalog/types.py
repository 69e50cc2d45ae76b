"""
Type definitions for the design-system catalog.

Configuration models are validated with pydantic because they come from an
external JSON file. Registry and Component are plain dataclasses derived from
the configuration and the filesystem.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Configuration Types

class ComponentLayout(BaseModel):
    """Where to look for a registry's components and their examples."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base_path: str = Field(alias="basePath")
    component_dir: str = Field(alias="componentDir")
    component_sub_dirs: List[str] = Field(default_factory=list, alias="componentSubDirs")
    doc_extensions: List[str] = Field(default_factory=list, alias="componentFileExtensions")
    examples_dir: str = Field(default="", alias="storiesDir")
    examples_sub_dirs: List[str] = Field(default_factory=list, alias="storiesSubDirs")
    example_extensions: List[str] = Field(default_factory=list, alias="storiesFileExtensions")


class RegistryConfig(BaseModel):
    """One entry of the ``registries`` list in the configuration file."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    install_command: str = Field(default="", alias="installCommand")
    description: str = ""
    use_cases: List[str] = Field(default_factory=list, alias="useCases")
    components: ComponentLayout


# Catalog Types

@dataclass
class Component:
    """A component discovered inside a registry."""
    name: str
    doc_file_paths: List[str]
    example_file_paths: Optional[List[str]] = None  # None when nothing resolved


@dataclass
class Registry:
    """A design-system registry with its discovered components."""
    name: str
    install_command: str = ""
    description: str = ""
    use_cases: List[str] = field(default_factory=list)
    components: List[Component] = field(default_factory=list)
