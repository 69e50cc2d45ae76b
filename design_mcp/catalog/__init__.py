"""
Design-system catalog: configuration types, component discovery and the
in-memory registry service.
"""

from .discovery import discover_components
from .service import RegistryService
from .types import Component, ComponentLayout, Registry, RegistryConfig

__all__ = [
    "Component",
    "ComponentLayout",
    "Registry",
    "RegistryConfig",
    "RegistryService",
    "discover_components",
]
