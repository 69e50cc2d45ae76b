"""
Design System Registry Tools

Exposes the registry catalog to MCP callers: list registries, inspect one,
list its components and read a component's documentation or code examples.
Every answer is read from the files discovered on disk.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from ..base import mcp_tool
from ..catalog import RegistryService

FILE_SEPARATOR = "\n---\n"

COMPONENT_PARAMS = {"registryName": "registry_name", "componentName": "component_name"}


class ListRegistriesInput(BaseModel):
    pass


class GetRegistryInput(BaseModel):
    name: str = Field(description="Name of the registry")


class ListComponentsInput(BaseModel):
    registryName: str = Field(description="Name of the registry")


class ComponentInput(BaseModel):
    registryName: str = Field(description="Name of the registry")
    componentName: str = Field(description="Name of the component")


class RegistryTools:
    """MCP tools backed by a RegistryService."""

    def __init__(self, registry_service: RegistryService):
        self.registry_service = registry_service

    @mcp_tool(
        name="list_registries",
        title="List Design System Registries",
        description="List all available design system registries",
        input_schema=ListRegistriesInput,
    )
    def list_registries(self) -> str:
        registries = self.registry_service.get_all_registries()
        if not registries:
            return "No registries configured"
        return f"Available registries: {', '.join(r.name for r in registries)}"

    @mcp_tool(
        name="get_registry",
        title="Get Registry Details",
        description="Get detailed information about a specific registry",
        input_schema=GetRegistryInput,
    )
    def get_registry(self, name: str) -> str:
        registry = self.registry_service.get_registry_by_name(name)
        if registry is None:
            return f"Registry '{name}' not found"

        components = ", ".join(c.name for c in registry.components or [])
        return (
            f"Name: {registry.name}\n"
            f"Description: {registry.description or 'N/A'}\n"
            f"Installation: {registry.install_command or 'N/A'}\n"
            f"Use Cases: {', '.join(registry.use_cases or []) or 'N/A'}\n"
            f"Components: {components or 'N/A'}\n"
        )

    @mcp_tool(
        name="list_components",
        title="List Components in Registry",
        description="List all components available in a specific registry",
        input_schema=ListComponentsInput,
        param_map={"registryName": "registry_name"},
    )
    def list_components(self, registry_name: str) -> str:
        components = self.registry_service.get_components_by_registry_name(registry_name)
        if not components:
            return f"No components found in registry '{registry_name}'"

        lines = [
            f"- {c.name} (Docs: {len(c.doc_file_paths or [])}, "
            f"Examples: {len(c.example_file_paths or [])})"
            for c in components
        ]
        return f"Components in '{registry_name}':\n" + "\n".join(lines)

    @mcp_tool(
        name="get_component_docs",
        title="Get Component Documentation",
        description="Get the documentation (Markdown) for a specific component",
        input_schema=ComponentInput,
        param_map=COMPONENT_PARAMS,
    )
    def get_component_docs(self, args: Dict[str, str]) -> str:
        registry_name, component_name = args["registry_name"], args["component_name"]
        component = self.registry_service.get_component_by_name(registry_name, component_name)
        if component is None:
            return _not_found(registry_name, component_name)

        if not component.doc_file_paths:
            return f"No documentation available for component '{component_name}'"

        contents = self._read_all(component.doc_file_paths)
        return f"Documentation for {component_name}:\n\n{FILE_SEPARATOR.join(contents)}"

    @mcp_tool(
        name="get_component_examples",
        title="Get Component Examples",
        description="Get code examples (e.g. Storybook stories) for a specific component",
        input_schema=ComponentInput,
        param_map=COMPONENT_PARAMS,
    )
    @mcp_tool(
        name="get_component_stories",
        title="Get Component Stories",
        description="Get Storybook stories (code examples) for a specific component",
        input_schema=ComponentInput,
        param_map=COMPONENT_PARAMS,
    )
    def get_component_examples(self, args: Dict[str, str]) -> str:
        registry_name, component_name = args["registry_name"], args["component_name"]
        component = self.registry_service.get_component_by_name(registry_name, component_name)
        if component is None:
            return _not_found(registry_name, component_name)

        if not component.example_file_paths:
            return f"No code examples available for component '{component_name}'"

        contents = self._read_all(component.example_file_paths)
        return f"Code examples for {component_name}:\n\n{FILE_SEPARATOR.join(contents)}"

    def _read_all(self, file_paths: List[str]) -> List[str]:
        return [self.registry_service.get_file_content(path) for path in file_paths]


def _not_found(registry_name: str, component_name: str) -> str:
    return f"Component '{component_name}' not found in registry '{registry_name}'"
