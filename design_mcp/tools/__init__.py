"""
MCP Tools Package

Each module holds a service class whose methods are declared as tools with
``@mcp_tool``. Services are registered explicitly at server startup.
"""

from .registry_tools import RegistryTools

__all__ = ["RegistryTools"]
