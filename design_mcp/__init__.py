"""
Design System MCP Server

Serves design-system registry knowledge (components, docs, code examples)
through MCP tools. Tools are declared with ``@mcp_tool`` and dispatched by
``ToolRegistry``.
"""

from .base import MCPToolError, ToolDescriptor, mcp_tool
from .registry import ToolRegistry

__all__ = ["MCPToolError", "ToolDescriptor", "ToolRegistry", "mcp_tool"]
