"""
MCP Tool Declarations

Provides the ``mcp_tool`` decorator, tool descriptors, content envelope helpers
and the error types shared by the registry and the services.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

TOOLS_ATTRIBUTE = "__mcp_tools__"

EMPTY_INPUT_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MCPToolError):
    """Raised when tool input validation fails."""
    pass


class ExecutionError(MCPToolError):
    """Raised when tool execution fails."""
    pass


class ToolNotFoundError(MCPToolError):
    """Raised when no tool is registered under the requested name."""
    pass


class DuplicateToolError(MCPToolError):
    """Raised when a tool name is registered twice."""
    pass


@dataclass(frozen=True)
class ToolSpec:
    """A single tool declaration attached to a method by ``mcp_tool``."""
    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    input_schema: Optional[Type[BaseModel]] = None
    param_map: Optional[Dict[str, str]] = None


@dataclass
class ToolDescriptor:
    """A tool bound to the callable that implements it."""
    name: str
    handler: Callable[..., Any]
    title: Optional[str] = None
    description: Optional[str] = None
    input_schema: Optional[Type[BaseModel]] = None
    param_map: Optional[Dict[str, str]] = None
    owner: Any = field(default=None, repr=False)

    @classmethod
    def from_spec(cls, spec: ToolSpec, handler: Callable[..., Any], owner: Any = None) -> "ToolDescriptor":
        return cls(
            name=spec.name,
            handler=handler,
            title=spec.title,
            description=spec.description,
            input_schema=spec.input_schema,
            param_map=dict(spec.param_map) if spec.param_map else None,
            owner=owner,
        )

    def to_schema(self) -> Dict[str, Any]:
        """Convert to an MCP ``tools/list`` entry."""
        schema: Dict[str, Any] = {"name": self.name}
        if self.title:
            schema["title"] = self.title
        if self.description:
            schema["description"] = self.description
        if self.input_schema is not None:
            schema["inputSchema"] = self.input_schema.model_json_schema()
        else:
            schema["inputSchema"] = dict(EMPTY_INPUT_SCHEMA)
        return schema


def mcp_tool(
    name: str,
    title: str = None,
    description: str = None,
    input_schema: Type[BaseModel] = None,
    param_map: Dict[str, str] = None,
):
    """
    Decorator to declare a method as an MCP tool.

    The method itself is returned unchanged; the declaration is stored on it
    and picked up by ``collect_tools`` when the owning service is registered.
    Stacking the decorator exposes the same method under several names.

    Usage:
        class UserService:
            @mcp_tool(
                name="get_user",
                description="Get a user by id",
                input_schema=GetUserInput,
                param_map={"userId": "user_id"},
            )
            def get_user(self, user_id: int) -> dict:
                ...

    ``param_map`` maps input schema property names to method parameter
    names. Properties it does not mention keep their names.
    """
    spec = ToolSpec(
        name=name,
        title=title,
        description=description,
        input_schema=input_schema,
        param_map=param_map,
    )

    def decorator(func: Callable):
        specs: List[ToolSpec] = list(getattr(func, TOOLS_ATTRIBUTE, []))
        # Decorators apply bottom-up; keep the order they are written in.
        specs.insert(0, spec)
        setattr(func, TOOLS_ATTRIBUTE, specs)
        return func

    return decorator


def get_tool_specs(func: Any) -> List[ToolSpec]:
    """Declarations attached to ``func`` (empty if it is not a tool)."""
    return list(getattr(func, TOOLS_ATTRIBUTE, []))


def collect_tools(instance: Any) -> List[ToolDescriptor]:
    """
    Build the tool descriptors of a service instance.

    Methods are visited in class definition order, base classes first, and
    every declaration on a method becomes one descriptor bound to
    ``instance``.
    """
    names: List[str] = []
    for klass in reversed(type(instance).__mro__):
        for attr_name in vars(klass):
            if attr_name not in names:
                names.append(attr_name)

    descriptors: List[ToolDescriptor] = []
    for attr_name in names:
        attr = inspect.getattr_static(instance, attr_name, None)
        if not callable(attr):
            continue
        specs = get_tool_specs(attr)
        if not specs:
            continue
        handler = getattr(instance, attr_name)
        for spec in specs:
            descriptors.append(ToolDescriptor.from_spec(spec, handler, owner=instance))

    return descriptors


# Content envelope helpers

def text_content(text: str) -> Dict[str, str]:
    return {"type": "text", "text": text}


def text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """Wrap ``text`` in a single-block MCP tool result."""
    result: Dict[str, Any] = {"content": [text_content(text)]}
    if is_error:
        result["isError"] = True
    return result


def error_result(message: str) -> Dict[str, Any]:
    return text_result(message, is_error=True)


def is_content_envelope(value: Any) -> bool:
    """True if ``value`` is already shaped as an MCP tool result."""
    if not isinstance(value, dict):
        return False
    content = value.get("content")
    if not isinstance(content, list):
        return False
    return all(isinstance(block, dict) and "type" in block for block in content)
