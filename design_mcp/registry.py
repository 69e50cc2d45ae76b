"""
MCP Tool Registry

Single place where tools are collected and dispatched. Services contribute
their ``mcp_tool`` declarations once at startup; every call then goes through
``ToolRegistry.call_tool``:

    validate -> transform arguments -> invoke -> normalize result

``call_tool`` always returns an MCP tool result. Validation failures, unknown
tools and exceptions raised by handlers come back as ``isError`` results.
"""

import asyncio
import dataclasses
import inspect
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import pydantic
from pydantic import BaseModel

from .base import (
    DuplicateToolError,
    ToolDescriptor,
    ToolNotFoundError,
    ValidationError,
    collect_tools,
    error_result,
    is_content_envelope,
    text_result,
)

logger = logging.getLogger(__name__)


def transform_arguments(
    arguments: Optional[Dict[str, Any]],
    param_map: Optional[Dict[str, str]] = None,
) -> Tuple[Any, ...]:
    """
    Turn validated tool arguments into positional arguments for the handler.

    - no arguments, or an empty dict: ``()``
    - exactly one key: ``(value,)``
    - several keys: ``(arguments,)``

    With a ``param_map`` the keys are renamed first (keys the call does not
    carry stay absent) and the same rules apply to the renamed dict.
    """
    if not arguments:
        return ()

    if param_map:
        arguments = {param_map.get(key, key): value for key, value in arguments.items()}

    if len(arguments) == 1:
        return (next(iter(arguments.values())),)
    return (arguments,)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def normalize_result(value: Any) -> Dict[str, Any]:
    """
    Shape a handler's return value as an MCP tool result.

    Values that already look like a tool result pass through; strings are
    wrapped as-is and everything else is serialised to JSON text.
    """
    if is_content_envelope(value):
        return value
    if isinstance(value, str):
        return text_result(value)
    return text_result(json.dumps(value, indent=2, ensure_ascii=False, default=_to_jsonable))


class ToolRegistry:
    """
    Process-wide table of tool name -> descriptor.

    Built during application bootstrap and read-only afterwards. Tool names
    are unique: a second registration under an existing name is rejected,
    except that registering the very same service instance again is a no-op.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._services: List[Any] = []

    def register(self, descriptor: ToolDescriptor) -> None:
        existing = self._tools.get(descriptor.name)
        if existing is not None:
            raise DuplicateToolError(
                f"Tool '{descriptor.name}' is already registered by {_owner_name(existing)}",
                tool_name=descriptor.name,
                details={"owner": _owner_name(descriptor)},
            )
        self._tools[descriptor.name] = descriptor
        logger.info(f"Registered tool: {descriptor.name} ({_owner_name(descriptor)})")

    def register_service(self, instance: Any) -> List[ToolDescriptor]:
        """Register every tool declared on ``instance``'s class."""
        if any(service is instance for service in self._services):
            logger.debug(f"Service already registered: {type(instance).__name__}")
            return []

        descriptors = collect_tools(instance)
        # Check the whole batch first so a collision leaves the table untouched.
        seen = set()
        for descriptor in descriptors:
            if descriptor.name in self._tools or descriptor.name in seen:
                raise DuplicateToolError(
                    f"Tool '{descriptor.name}' from {type(instance).__name__} is already registered",
                    tool_name=descriptor.name,
                )
            seen.add(descriptor.name)

        for descriptor in descriptors:
            self.register(descriptor)
        self._services.append(instance)

        if not descriptors:
            logger.warning(f"No tools declared on service: {type(instance).__name__}")
        return descriptors

    def register_services(self, *instances: Any) -> None:
        for instance in instances:
            self.register_service(instance)
        logger.info(f"Tool registration complete. Total tools: {len(self._tools)}")

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def get_all_tools(self) -> Dict[str, ToolDescriptor]:
        return self._tools.copy()

    def list_tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def list_tool_schemas(self) -> List[Dict[str, Any]]:
        """All tools as MCP ``tools/list`` entries, in registration order."""
        return [descriptor.to_schema() for descriptor in self._tools.values()]

    def validate_arguments(self, descriptor: ToolDescriptor, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Check ``arguments`` against the tool's input schema.

        Returns only the fields the caller supplied; unknown keys are dropped.
        Raises ValidationError if the input does not match.
        """
        arguments = arguments or {}
        if not isinstance(arguments, dict):
            raise ValidationError("Tool arguments must be an object", tool_name=descriptor.name)
        if descriptor.input_schema is None:
            return dict(arguments)

        try:
            model = descriptor.input_schema.model_validate(arguments)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid arguments for tool {descriptor.name}: {e}",
                tool_name=descriptor.name,
                details={"errors": e.errors(include_url=False)},
            )
        return model.model_dump(exclude_unset=True)

    async def invoke(self, descriptor: ToolDescriptor, args: Tuple[Any, ...]) -> Any:
        handler = descriptor.handler
        if inspect.iscoroutinefunction(handler):
            return await handler(*args)

        result = await asyncio.to_thread(handler, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a tool by name with the caller's raw arguments.
        Returns an MCP tool result; never raises.
        """
        descriptor = self.get_tool(name)
        if descriptor is None:
            error = ToolNotFoundError(f"Tool not found: {name}", tool_name=name)
            logger.warning(error.message)
            return error_result(error.message)

        try:
            validated = self.validate_arguments(descriptor, arguments)
        except ValidationError as e:
            logger.error(f"Validation error in {name}: {e.message}")
            return error_result(e.message)

        args = transform_arguments(validated, descriptor.param_map)

        try:
            result = await self.invoke(descriptor, args)
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return error_result(f"Error executing tool {name}: {e}")

        try:
            return normalize_result(result)
        except (TypeError, ValueError) as e:
            logger.exception(f"Error serialising result of tool {name}")
            return error_result(f"Error executing tool {name}: {e}")


def _owner_name(descriptor: ToolDescriptor) -> str:
    if descriptor.owner is not None:
        return type(descriptor.owner).__name__
    return getattr(descriptor.handler, "__qualname__", repr(descriptor.handler))
