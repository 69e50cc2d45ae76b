#!/usr/bin/env python3
"""
MCP Server Entrypoint

HTTP server that exposes the design-system registry tools.

- ``POST /mcp`` speaks JSON-RPC 2.0 (initialize, ping, tools/list, tools/call)
- ``/tools`` endpoints give plain REST access to the same tools

The registry catalog and the tool table are built once in the application
lifespan, before the first request is served.
"""

import argparse
import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .catalog import RegistryService
from .config import Settings, load_registries_config, load_settings
from .registry import ToolRegistry
from .tools import RegistryTools

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVER_NAME = "design-system-mcp-server"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2025-06-18"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


def build_services(settings: Settings) -> Tuple[RegistryService, ToolRegistry]:
    """Load the registry catalog and register every tool service."""
    registries_config = load_registries_config(settings.registries_config)
    registry_service = RegistryService(registries_config, workspace_root=settings.workspace_root)

    tool_registry = ToolRegistry()
    tool_registry.register_services(RegistryTools(registry_service))
    return registry_service, tool_registry


class ToolRequest(BaseModel):
    """Request body for tool execution."""

    arguments: Dict[str, Any] = {}


class ToolResponse(BaseModel):
    """MCP tool result returned by tool execution."""

    content: List[Dict[str, Any]]
    isError: bool = False


def _rpc_result(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _rpc_error(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


async def handle_rpc_message(tool_registry: ToolRegistry, message: Any) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message.
    Returns the response, or None for notifications.
    """
    if not isinstance(message, dict) or message.get("jsonrpc") != "2.0" or not isinstance(message.get("method"), str):
        request_id = message.get("id") if isinstance(message, dict) else None
        return _rpc_error(request_id, INVALID_REQUEST, "Invalid Request")

    method = message["method"]
    params = message.get("params") or {}

    if "id" not in message:
        logger.debug(f"Notification received: {method}")
        return None
    request_id = message["id"]

    if not isinstance(params, dict):
        return _rpc_error(request_id, INVALID_PARAMS, "params must be an object")

    if method == "initialize":
        return _rpc_result(request_id, {
            "protocolVersion": params.get("protocolVersion", PROTOCOL_VERSION),
            "capabilities": {"tools": {"listChanged": False}, "logging": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        })

    if method == "ping":
        return _rpc_result(request_id, {})

    if method == "tools/list":
        return _rpc_result(request_id, {"tools": tool_registry.list_tool_schemas()})

    if method == "tools/call":
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return _rpc_error(request_id, INVALID_PARAMS, "tools/call requires a tool name")
        result = await tool_registry.call_tool(name, params.get("arguments") or {})
        return _rpc_result(request_id, result)

    return _rpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


def create_app(
    settings: Optional[Settings] = None,
    tool_registry: Optional[ToolRegistry] = None,
    registry_service: Optional[RegistryService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Without ``tool_registry`` the services are built from ``settings`` (or
    from the environment) when the application starts. Injected services are
    stored on ``app.state`` as given.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if app.state.tool_registry is None:
            app.state.settings = app.state.settings or load_settings()
            app.state.registry_service, app.state.tool_registry = build_services(app.state.settings)

        tools = app.state.tool_registry.list_tool_names()
        logger.info(f"MCP Server starting with {len(tools)} tools")
        for name in tools:
            logger.info(f"  - {name}")

        yield

        logger.info("MCP Server shutting down")

    app = FastAPI(
        title="Design System MCP Server",
        description="Model Context Protocol server for design system registries",
        version=SERVER_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tool_registry = tool_registry
    app.state.registry_service = registry_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def tools_of(request: Request) -> ToolRegistry:
        return request.app.state.tool_registry

    # ============== MCP Endpoint ==============

    @app.post("/mcp")
    async def mcp_endpoint(request: Request):
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(_rpc_error(None, PARSE_ERROR, "Parse error"))

        tool_registry = tools_of(request)

        if isinstance(payload, list):
            if not payload:
                return JSONResponse(_rpc_error(None, INVALID_REQUEST, "Invalid Request"))
            responses = []
            for message in payload:
                response = await handle_rpc_message(tool_registry, message)
                if response is not None:
                    responses.append(response)
            if not responses:
                return Response(status_code=202)
            return JSONResponse(responses)

        response = await handle_rpc_message(tool_registry, payload)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    # ============== API Endpoints ==============

    @app.get("/")
    async def root(request: Request):
        return {
            "service": "Design System MCP Server",
            "version": SERVER_VERSION,
            "tools_count": len(tools_of(request).list_tool_names()),
            "endpoints": {
                "mcp": "/mcp",
                "list_tools": "/tools",
                "execute": "/tools/{tool_name}/execute",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health(request: Request):
        return {"status": "healthy", "tools_loaded": len(tools_of(request).list_tool_names())}

    @app.get("/tools")
    async def list_tools(request: Request):
        schemas = tools_of(request).list_tool_schemas()
        return {"total": len(schemas), "tools": schemas}

    @app.get("/tools/{tool_name}")
    async def get_tool_info(tool_name: str, request: Request):
        tool = tools_of(request).get_tool(tool_name)
        if tool is None:
            raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")
        return tool.to_schema()

    @app.post("/tools/{tool_name}/execute", response_model=ToolResponse)
    async def execute_tool_endpoint(tool_name: str, body: ToolRequest, request: Request):
        result = await tools_of(request).call_tool(tool_name, body.arguments)
        return ToolResponse(**result)

    return app


app = create_app()


# ============== Main ==============


def print_inventory(registry_service: RegistryService, tool_registry: ToolRegistry) -> None:
    """Print the discovered tools and registries."""
    print(f"Tools ({len(tool_registry.list_tool_names())}):")
    for schema in tool_registry.list_tool_schemas():
        print(f"  - {schema['name']}: {schema.get('description', '')}")
        print(f"    input: {json.dumps(schema['inputSchema'].get('properties', {}))}")

    registries = registry_service.get_all_registries()
    print(f"Registries ({len(registries)}):")
    for registry in registries:
        print(f"  - {registry.name}: {len(registry.components)} components")
        for component in registry.components:
            print(
                f"      {component.name} "
                f"(docs: {len(component.doc_file_paths)}, "
                f"examples: {len(component.example_file_paths or [])})"
            )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="Design system MCP server")
    parser.add_argument("--host", help="Bind address (default: MCP_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port (default: MCP_PORT or 8000)")
    parser.add_argument("--config", help="Registry configuration JSON (default: REGISTRIES_CONFIG)")
    parser.add_argument("--list-tools", action="store_true",
                        help="Print discovered tools and registries, then exit")
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.config:
        settings.registries_config = settings.workspace_root / args.config

    logging.getLogger().setLevel(settings.log_level)

    if args.list_tools:
        registry_service, tool_registry = build_services(settings)
        print_inventory(registry_service, tool_registry)
        return 0

    import uvicorn

    logger.info(f"Starting MCP server on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
