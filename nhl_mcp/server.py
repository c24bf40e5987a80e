#!/usr/bin/env python3
"""
NHL MCP Server

A FastMCP server that provides:
- Health and metrics endpoints (non-MCP REST endpoints)
- Team roster, scoreboard and next-game tools
- Skater stat leaders and player current-season stat line tools
"""

import os
from typing import Callable, Iterable, Optional

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from . import tool_registry
from .config import SERVER_VERSION
from .logging_config import get_logger, setup_logging
from .metrics import get_metrics_collector
from .middleware import RequestLoggingMiddleware

logger = get_logger(__name__)

SERVICE_NAME = "NHL MCP Server"


def create_app(tools: Optional[Iterable[Callable]] = None) -> FastMCP:
    """Create and configure the FastMCP server application.

    Args:
        tools: Tool functions to register; defaults to ``tool_registry.get_all_tools()``
    """
    mcp = FastMCP(name=SERVICE_NAME)

    registered = list(tools) if tools is not None else tool_registry.get_all_tools()
    for tool_func in registered:
        mcp.tool(tool_func)
    logger.info(f"Registered {len(registered)} tools")

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint for monitoring server status."""
        return JSONResponse({
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVER_VERSION,
        })

    @mcp.custom_route("/metrics", methods=["GET"])
    async def metrics(request: Request) -> JSONResponse:
        """Snapshot of tool and request counters and timings."""
        return JSONResponse(get_metrics_collector().get_metrics())

    return mcp


def main():
    """Main entry point for the server."""
    setup_logging(
        log_level=os.getenv("NHL_MCP_LOG_LEVEL", "INFO"),
        version=SERVER_VERSION,
        log_file_path=os.getenv("NHL_MCP_LOG_FILE") or None,
    )

    app = create_app()
    mcp_http = app.http_app(path="/mcp")
    mcp_http.add_middleware(RequestLoggingMiddleware, exclude_paths=["/health"])

    host = os.getenv("NHL_MCP_HOST", "0.0.0.0")
    port = int(os.getenv("NHL_MCP_PORT", "9000"))
    logger.info(f"Starting {SERVICE_NAME} {SERVER_VERSION} on {host}:{port}")

    import uvicorn
    uvicorn.run(mcp_http, host=host, port=port)


if __name__ == "__main__":
    main()
