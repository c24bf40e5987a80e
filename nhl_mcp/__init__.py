"""
NHL MCP Server Package

A FastMCP server exposing normalized NHL rosters, scoreboards, stat leaders and
player stat lines.
"""

from .server import create_app, main

__version__ = "0.1.0"
__all__ = ["create_app", "main"]
