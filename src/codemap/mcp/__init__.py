"""MCP query server exposing blueprint queries as tools."""
from .server import create_server, run_server

__all__ = ["create_server", "run_server"]
