"""FastMCP server setup and tool registration."""
from fastmcp import FastMCP

from .tools import admin, flow, references, structure

mcp = FastMCP("codemap")


def create_server():
    """Create and configure the MCP server."""
    # Structural views (entry points, trees, architecture, statistics)
    structure.register(mcp)

    # Cross references, module detail, search
    references.register(mcp)

    # Scenario detection and flow extraction
    flow.register(mcp)

    # Blueprint lifecycle
    admin.register(mcp)

    return mcp


def run_server():
    """Run the MCP server."""
    server = create_server()
    server.run(show_banner=False)
