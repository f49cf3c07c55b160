"""Shared fixtures for MCP tests."""
import json
import os

import pytest
import pytest_asyncio

from codemap.blueprint import BlueprintManager, save_file
from codemap.mcp import create_server
from codemap.paths import reset_paths
import codemap.blueprint.manager as manager_module


def unwrap_result(result):
    """
    Normalize FastMCP CallToolResult to plain Python data.

    Prefers structured_content (unwrapped if FastMCP wraps under 'result'),
    otherwise falls back to parsing text content when available.
    """
    structured = getattr(result, "structured_content", None)
    if structured is not None:
        if isinstance(structured, dict) and "result" in structured:
            return structured["result"]
        return structured

    content = getattr(result, "content", None) or []
    texts = [getattr(block, "text", None) for block in content if getattr(block, "text", None)]
    if len(texts) == 1:
        text = texts[0]
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
    if texts:
        return texts

    return result


@pytest.fixture(autouse=True)
def reset_blueprint_manager(monkeypatch):
    """Reset the global BlueprintManager singleton before each test."""
    monkeypatch.delenv("CODEMAP_BLUEPRINT", raising=False)
    manager_module._manager = None
    BlueprintManager._instance = None
    reset_paths()

    yield

    manager_module._manager = None
    BlueprintManager._instance = None
    reset_paths()


@pytest.fixture
def empty_project(temp_dir):
    """Temporary working directory with no blueprint."""
    cwd_before = os.getcwd()
    os.chdir(temp_dir)
    try:
        yield temp_dir
    finally:
        os.chdir(cwd_before)


@pytest.fixture
def blueprint_project(empty_project, sample_blueprint):
    """Temporary project with the sample blueprint at .codemap/blueprint.json."""
    save_file(sample_blueprint, empty_project / ".codemap" / "blueprint.json")
    return empty_project


@pytest.fixture(scope="session")
def mcp_server():
    """Create an MCP server instance for testing."""
    return create_server()


@pytest_asyncio.fixture
async def mcp_client(mcp_server):
    """Async FastMCP client connected to in-process server."""
    from fastmcp import Client

    client = Client(mcp_server)
    async with client:
        yield client
