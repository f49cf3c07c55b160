"""
Pytest configuration for the codemap test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Sample blueprint fixtures (see factories.py for the fact builders)
- Temp directory fixtures
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from codemap.logging_config import reset_logging, setup_logging
from codemap.blueprint import save_file

from .factories import build_blueprint, cycle_facts, sample_facts


def pytest_configure(config):
    """Configure pytest for quiet, machine-mode operation."""
    os.environ.setdefault("CODEMAP_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="codemap_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_blueprint():
    return build_blueprint(sample_facts())


@pytest.fixture
def cycle_blueprint():
    return build_blueprint(cycle_facts(), name="cycle")


@pytest.fixture
def blueprint_file(temp_dir, sample_blueprint):
    """Sample blueprint persisted to a temp file."""
    return save_file(sample_blueprint, temp_dir / ".codemap" / "blueprint.json")
