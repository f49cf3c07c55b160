"""
codemap Path Configuration

Centralized path management for codemap data files.
All paths are relative to the project root (current working directory).

Directory Structure:
.codemap/
├── blueprint.json       # Persisted blueprint document
└── logs/                # Log files
"""

import os
from pathlib import Path
from typing import Optional


class CodemapPaths:
    """
    Centralized path configuration for codemap.

    Paths are lazily resolved relative to project_root, which defaults
    to the current working directory.
    """

    CODEMAP_DIR = ".codemap"

    BLUEPRINT_NAME = "blueprint.json"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def codemap_dir(self) -> Path:
        """Get the .codemap directory path."""
        return self.project_root / self.CODEMAP_DIR

    @property
    def blueprint_file(self) -> Path:
        """Get the default blueprint document path."""
        return self.codemap_dir / self.BLUEPRINT_NAME

    @property
    def logs_dir(self) -> Path:
        return self.codemap_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.codemap_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


# Global instance for convenience
_default_paths: Optional[CodemapPaths] = None


def get_paths(project_root: Optional[Path] = None) -> CodemapPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        CodemapPaths instance
    """
    global _default_paths
    if project_root is not None:
        return CodemapPaths(project_root)
    if _default_paths is None:
        _default_paths = CodemapPaths()
    return _default_paths


def reset_paths() -> None:
    """Reset the global paths instance (useful for testing)."""
    global _default_paths
    _default_paths = None


def find_blueprint_path() -> Optional[Path]:
    """
    Find the blueprint document, checking multiple locations.

    Checks in order:
    1. CODEMAP_BLUEPRINT environment variable
    2. .codemap/blueprint.json
    3. blueprint.path from the config file

    Returns:
        Path to an existing blueprint, or None if not found
    """
    env_path = os.environ.get("CODEMAP_BLUEPRINT")
    if env_path and Path(env_path).exists():
        return Path(env_path)

    paths = get_paths()
    if paths.blueprint_file.exists():
        return paths.blueprint_file

    from codemap.config import get_config_value

    configured = get_config_value("blueprint.path")
    if configured and Path(configured).exists():
        return Path(configured)
    return None
