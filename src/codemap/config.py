"""Configuration loading and auto-discovery."""
from pathlib import Path
from typing import Any, Dict, Optional
import os
import tomllib

from codemap.exceptions import ConfigError


def load_config() -> Optional[Dict[str, Any]]:
    """
    Load configuration from file.

    Priority:
    1. CODEMAP_CONFIG environment variable
    2. ./codemap.toml (project config)
    3. ~/.config/codemap/config.toml (user config)

    Returns:
        Configuration dict or None if no config found

    Raises:
        ConfigError: If the first config file found is not valid TOML
    """
    config_paths = []

    env_config = os.environ.get("CODEMAP_CONFIG")
    if env_config:
        config_paths.append(Path(env_config))

    config_paths.append(Path("codemap.toml"))
    config_paths.append(Path.home() / ".config" / "codemap" / "config.toml")

    for path in config_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e

    return None


def get_config_value(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-notation key.

    Example:
        get_config_value("tree.max_depth", 10)
        get_config_value("entry_points.limit", 5)
    """
    config = load_config()
    if config is None:
        return default

    parts = key.split(".")
    value = config

    for part in parts:
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


DEFAULTS = {
    "blueprint": {
        "path": ".codemap/blueprint.json",
    },
    "entry_points": {
        # Stems in priority order; earlier patterns score higher
        "patterns": ["cli", "index", "main", "app", "server", "entry"],
        "pattern_weight": 10,
        "root_bonus": 5,
        "root_folders": ["src", "lib"],
        "unimported_bonus": 20,
        "import_cap": 10,
        "limit": 5,
    },
    "tree": {
        "max_depth": 10,
    },
    "statistics": {
        "top_n": 10,
    },
    "flow": {
        "max_depth": 5,
    },
    "search": {
        "limit": 50,
    },
    "llm": {
        "backend": "none",  # "none" or "ollama"
        "ollama_url": "http://localhost:11434",
        "model": "llama3.2",
        "timeout": 30,
        "temperature": 0.2,
    },
}


def get_section(name: str) -> Dict[str, Any]:
    """Get a config section merged over its defaults."""
    config = load_config() or {}
    section = config.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"Config section [{name}] must be a table")

    result = {**DEFAULTS.get(name, {})}
    result.update(section)
    return result
