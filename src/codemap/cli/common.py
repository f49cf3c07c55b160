"""
Common CLI helpers shared by the command modules.
"""

from pathlib import Path
from typing import Optional

import typer

from codemap.blueprint import Blueprint, load_file
from codemap.exceptions import BlueprintLoadError
from codemap.paths import find_blueprint_path, get_paths

from .output import print_error


def resolve_blueprint_path(blueprint_path: Optional[Path] = None) -> Path:
    """
    Get the blueprint path, checking existence.

    Raises:
        typer.Exit: If no blueprint document exists
    """
    if blueprint_path is None:
        blueprint_path = find_blueprint_path()

    if blueprint_path is None or not blueprint_path.exists():
        print_error(
            f"Blueprint not found (checked {blueprint_path or get_paths().blueprint_file})",
            code="BLUEPRINT_NOT_FOUND",
            suggest=["codemap generate FACTS", "--blueprint PATH"],
        )
        raise typer.Exit(code=1)

    return blueprint_path


def load_blueprint_or_exit(blueprint_path: Optional[Path] = None) -> Blueprint:
    """
    Load the blueprint or exit with a structured error.

    Raises:
        typer.Exit: If the blueprint is missing or cannot be loaded
    """
    path = resolve_blueprint_path(blueprint_path)
    try:
        return load_file(path)
    except BlueprintLoadError as e:
        print_error(f"Error loading blueprint: {e}", code=type(e).__name__, input_value=str(path))
        raise typer.Exit(code=1)
