"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode.
"""

import json
import re
from typing import Any, Optional

import typer
from rich.console import Console as RichConsole
from rich.table import Table

from codemap.cli.config import CLIConfig

_MARKUP = re.compile(r"\[/?[a-z ]+\]")


class MachineAwareConsole:
    """
    A Console wrapper that automatically adapts output based on machine mode.
    Acts as a drop-in replacement for rich.console.Console.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if not CLIConfig.is_machine_mode():
            self._rich_console.print(*args, **kwargs)
            return

        for arg in args:
            if isinstance(arg, str):
                plain = _MARKUP.sub("", arg).strip()
                if plain:
                    print(plain)
            elif isinstance(arg, Table) or hasattr(arg, "__rich__"):
                # Tables are human-only; machine callers use --json
                pass
            elif arg:
                print(arg)

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def echo(message: str = "", **kwargs) -> None:
    """
    Print a message respecting machine mode.
    In machine mode, prints plain text.
    """
    if CLIConfig.is_machine_mode():
        print(message, **kwargs)
    else:
        typer.echo(message, **kwargs)


def print_table(table: Table) -> None:
    """Print a rich table in human mode; machine mode callers should emit JSON instead."""
    if not CLIConfig.is_machine_mode():
        _console.print(table)


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':'), ensure_ascii=False))
    else:
        echo(json.dumps(data, indent=2, ensure_ascii=False))


def print_model(model: Any) -> None:
    """Print a pydantic model (or list of models) as camelCase JSON."""
    if isinstance(model, list):
        print_json([item.model_dump(mode="json", by_alias=True) for item in model])
    else:
        print_json(model.model_dump(mode="json", by_alias=True))


def structured_error(code: str, message: str, input_value: Optional[str] = None,
                     suggestions: Optional[list] = None) -> dict:
    """
    Create a structured error object for machine mode.

    Args:
        code: Error code (e.g., "SYMBOL_NOT_FOUND", "BLUEPRINT_NOT_FOUND")
        message: Human-readable error message
        input_value: The input that caused the error
        suggestions: List of alternative suggestions

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    if suggestions:
        error_obj["suggestions"] = suggestions
    return error_obj


def print_error(message: str, code: Optional[str] = None, input_value: Optional[str] = None,
                suggest: Optional[list] = None) -> None:
    """
    Print an error message respecting machine mode.
    In machine mode, outputs a structured JSON error.
    """
    if CLIConfig.is_machine_mode():
        print_json(structured_error(code or "ERROR", message, input_value, suggest))
    else:
        typer.echo(f"Error: {message}", err=True)
        if suggest:
            typer.echo(f"Suggestions: {', '.join(suggest)}", err=True)


def get_console() -> MachineAwareConsole:
    """
    Get the console instance for advanced usage.
    Note: Direct console usage should check machine mode.
    """
    return _console
