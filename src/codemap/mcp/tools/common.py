"""Shared helpers for MCP tools."""
from typing import Any, Optional, Tuple

from loguru import logger

from codemap.blueprint import Blueprint, get_blueprint_manager
from codemap.exceptions import BlueprintLoadError


def error(error_type: str, message: str, **extra: Any) -> dict:
    return {"status": "error", "error_type": error_type, "message": message, **extra}


def active_blueprint() -> Tuple[Optional[Blueprint], Optional[dict]]:
    """
    Fetch the active blueprint from the global manager.

    Returns:
        (blueprint, None) on success, (None, error dict) otherwise
    """
    try:
        return get_blueprint_manager().get_blueprint(), None
    except FileNotFoundError as e:
        return None, error("blueprint_not_found", str(e))
    except BlueprintLoadError as e:
        logger.error(f"Failed to load blueprint: {e}")
        return None, error("blueprint_load_failed", str(e), exception=type(e).__name__)


def dump(model) -> Any:
    """camelCase JSON-compatible form of a result model or list of models."""
    if isinstance(model, list):
        return [item.model_dump(mode="json", by_alias=True) for item in model]
    return model.model_dump(mode="json", by_alias=True)
