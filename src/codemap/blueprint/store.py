"""Blueprint persistence: a single JSON document with camelCase keys."""

import json
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from pydantic import ValidationError

from codemap.exceptions import IncompatibleVersionError, MalformedBlueprintError
from codemap.logging_config import logger

from .schemas import Blueprint

FORMAT_VERSION = "2.0.0"
REQUIRED_SECTIONS = ("meta", "project", "modules", "symbols", "references")


def parse_version(version: str) -> Tuple[int, ...]:
    """Parse "major.minor.patch" into a comparable tuple."""
    try:
        return tuple(int(part) for part in version.split("."))
    except (AttributeError, ValueError) as exc:
        raise MalformedBlueprintError(
            f"Unparseable blueprint version {version!r}", section="meta"
        ) from exc


def save(blueprint: Blueprint) -> bytes:
    """Serialize a blueprint to UTF-8 JSON bytes."""
    payload = blueprint.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def load(data: Union[bytes, str]) -> Blueprint:
    """
    Parse and validate a blueprint document.

    The edge index is built before returning, so queries against the
    result never scan whole edge lists.

    Raises:
        MalformedBlueprintError: Invalid JSON or a required section is missing.
        IncompatibleVersionError: Document written by a newer format version.
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedBlueprintError(f"Blueprint is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise MalformedBlueprintError("Blueprint document must be a JSON object")

    for section in REQUIRED_SECTIONS:
        if section not in raw:
            raise MalformedBlueprintError(
                f"Blueprint is missing required section '{section}'", section=section
            )

    _check_version(raw["meta"])

    try:
        blueprint = Blueprint.model_validate(raw)
    except ValidationError as exc:
        raise MalformedBlueprintError(f"Blueprint has invalid structure: {exc}") from exc

    # An explicit null is kept as written; only an absent section is recomputed
    if "statistics" not in raw:
        from .statistics import StatisticsAggregator

        logger.debug("Blueprint has no statistics section, recomputing")
        blueprint = blueprint.model_copy(
            update={"statistics": StatisticsAggregator().compute(blueprint)}
        )

    # Warm the endpoint index
    blueprint.edges
    return blueprint


def _check_version(meta: Dict[str, Any]) -> None:
    if not isinstance(meta, dict) or "version" not in meta:
        raise MalformedBlueprintError("Blueprint meta has no version", section="meta")

    found = meta["version"]
    if parse_version(found) > parse_version(FORMAT_VERSION):
        raise IncompatibleVersionError(found, FORMAT_VERSION)


def save_file(blueprint: Blueprint, path: Path) -> Path:
    """Persist a blueprint to disk, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(save(blueprint))
    logger.info(
        f"Wrote blueprint with {len(blueprint.modules)} modules to {path}"
    )
    return path


def load_file(path: Path) -> Blueprint:
    """
    Load a blueprint from disk.

    Raises:
        FileNotFoundError: If the path does not exist.
        BlueprintLoadError: See load().
    """
    path = Path(path)
    blueprint = load(path.read_bytes())
    logger.info(f"Loaded blueprint '{blueprint.project.name}' from {path}")
    return blueprint
