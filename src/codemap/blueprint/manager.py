"""Loaded-blueprint lifecycle: lazy load and atomic reload."""
from pathlib import Path
from typing import Optional
import threading

from loguru import logger

from codemap.paths import find_blueprint_path

from .schemas import Blueprint
from .store import load_file


class BlueprintManager:
    """
    Holds the active Blueprint for a long-running host process.

    Features:
    - Lazy loading on first access
    - reload() parses the new document completely before swapping the
      reference under a lock, so readers holding the old Blueprint finish
      against a consistent snapshot
    - Thread-safe singleton pattern
    """

    _instance: Optional["BlueprintManager"] = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return

        self._blueprint: Optional[Blueprint] = None
        self._blueprint_path: Optional[Path] = None
        self._swap_lock = threading.Lock()
        self._generation = 0
        self._initialized = True

    @property
    def blueprint_path(self) -> Optional[Path]:
        return self._blueprint_path

    @property
    def generation(self) -> int:
        """Number of successful loads; bumps on every swap."""
        return self._generation

    def get_blueprint(self) -> Blueprint:
        """
        Get the active blueprint, loading lazily on first access.

        Raises:
            FileNotFoundError: If no blueprint can be discovered
            BlueprintLoadError: If the discovered document cannot be loaded
        """
        blueprint = self._blueprint
        if blueprint is None:
            blueprint = self.reload()
        return blueprint

    def reload(self, path: Optional[Path] = None) -> Blueprint:
        """Load a blueprint and swap it in. The old one stays active on failure."""
        target = Path(path) if path is not None else (self._blueprint_path or self._discover_path())
        logger.info(f"Loading blueprint from {target}")
        blueprint = load_file(target)
        self.set_blueprint(blueprint, target)
        return blueprint

    def set_blueprint(self, blueprint: Blueprint, path: Optional[Path] = None) -> None:
        """Swap in an already-built blueprint (e.g. straight from the generator)."""
        with self._swap_lock:
            self._blueprint = blueprint
            if path is not None:
                self._blueprint_path = Path(path)
            self._generation += 1
        logger.debug(f"Blueprint swapped in (generation {self._generation})")

    def invalidate(self):
        """Drop the cached blueprint - next get_blueprint() will reload."""
        with self._swap_lock:
            self._blueprint = None
        logger.debug("Blueprint cache invalidated")

    def _discover_path(self) -> Path:
        """
        Auto-discover the blueprint document.

        Raises:
            FileNotFoundError: If nothing is found
        """
        path = find_blueprint_path()
        if path is not None:
            return path
        raise FileNotFoundError(
            "No blueprint found. Checked:\n"
            "  - $CODEMAP_BLUEPRINT environment variable\n"
            "  - .codemap/blueprint.json\n"
            "  - blueprint.path in codemap.toml\n"
            "Run 'codemap generate' to create one."
        )

    def get_info(self) -> dict:
        blueprint = self.get_blueprint()
        stats = blueprint.statistics
        return {
            "blueprint_path": str(self._blueprint_path) if self._blueprint_path else "",
            "project": blueprint.project.name,
            "version": blueprint.meta.version,
            "generated_at": blueprint.meta.generated_at,
            "generation": self._generation,
            "total_modules": stats.total_modules if stats else len(blueprint.modules),
            "total_symbols": stats.total_symbols if stats else sum(1 for _ in blueprint.iter_symbols()),
        }


_manager: Optional[BlueprintManager] = None


def get_blueprint_manager() -> BlueprintManager:
    """Get the global BlueprintManager instance."""
    global _manager
    if _manager is None:
        _manager = BlueprintManager()
    return _manager
