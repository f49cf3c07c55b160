"""Entry-point detection: rank modules by how likely they start execution."""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from codemap.config import DEFAULTS, get_section
from codemap.exceptions import ConfigError
from codemap.logging_config import logger

from .results import EntryPointCandidate
from .schemas import Blueprint, Module


@dataclass(frozen=True)
class EntryPointScoring:
    """Weights for entry-point scoring.

    Patterns are filename stems in priority order: the first one matches
    for pattern_weight * (len(patterns) - index) points.
    """

    patterns: Tuple[str, ...] = tuple(DEFAULTS["entry_points"]["patterns"])
    pattern_weight: int = DEFAULTS["entry_points"]["pattern_weight"]
    root_bonus: int = DEFAULTS["entry_points"]["root_bonus"]
    root_folders: Tuple[str, ...] = tuple(DEFAULTS["entry_points"]["root_folders"])
    unimported_bonus: int = DEFAULTS["entry_points"]["unimported_bonus"]
    import_cap: int = DEFAULTS["entry_points"]["import_cap"]
    limit: int = DEFAULTS["entry_points"]["limit"]

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "EntryPointScoring":
        try:
            scoring = cls(
                patterns=tuple(str(p).lower() for p in values["patterns"]),
                pattern_weight=int(values["pattern_weight"]),
                root_bonus=int(values["root_bonus"]),
                root_folders=tuple(values["root_folders"]),
                unimported_bonus=int(values["unimported_bonus"]),
                import_cap=int(values["import_cap"]),
                limit=int(values["limit"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid [entry_points] configuration: {exc}") from exc
        if scoring.limit < 1:
            raise ConfigError("entry_points.limit must be at least 1")
        return scoring

    @classmethod
    def from_config(cls) -> "EntryPointScoring":
        """Build from the [entry_points] section merged over DEFAULTS."""
        return cls.from_dict(get_section("entry_points"))


@dataclass
class EntryPointDetector:
    """Scores every module and returns the best entry-point candidates."""

    scoring: EntryPointScoring = field(default_factory=EntryPointScoring)

    def _pattern_match(self, module: Module) -> Tuple[Optional[str], int]:
        stem = PurePosixPath(module.id).stem.lower()
        total = len(self.scoring.patterns)
        for index, pattern in enumerate(self.scoring.patterns):
            if stem == pattern:
                return pattern, self.scoring.pattern_weight * (total - index)
        return None, 0

    def _is_root_like(self, module: Module) -> bool:
        parts = PurePosixPath(module.id).parts
        if len(parts) == 1:
            return True
        return len(parts) == 2 and parts[0] in self.scoring.root_folders

    def score_module(self, blueprint: Blueprint, module: Module) -> EntryPointCandidate:
        pattern, score = self._pattern_match(module)

        root_like = self._is_root_like(module)
        if root_like:
            score += self.scoring.root_bonus

        imported = blueprint.edges.is_imported(module.id)
        if not imported:
            score += self.scoring.unimported_bonus

        import_count = len(module.imports)
        score += min(import_count, self.scoring.import_cap)

        return EntryPointCandidate(
            id=module.id,
            score=score,
            matched_pattern=pattern,
            root_like=root_like,
            imported=imported,
            import_count=import_count,
        )

    def score(self, blueprint: Blueprint) -> List[EntryPointCandidate]:
        """All positively scored modules, best first (ties by ascending id)."""
        candidates = [
            self.score_module(blueprint, module) for module in blueprint.modules.values()
        ]
        candidates = [c for c in candidates if c.score > 0]
        candidates.sort(key=lambda c: (-c.score, c.id))
        return candidates

    def detect(self, blueprint: Blueprint, limit: Optional[int] = None) -> List[str]:
        """
        Return up to `limit` module ids most likely to be entry points.

        Best-effort heuristic; an empty blueprint yields an empty list.
        """
        limit = self.scoring.limit if limit is None else limit
        ranked = self.score(blueprint)[:limit]
        logger.debug(f"Entry points: {[(c.id, c.score) for c in ranked]}")
        return [c.id for c in ranked]
