"""Scenario detection: propose named execution scenarios and their entry symbols."""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple

from .entry_points import EntryPointDetector
from .results import Scenario
from .schemas import Blueprint, Symbol


@dataclass(frozen=True)
class ScenarioPattern:
    id: str
    name: str
    description: str
    module_patterns: Tuple[Pattern, ...]
    symbol_patterns: Tuple[Pattern, ...]
    keywords: Tuple[str, ...]


def _pattern(id, name, description, modules, symbols, keywords) -> ScenarioPattern:
    return ScenarioPattern(
        id=id,
        name=name,
        description=description,
        module_patterns=tuple(re.compile(p) for p in modules),
        symbol_patterns=tuple(re.compile(p, re.IGNORECASE) for p in symbols),
        keywords=tuple(keywords),
    )


SCENARIO_PATTERNS: Tuple[ScenarioPattern, ...] = (
    _pattern("cli-input", "CLI command handling",
             "User enters a command, arguments are parsed, the handler runs, the result is returned",
             [r"cli", r"command", r"parser"], [r"parse|execute|run|handle"],
             ["cli", "command", "argument", "parse"]),
    _pattern("api-request", "API request flow",
             "Request received, parameters validated, service called, response returned",
             [r"api|client|request|fetch"], [r"request|fetch|send|call"],
             ["api", "request", "response", "http"]),
    _pattern("message-flow", "Message processing",
             "Message received, content parsed, logic applied, reply produced",
             [r"message|conversation|chat|loop"], [r"send|receive|process|handle.*message"],
             ["message", "conversation", "chat", "response"]),
    _pattern("tool-execution", "Tool execution",
             "Tool call received, arguments validated, tool executed, result returned",
             [r"tool|executor|handler"], [r"execute|run|invoke|call.*tool"],
             ["tool", "execute", "invoke", "result"]),
    _pattern("session-management", "Session management",
             "Session created, state saved, session restored, resources cleaned up",
             [r"session|state|store|persistence"], [r"create|save|load|restore|clear"],
             ["session", "state", "persistence", "storage"]),
    _pattern("config-load", "Configuration loading",
             "Config read, format validated, defaults merged, settings applied",
             [r"config|settings|env"], [r"load|read|parse|merge.*config"],
             ["config", "settings", "environment", "options"]),
    _pattern("plugin-lifecycle", "Plugin lifecycle",
             "Plugins discovered, loaded, initialized and their hooks invoked",
             [r"plugin|hook|extension"], [r"register|init|load|unload|hook"],
             ["plugin", "hook", "extension", "lifecycle"]),
    _pattern("file-operation", "File operations",
             "File read, content processed, file written, result verified",
             [r"file|fs|io|read|write"], [r"read|write|edit|delete.*file"],
             ["file", "read", "write", "edit", "path"]),
)

ENTRY_KINDS = ("function", "method", "class")


class ScenarioDetector:
    """Matches the scenario pattern table against a blueprint.

    A scenario is proposed when at least min_modules module ids or
    min_symbols symbol names match it. When nothing matches, a single
    "default" scenario is seeded from the detected entry-point modules.
    """

    def __init__(
        self,
        patterns: Sequence[ScenarioPattern] = SCENARIO_PATTERNS,
        min_modules: int = 2,
        min_symbols: int = 3,
        max_entry_modules: int = 3,
        max_entry_symbols: int = 5,
        detector: Optional[EntryPointDetector] = None,
    ):
        self.patterns = tuple(patterns)
        self.min_modules = min_modules
        self.min_symbols = min_symbols
        self.max_entry_modules = max_entry_modules
        self.max_entry_symbols = max_entry_symbols
        self.detector = detector or EntryPointDetector()

    def detect(self, blueprint: Blueprint) -> List[Scenario]:
        scenarios = []
        for pattern in self.patterns:
            modules = [
                m.id for m in blueprint.modules.values()
                if any(p.search(m.id) or p.search(m.name) for p in pattern.module_patterns)
            ]
            matched_symbols = [
                s for s in blueprint.iter_symbols()
                if any(p.search(s.name) for p in pattern.symbol_patterns)
            ]
            if len(modules) < self.min_modules and len(matched_symbols) < self.min_symbols:
                continue

            entry_modules = self._rank_modules(blueprint, modules, pattern.keywords)
            scenarios.append(
                Scenario(
                    id=pattern.id,
                    name=pattern.name,
                    description=pattern.description,
                    keywords=list(pattern.keywords),
                    modules=entry_modules,
                    entry_symbols=self._entry_symbols(blueprint, entry_modules, pattern, matched_symbols),
                )
            )

        if not scenarios:
            entry_modules = self.detector.detect(blueprint)
            scenarios.append(
                Scenario(
                    id="default",
                    name="Project entry flow",
                    description="Execution starting from the detected entry points",
                    keywords=["entry", "main", "index"],
                    modules=entry_modules,
                    entry_symbols=self._entry_symbols(blueprint, entry_modules, None, []),
                )
            )
        return scenarios

    def _rank_modules(self, blueprint: Blueprint, module_ids: List[str], keywords) -> List[str]:
        scored = []
        for module_id in module_ids:
            module = blueprint.modules[module_id]
            description = (module.semantic.description if module.semantic else "").lower()
            score = 0
            for keyword in keywords:
                if keyword in module.id.lower() or keyword in module.name.lower():
                    score += 5
                if keyword in description:
                    score += 3
            if not blueprint.edges.is_imported(module_id):
                score += 10
            scored.append((score, module_id))
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [module_id for _, module_id in scored[: self.max_entry_modules]]

    def _entry_symbols(
        self,
        blueprint: Blueprint,
        module_ids: List[str],
        pattern: Optional[ScenarioPattern],
        matched: List[Symbol],
    ) -> List[str]:
        """Symbols to seed a flow from: pattern matches in the entry modules, else their top-level callables."""
        wanted = set(module_ids)
        chosen = [s.id for s in matched if s.module_id in wanted and s.kind in ENTRY_KINDS]
        if not chosen:
            for module_id in module_ids:
                chosen.extend(
                    s.id for s in blueprint.module_symbols(module_id)
                    if s.parent is None and s.kind in ENTRY_KINDS
                )
        if not chosen and pattern is not None:
            chosen = [s.id for s in matched if s.kind in ENTRY_KINDS]
        return list(dict.fromkeys(chosen))[: self.max_entry_symbols]
