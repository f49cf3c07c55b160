"""Architecture layer classifier.

Assigns every module exactly one layer: an explicit
semantic.architecture_layer naming a known layer wins, then the path rule
table, then content features (imports and symbol names), then the
infrastructure default.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from .results import ClassificationResult
from .schemas import Blueprint, Module, Symbol

LAYER_ORDER = ("presentation", "business", "data", "infrastructure", "crossCutting")

LAYER_DESCRIPTIONS = {
    "presentation": "User interface: components, pages, views and rendering",
    "business": "Core business logic: domain models, services, tools and commands",
    "data": "Data access: API clients, databases and storage",
    "infrastructure": "Infrastructure: utilities, configuration and type definitions",
    "crossCutting": "Cross-cutting concerns: auth, logging, middleware and plugins",
}


@dataclass(frozen=True)
class LayerRule:
    """A set of path patterns that place a module in a layer."""

    patterns: Tuple[Pattern, ...]
    layer: str
    sub_layer: Optional[str]
    priority: int


def _rule(patterns: Sequence[str], layer: str, sub_layer: str, priority: int) -> LayerRule:
    return LayerRule(
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        layer=layer,
        sub_layer=sub_layer,
        priority=priority,
    )


LAYER_RULES: Tuple[LayerRule, ...] = (
    _rule([r"/ui/", r"/components?/", r"/pages?/", r"/views?/", r"/screens?/",
           r"/layouts?/", r"/templates/", r"\.tsx$", r"\.jsx$", r"\.vue$"],
          "presentation", "components", 10),
    _rule([r"/styles?/", r"/css/", r"/themes?/", r"\.css$", r"\.scss$", r"\.less$"],
          "presentation", "styles", 10),
    _rule([r"/core/", r"/domain/", r"/business/", r"/logic/", r"/services?/", r"/usecases?/"],
          "business", "core", 20),
    _rule([r"/tools?/"], "business", "tools", 15),
    _rule([r"/commands?/"], "business", "commands", 15),
    _rule([r"/apis?/", r"/client/", r"/http/", r"/fetch/", r"/request/"],
          "data", "api", 20),
    _rule([r"/db/", r"/database/", r"/repositories?/", r"/storage/", r"/cache/", r"/session/"],
          "data", "storage", 20),
    _rule([r"/configs?/", r"/settings?/", r"/env/"], "infrastructure", "config", 5),
    _rule([r"/utils?/", r"/helpers?/", r"/lib/", r"/common/", r"/shared/"],
          "infrastructure", "utils", 5),
    _rule([r"/types?/", r"/interfaces?/", r"/models?/", r"\.d\.ts$"],
          "infrastructure", "types", 5),
    _rule([r"/hooks?/"], "crossCutting", "hooks", 15),
    _rule([r"/middleware/", r"/interceptors?/"], "crossCutting", "middleware", 15),
    _rule([r"/log(ging)?/", r"/monitor(ing)?/", r"/telemetry/", r"/analytics?/"],
          "crossCutting", "logging", 15),
    _rule([r"/auth(entication)?/", r"/permissions?/", r"/security/", r"/oauth/"],
          "crossCutting", "auth", 15),
    _rule([r"/plugins?/", r"/extensions?/", r"/addons?/"], "crossCutting", "plugins", 15),
)

UI_IMPORT_HINTS = ("react", "ink", "vue", "svelte", "tkinter", "textual")
DB_IMPORT_HINTS = ("mongo", "mysql", "postgres", "redis", "sqlite", "sqlalchemy", "prisma")
API_IMPORT_HINTS = ("axios", "fetch", "http", "requests")
UI_NAME_SUFFIXES = ("Component", "View", "Page")


class LayerClassifier:
    """Deterministic, total module classifier."""

    def __init__(self, rules: Sequence[LayerRule] = LAYER_RULES):
        self.rules = tuple(rules)

    def classify(self, module: Module, symbols: Sequence[Symbol] = ()) -> ClassificationResult:
        if module.semantic and module.semantic.architecture_layer in LAYER_ORDER:
            return ClassificationResult(
                layer=module.semantic.architecture_layer,
                confidence=max(module.semantic.confidence, 0.9),
                matched_rules=["semantic"],
            )

        by_path = self._classify_by_path(module.id)
        if by_path is not None:
            return by_path
        return self._classify_by_content(module, symbols)

    def classify_all(self, blueprint: Blueprint) -> Dict[str, ClassificationResult]:
        return {
            module_id: self.classify(module, blueprint.module_symbols(module_id))
            for module_id, module in blueprint.modules.items()
        }

    def _classify_by_path(self, module_id: str) -> Optional[ClassificationResult]:
        # Leading slash lets top-level directories match "/name/" patterns
        path = "/" + module_id.replace("\\", "/")

        best: Optional[Tuple[LayerRule, List[str]]] = None
        for rule in self.rules:
            matched = [p.pattern for p in rule.patterns if p.search(path)]
            if not matched:
                continue
            if best is None or (rule.priority, len(matched)) > (best[0].priority, len(best[1])):
                best = (rule, matched)

        if best is None:
            return None
        rule, matched = best
        return ClassificationResult(
            layer=rule.layer,
            sub_layer=rule.sub_layer,
            confidence=min(0.9, 0.5 + 0.1 * len(matched)),
            matched_rules=matched,
        )

    @staticmethod
    def _classify_by_content(module: Module, symbols: Sequence[Symbol]) -> ClassificationResult:
        imports = [imp.lower() for imp in module.imports]

        def imports_any(hints):
            return any(hint in imp for imp in imports for hint in hints)

        has_ui = imports_any(UI_IMPORT_HINTS) or any(
            (s.kind == "class" and s.name.endswith(UI_NAME_SUFFIXES))
            or (s.kind == "function" and len(s.name) > 3 and s.name.startswith("use") and s.name[3].isupper())
            for s in symbols
        )
        if has_ui:
            return ClassificationResult(layer="presentation", confidence=0.7, matched_rules=["content:ui"])
        if imports_any(DB_IMPORT_HINTS):
            return ClassificationResult(
                layer="data", sub_layer="storage", confidence=0.7, matched_rules=["content:database"]
            )
        if imports_any(API_IMPORT_HINTS):
            return ClassificationResult(
                layer="data", sub_layer="api", confidence=0.6, matched_rules=["content:api"]
            )
        if any(
            s.kind in ("constant", "variable") and ("config" in s.name.lower() or "settings" in s.name.lower())
            for s in symbols
        ):
            return ClassificationResult(
                layer="infrastructure", sub_layer="config", confidence=0.6, matched_rules=["content:config"]
            )
        return ClassificationResult(layer="infrastructure", confidence=0.3, matched_rules=["default"])


def get_layer_description(layer: str) -> str:
    return LAYER_DESCRIPTIONS.get(layer, "")
