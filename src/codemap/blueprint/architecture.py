"""Architecture view: layer membership plus directory-based blocks."""

import re
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from codemap.tracing import trace

from .layer_classifier import LAYER_ORDER, LayerClassifier, get_layer_description
from .results import ArchitectureBlock, ArchitectureView, BlockEdge, LayerInfo
from .schemas import Blueprint, Module


@dataclass(frozen=True)
class BlockTypeRule:
    pattern: Pattern
    type: str
    name: str


def _block_rule(prefix: str, block_type: str, name: str) -> BlockTypeRule:
    return BlockTypeRule(re.compile(rf"^(src/)?{prefix}"), block_type, name)


# First match wins
BLOCK_TYPE_RULES: Tuple[BlockTypeRule, ...] = (
    _block_rule("cli", "entry", "Program entry"),
    _block_rule("core", "core", "Core engine"),
    _block_rule("tools?", "feature", "Tool system"),
    _block_rule("commands?", "feature", "Command handling"),
    _block_rule("ui", "ui", "User interface"),
    _block_rule("hooks?", "feature", "Hook system"),
    _block_rule("plugins?", "feature", "Plugin system"),
    _block_rule("config", "config", "Configuration"),
    _block_rule("session", "data", "Session management"),
    _block_rule("context", "core", "Context management"),
    _block_rule("streaming", "core", "Stream processing"),
    _block_rule("providers?", "core", "API providers"),
    _block_rule("utils?", "util", "Utilities"),
    _block_rule("parser", "util", "Code parsing"),
    _block_rule("search", "util", "Code search"),
    _block_rule("map", "feature", "Code map"),
    _block_rule("mcp", "feature", "MCP service"),
    _block_rule("ide", "feature", "IDE integration"),
)

BLOCK_TYPE_ORDER = {
    "entry": 0, "core": 1, "feature": 2, "ui": 3, "data": 4, "config": 5, "util": 6,
}


def block_dir(module_id: str) -> str:
    """Directory a module is grouped under.

    Top-level files share ".", files one level deep group by their
    top directory, deeper files by their parent directory.
    """
    parts = module_id.split("/")
    if len(parts) == 1:
        return "."
    if len(parts) == 2:
        return parts[0]
    return "/".join(parts[:-1])


def _parent_block(block_id: str, block_ids) -> Optional[str]:
    parts = block_id.split("/")
    while len(parts) > 1:
        parts = parts[:-1]
        candidate = "/".join(parts)
        if candidate in block_ids:
            return candidate
    return None


class ArchitectureBuilder:
    """Builds the layered and block views of a blueprint."""

    def __init__(self, classifier: Optional[LayerClassifier] = None):
        self.classifier = classifier or LayerClassifier()

    @trace
    def build(self, blueprint: Blueprint) -> ArchitectureView:
        classifications = self.classifier.classify_all(blueprint)
        layers = self._build_layers(classifications)
        blocks, block_edges = self._build_blocks(blueprint, classifications)

        project_semantic = blueprint.project.semantic
        return ArchitectureView(
            project_name=blueprint.project.name,
            project_description=project_semantic.description if project_semantic else "",
            layers=layers,
            blocks=blocks,
            block_edges=block_edges,
        )

    @staticmethod
    def _build_layers(classifications) -> List[LayerInfo]:
        members: Dict[str, List[str]] = defaultdict(list)
        sub_layers: Dict[str, Dict[str, List[str]]] = defaultdict(lambda: defaultdict(list))
        for module_id, result in classifications.items():
            members[result.layer].append(module_id)
            if result.sub_layer:
                sub_layers[result.layer][result.sub_layer].append(module_id)

        return [
            LayerInfo(
                name=layer,
                description=get_layer_description(layer),
                modules=sorted(members.get(layer, [])),
                sub_layers={
                    name: sorted(ids) for name, ids in sorted(sub_layers.get(layer, {}).items())
                },
            )
            for layer in LAYER_ORDER
        ]

    def _build_blocks(
        self, blueprint: Blueprint, classifications
    ) -> Tuple[List[ArchitectureBlock], List[BlockEdge]]:
        groups: Dict[str, List[Module]] = defaultdict(list)
        for module in blueprint.modules.values():
            groups[block_dir(module.id)].append(module)

        blocks: Dict[str, ArchitectureBlock] = {}
        for directory, modules in groups.items():
            modules.sort(key=lambda m: m.id)
            block_type, default_name = self._block_type(directory)
            layer_counts = Counter(classifications[m.id].layer for m in modules)
            dominant = min(layer_counts, key=lambda layer: (-layer_counts[layer], LAYER_ORDER.index(layer)))

            blocks[directory] = ArchitectureBlock(
                id=directory,
                name=default_name,
                type=block_type,
                layer=dominant,
                description=self._describe(modules, default_name),
                files=[m.id for m in modules],
                file_count=len(modules),
                total_lines=sum(m.lines for m in modules),
            )

        for block in blocks.values():
            block.parent = _parent_block(block.id, blocks)

        edges = set()
        for dep in blueprint.references.module_deps:
            if dep.source not in blueprint.modules or dep.target not in blueprint.modules:
                continue
            source, target = block_dir(dep.source), block_dir(dep.target)
            if source != target:
                edges.add((source, target))

        for source, target in edges:
            blocks[source].dependencies.append(target)
        for block in blocks.values():
            block.dependencies.sort()

        ordered = sorted(
            blocks.values(),
            key=lambda b: (BLOCK_TYPE_ORDER[b.type], -b.file_count, b.id),
        )
        return ordered, [BlockEdge(source=s, target=t) for s, t in sorted(edges)]

    @staticmethod
    def _block_type(directory: str) -> Tuple[str, str]:
        for rule in BLOCK_TYPE_RULES:
            if rule.pattern.search(directory):
                return rule.type, rule.name
        if directory == ".":
            return "util", "root"
        return "util", directory.split("/")[-1]

    @staticmethod
    def _describe(modules: List[Module], default_name: str) -> str:
        if len(modules) > 3:
            names = ", ".join(m.name.rsplit(".", 1)[0] for m in modules[:5])
            return f"Contains {names} and others ({len(modules)} modules)"
        for module in modules:
            if module.semantic and module.semantic.description:
                return module.semantic.description
        return f"{default_name} functionality"
