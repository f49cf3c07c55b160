"""Scenario flow generator: call-graph walk from entry symbols to a flow diagram."""

from collections import deque
from typing import Dict, List, Optional, Sequence, Set, Tuple

from codemap.logging_config import logger

from .edge_index import short_name
from .results import FlowEdge, FlowNode, ScenarioFlow
from .schemas import Blueprint, SymbolCall

DATA_KINDS = ("constant", "variable")


class ScenarioFlowGenerator:
    """
    Breadth-first walk over symbol calls.

    The visited set is global to the walk: every symbol becomes exactly
    one node no matter how many paths reach it, which guarantees
    termination on recursive call graphs (diamonds merge).
    """

    def build(
        self,
        blueprint: Blueprint,
        entry_ids: Sequence[str],
        max_depth: int = 5,
        title: Optional[str] = None,
    ) -> ScenarioFlow:
        edges_index = blueprint.edges
        nodes: Dict[str, FlowNode] = {}
        edges: List[FlowEdge] = []
        seen_edges: Set[Tuple[str, str]] = set()
        # BFS discovery parent of each node, for back-edge detection
        parents: Dict[str, Optional[str]] = {}
        unknown: List[str] = []
        queue = deque()
        seeds = list(dict.fromkeys(entry_ids))

        for entry_id in seeds:
            if edges_index.symbol(entry_id) is None:
                unknown.append(entry_id)
                continue
            nodes[entry_id] = self._make_node(blueprint, entry_id, 0, is_entry=True)
            parents[entry_id] = None
            queue.append(entry_id)

        if unknown:
            logger.debug(f"Scenario flow skipped unknown entries: {unknown}")

        while queue:
            source_id = queue.popleft()
            source = nodes[source_id]
            if source.depth >= max_depth:
                continue

            calls = sorted(edges_index.callees_of(source_id), key=lambda c: c.callee_symbol_id)
            branching = len(edges_index.distinct_callees(source_id)) > 1
            for call in calls:
                target_id = call.callee_symbol_id
                target = nodes.get(target_id)
                back_edge = target is not None and _is_ancestor(target_id, source_id, parents)
                if target is None:
                    nodes[target_id] = self._make_node(blueprint, target_id, source.depth + 1)
                    parents[target_id] = source_id
                    if not nodes[target_id].external:
                        queue.append(target_id)

                if (source_id, target_id) in seen_edges:
                    continue
                seen_edges.add((source_id, target_id))
                edges.append(
                    FlowEdge(
                        source=source_id,
                        target=target_id,
                        type=self._edge_type(blueprint, call, back_edge, branching),
                        call_type=call.call_type,
                    )
                )

        if title is None:
            known = [nodes[e].label for e in seeds if e in nodes]
            title = f"Flow from {', '.join(known)}" if known else "Empty flow"

        return ScenarioFlow(
            title=title,
            entry_ids=[e for e in seeds if e not in unknown],
            unknown_entries=unknown,
            nodes=list(nodes.values()),
            edges=edges,
            max_depth=max_depth,
        )

    @staticmethod
    def _make_node(blueprint: Blueprint, symbol_id: str, depth: int, is_entry: bool = False) -> FlowNode:
        edges_index = blueprint.edges
        symbol = edges_index.symbol(symbol_id)
        if symbol is None:
            return FlowNode(
                id=symbol_id,
                label=short_name(symbol_id),
                role="end",
                depth=depth,
                external=True,
            )

        callees = edges_index.distinct_callees(symbol_id)
        if is_entry:
            role = "entry"
        elif len(callees) > 1:
            role = "decision"
        elif not callees and symbol.kind in DATA_KINDS:
            role = "data"
        elif not callees:
            role = "end"
        else:
            role = "process"

        return FlowNode(
            id=symbol_id,
            label=symbol.name,
            role=role,
            module_id=symbol.module_id,
            depth=depth,
            description=symbol.semantic.description if symbol.semantic else None,
        )

    @staticmethod
    def _edge_type(blueprint: Blueprint, call: SymbolCall, back_edge: bool, branching: bool) -> str:
        if back_edge:
            return "loop"
        callee = blueprint.edges.symbol(call.callee_symbol_id)
        signature = (callee.signature or "") if callee else ""
        if call.call_type == "callback" or signature.lstrip().startswith("async "):
            return "async"
        if branching:
            return "conditional"
        return "normal"


def _is_ancestor(candidate: str, node: str, parents: Dict[str, Optional[str]]) -> bool:
    """True if candidate is node itself or on its discovery chain."""
    current: Optional[str] = node
    while current is not None:
        if current == candidate:
            return True
        current = parents.get(current)
    return False
