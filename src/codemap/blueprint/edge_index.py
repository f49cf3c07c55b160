"""Endpoint index over a blueprint's reference lists.

Built once per Blueprint (see Blueprint.edges) so that per-symbol and
per-module lookups never scan the full edge set.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Set

from .schemas import Blueprint, ModuleDependency, Symbol, SymbolCall, TypeReference


def short_name(entity_id: str) -> str:
    """Placeholder name for an id that has no backing entity."""
    return entity_id.split("::")[-1]


class EdgeIndex:
    """Lookups by both endpoints for every edge kind."""

    def __init__(self, blueprint: Blueprint):
        self.symbols_by_id: Dict[str, Symbol] = {}
        for symbol in blueprint.iter_symbols():
            self.symbols_by_id[symbol.id] = symbol

        self.deps_by_source: Dict[str, List[ModuleDependency]] = defaultdict(list)
        self.deps_by_target: Dict[str, List[ModuleDependency]] = defaultdict(list)
        for dep in blueprint.references.module_deps:
            self.deps_by_source[dep.source].append(dep)
            self.deps_by_target[dep.target].append(dep)

        self.calls_by_caller: Dict[str, List[SymbolCall]] = defaultdict(list)
        self.calls_by_callee: Dict[str, List[SymbolCall]] = defaultdict(list)
        for call in blueprint.references.symbol_calls:
            self.calls_by_caller[call.caller_symbol_id].append(call)
            self.calls_by_callee[call.callee_symbol_id].append(call)

        self.type_refs_by_source: Dict[str, List[TypeReference]] = defaultdict(list)
        self.type_refs_by_target: Dict[str, List[TypeReference]] = defaultdict(list)
        for ref in blueprint.references.type_refs:
            self.type_refs_by_source[ref.source].append(ref)
            self.type_refs_by_target[ref.target].append(ref)

    def symbol(self, symbol_id: str) -> Optional[Symbol]:
        return self.symbols_by_id.get(symbol_id)

    def outgoing_deps(self, module_id: str) -> List[ModuleDependency]:
        return self.deps_by_source.get(module_id, [])

    def incoming_deps(self, module_id: str) -> List[ModuleDependency]:
        return self.deps_by_target.get(module_id, [])

    def is_imported(self, module_id: str) -> bool:
        return bool(self.deps_by_target.get(module_id))

    def callers_of(self, symbol_id: str) -> List[SymbolCall]:
        return self.calls_by_callee.get(symbol_id, [])

    def callees_of(self, symbol_id: str) -> List[SymbolCall]:
        return self.calls_by_caller.get(symbol_id, [])

    def distinct_callees(self, symbol_id: str) -> Set[str]:
        return {call.callee_symbol_id for call in self.callees_of(symbol_id)}

    def type_refs_from(self, symbol_id: str) -> List[TypeReference]:
        return self.type_refs_by_source.get(symbol_id, [])

    def type_refs_to(self, symbol_id: str) -> List[TypeReference]:
        return self.type_refs_by_target.get(symbol_id, [])
