"""Cross-reference lookups: symbol callers/callees/type edges, module detail, search."""

from collections import defaultdict
from typing import List, Optional

from .edge_index import short_name
from .layer_classifier import LayerClassifier
from .results import (
    CallReference,
    ModuleDetail,
    SearchHit,
    SymbolReferences,
    TypeReferenceEntry,
)
from .schemas import Blueprint, SymbolCall


class ReferenceQueryService:
    """
    Resolves the edges touching one symbol or module.

    Every lookup goes through the blueprint's EdgeIndex, so cost is
    proportional to the edges touching the entity. Far ends that are not
    in the blueprint are returned with a placeholder name and
    external=True rather than dropped.
    """

    def get_references(self, blueprint: Blueprint, symbol_id: str) -> Optional[SymbolReferences]:
        edges = blueprint.edges
        symbol = edges.symbol(symbol_id)
        if symbol is None:
            return None

        callers = [
            self._call_reference(blueprint, call.caller_symbol_id, call)
            for call in edges.callers_of(symbol_id)
        ]
        callees = [
            self._call_reference(blueprint, call.callee_symbol_id, call)
            for call in edges.callees_of(symbol_id)
        ]

        type_refs: List[TypeReferenceEntry] = []
        for ref in edges.type_refs_from(symbol_id):
            type_refs.append(self._type_reference(blueprint, ref.target, ref.kind, ref.direction))
        for ref in edges.type_refs_to(symbol_id):
            if ref.source == symbol_id:
                continue  # self edge, already listed above
            flipped = "child" if ref.direction == "parent" else "parent"
            type_refs.append(self._type_reference(blueprint, ref.source, ref.kind, flipped))

        return SymbolReferences(
            symbol_id=symbol.id,
            name=symbol.name,
            module_id=symbol.module_id,
            callers=callers,
            callees=callees,
            type_refs=type_refs,
        )

    @staticmethod
    def _call_reference(blueprint: Blueprint, far_id: str, call: SymbolCall) -> CallReference:
        far = blueprint.edges.symbol(far_id)
        return CallReference(
            symbol_id=far_id,
            name=far.name if far else short_name(far_id),
            module_id=far.module_id if far else None,
            call_type=call.call_type,
            line=call.line,
            external=far is None,
        )

    @staticmethod
    def _type_reference(blueprint: Blueprint, far_id: str, kind: str, direction: str) -> TypeReferenceEntry:
        far = blueprint.edges.symbol(far_id)
        return TypeReferenceEntry(
            symbol_id=far_id,
            name=far.name if far else short_name(far_id),
            module_id=far.module_id if far else None,
            kind=kind,
            direction=direction,
            external=far is None,
        )

    def get_module_detail(
        self,
        blueprint: Blueprint,
        module_id: str,
        classifier: Optional[LayerClassifier] = None,
    ) -> Optional[ModuleDetail]:
        """Symbols grouped by kind plus internal/external imports of one module."""
        module = blueprint.get_module(module_id)
        if module is None:
            return None

        symbols = blueprint.module_symbols(module_id)
        by_kind = defaultdict(list)
        for symbol in symbols:
            by_kind[symbol.kind].append(symbol.id)

        internal = [imp for imp in module.imports if imp in blueprint.modules]
        external = [imp for imp in module.imports if imp not in blueprint.modules]
        imported_by = sorted({dep.source for dep in blueprint.edges.incoming_deps(module_id)})

        classification = (classifier or LayerClassifier()).classify(module, symbols)
        return ModuleDetail(
            id=module.id,
            name=module.name,
            language=module.language,
            lines=module.lines,
            layer=classification.layer,
            semantic=module.semantic,
            symbols_by_kind={kind: ids for kind, ids in sorted(by_kind.items())},
            internal_imports=internal,
            external_imports=external,
            imported_by=imported_by,
        )

    def search(self, blueprint: Blueprint, query: str, limit: int = 50) -> List[SearchHit]:
        """
        Case-insensitive substring search over module and symbol names.

        Exact name matches rank first, then prefix matches, then the rest.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        def rank(name: str) -> int:
            lowered = name.lower()
            if lowered == needle:
                return 3
            if lowered.startswith(needle):
                return 2
            return 1

        hits: List[SearchHit] = []
        for module in blueprint.modules.values():
            if needle in module.id.lower():
                hits.append(SearchHit(id=module.id, name=module.name, type="module", score=rank(module.name)))
        for symbol in blueprint.iter_symbols():
            if needle in symbol.name.lower():
                hits.append(
                    SearchHit(
                        id=symbol.id,
                        name=symbol.name,
                        type="symbol",
                        kind=symbol.kind,
                        module_id=symbol.module_id,
                        score=rank(symbol.name),
                    )
                )

        hits.sort(key=lambda hit: (-hit.score, hit.id))
        return hits[:limit]
