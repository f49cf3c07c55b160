"""Statistics aggregation over a blueprint's modules, symbols and edges."""

from collections import Counter
from typing import Dict, Optional

from codemap.tracing import trace

from .edge_index import short_name
from .layer_classifier import LayerClassifier
from .schemas import (
    Blueprint,
    LargestFile,
    RankedModule,
    RankedSymbol,
    ReferenceStats,
    SemanticCoverage,
    Statistics,
)


def _top(counter: Dict[str, int], n: int) -> list:
    """Top n (id, count) pairs, count descending then id ascending."""
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))[:n]


class StatisticsAggregator:
    """Derives summary metrics from an assembled blueprint."""

    def __init__(self, top_n: int = 10, classifier: Optional[LayerClassifier] = None):
        self.top_n = top_n
        self.classifier = classifier or LayerClassifier()

    @trace
    def compute(self, blueprint: Blueprint) -> Statistics:
        modules = blueprint.modules
        refs = blueprint.references

        symbol_names: Dict[str, str] = {}
        symbols_with_description = 0
        for symbol in blueprint.iter_symbols():
            symbol_names[symbol.id] = symbol.name
            if symbol.semantic and symbol.semantic.description:
                symbols_with_description += 1

        # Inbound counts include dangling targets
        imported = Counter(dep.target for dep in refs.module_deps)
        called = Counter(call.callee_symbol_id for call in refs.symbol_calls)

        modules_with_description = sum(
            1 for m in modules.values() if m.semantic and m.semantic.description
        )
        coverage = modules_with_description / len(modules) if modules else 0.0

        layer_distribution = Counter(
            result.layer for result in self.classifier.classify_all(blueprint).values()
        )

        return Statistics(
            total_modules=len(modules),
            total_symbols=len(symbol_names),
            total_lines=sum(m.lines for m in modules.values()),
            language_breakdown=dict(sorted(Counter(m.language for m in modules.values()).items())),
            layer_distribution=dict(sorted(layer_distribution.items())),
            most_imported_modules=[
                RankedModule(id=module_id, count=count) for module_id, count in _top(imported, self.top_n)
            ],
            most_called_symbols=[
                RankedSymbol(
                    id=symbol_id,
                    name=symbol_names.get(symbol_id, short_name(symbol_id)),
                    count=count,
                )
                for symbol_id, count in _top(called, self.top_n)
            ],
            largest_files=[
                LargestFile(id=module_id, lines=lines)
                for module_id, lines in _top({m.id: m.lines for m in modules.values()}, self.top_n)
            ],
            semantic_coverage=SemanticCoverage(
                modules_with_description=modules_with_description,
                symbols_with_description=symbols_with_description,
                coverage=coverage,
                coverage_percent=round(coverage * 100),
            ),
            reference_stats=ReferenceStats(
                total_module_deps=len(refs.module_deps),
                total_symbol_calls=len(refs.symbol_calls),
                total_type_refs=len(refs.type_refs),
            ),
        )
