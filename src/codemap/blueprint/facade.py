"""Query surface over a loaded Blueprint.

Every function is pure over an immutable Blueprint. Unknown roots and
symbols come back as None; callers decide how to report them.
"""

from typing import List, Optional, Sequence

from codemap.config import get_section

from .architecture import ArchitectureBuilder
from .dependency_tree import DependencyTreeBuilder
from .directory_tree import build_directory_tree
from .entry_points import EntryPointDetector, EntryPointScoring
from .references import ReferenceQueryService
from .results import (
    ArchitectureView,
    DependencyTreeNode,
    DirectoryNode,
    EntryPointCandidate,
    ModuleDetail,
    Scenario,
    ScenarioFlow,
    SearchHit,
    SymbolReferences,
)
from .scenario_flow import ScenarioFlowGenerator
from .scenarios import ScenarioDetector
from .schemas import Blueprint, Statistics
from .statistics import StatisticsAggregator

_references = ReferenceQueryService()


def detect_entry_points(
    blueprint: Blueprint,
    limit: Optional[int] = None,
    scoring: Optional[EntryPointScoring] = None,
) -> List[str]:
    """Best-effort entry modules, best first. Callers may always pick a root themselves."""
    detector = EntryPointDetector(scoring or EntryPointScoring.from_config())
    return detector.detect(blueprint, limit)


def score_entry_points(
    blueprint: Blueprint, scoring: Optional[EntryPointScoring] = None
) -> List[EntryPointCandidate]:
    return EntryPointDetector(scoring or EntryPointScoring.from_config()).score(blueprint)


def build_dependency_tree(
    blueprint: Blueprint, root_id: str, max_depth: Optional[int] = None
) -> Optional[DependencyTreeNode]:
    if max_depth is None:
        max_depth = get_section("tree")["max_depth"]
    return DependencyTreeBuilder().build(blueprint, root_id, max_depth)


def get_architecture_view(blueprint: Blueprint) -> ArchitectureView:
    return ArchitectureBuilder().build(blueprint)


def get_statistics(blueprint: Blueprint, top_n: Optional[int] = None) -> Statistics:
    """Persisted statistics when present and top_n is not overridden, else recomputed."""
    if top_n is None and blueprint.statistics is not None:
        return blueprint.statistics
    if top_n is None:
        top_n = get_section("statistics")["top_n"]
    return StatisticsAggregator(top_n=top_n).compute(blueprint)


def get_symbol_references(blueprint: Blueprint, symbol_id: str) -> Optional[SymbolReferences]:
    return _references.get_references(blueprint, symbol_id)


def build_scenario_flow(
    blueprint: Blueprint,
    entry_ids: Sequence[str],
    max_depth: Optional[int] = None,
    title: Optional[str] = None,
) -> ScenarioFlow:
    if max_depth is None:
        max_depth = get_section("flow")["max_depth"]
    return ScenarioFlowGenerator().build(blueprint, entry_ids, max_depth, title)


def detect_scenarios(blueprint: Blueprint) -> List[Scenario]:
    return ScenarioDetector(detector=EntryPointDetector(EntryPointScoring.from_config())).detect(blueprint)


def get_directory_tree(blueprint: Blueprint) -> DirectoryNode:
    return build_directory_tree(blueprint)


def get_module_detail(blueprint: Blueprint, module_id: str) -> Optional[ModuleDetail]:
    return _references.get_module_detail(blueprint, module_id)


def search_blueprint(blueprint: Blueprint, query: str, limit: Optional[int] = None) -> List[SearchHit]:
    if limit is None:
        limit = get_section("search")["limit"]
    return _references.search(blueprint, query, limit)
