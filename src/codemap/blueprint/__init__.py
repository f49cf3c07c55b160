"""Blueprint engine: data model, persistence, generation and queries."""

from .schemas import (
    Blueprint,
    BlueprintMeta,
    FileFacts,
    Location,
    Module,
    ModuleDependency,
    ProjectInfo,
    ProjectSemantic,
    References,
    SemanticInfo,
    Statistics,
    Symbol,
    SymbolCall,
    TypeReference,
)
from .store import FORMAT_VERSION, load, load_file, save, save_file
from .edge_index import EdgeIndex
from .entry_points import EntryPointDetector, EntryPointScoring
from .dependency_tree import DependencyTreeBuilder
from .layer_classifier import LayerClassifier, LayerRule
from .architecture import ArchitectureBuilder
from .statistics import StatisticsAggregator
from .references import ReferenceQueryService
from .scenario_flow import ScenarioFlowGenerator
from .scenarios import ScenarioDetector
from .semantic import CodeContext, NullAnnotator, OllamaAnnotator, create_annotator
from .generator import BlueprintGenerator, read_facts, read_facts_file
from .manager import BlueprintManager, get_blueprint_manager
from .formatter import TreeRenderer, format_flow, format_flow_mermaid
from .facade import (
    build_dependency_tree,
    build_scenario_flow,
    detect_entry_points,
    detect_scenarios,
    get_architecture_view,
    get_directory_tree,
    get_module_detail,
    get_statistics,
    get_symbol_references,
    search_blueprint,
)

__all__ = [
    "Blueprint",
    "BlueprintMeta",
    "FileFacts",
    "Location",
    "Module",
    "ModuleDependency",
    "ProjectInfo",
    "ProjectSemantic",
    "References",
    "SemanticInfo",
    "Statistics",
    "Symbol",
    "SymbolCall",
    "TypeReference",
    "FORMAT_VERSION",
    "load",
    "load_file",
    "save",
    "save_file",
    "EdgeIndex",
    "EntryPointDetector",
    "EntryPointScoring",
    "DependencyTreeBuilder",
    "LayerClassifier",
    "LayerRule",
    "ArchitectureBuilder",
    "StatisticsAggregator",
    "ReferenceQueryService",
    "ScenarioFlowGenerator",
    "ScenarioDetector",
    "CodeContext",
    "NullAnnotator",
    "OllamaAnnotator",
    "create_annotator",
    "BlueprintGenerator",
    "read_facts",
    "read_facts_file",
    "BlueprintManager",
    "get_blueprint_manager",
    "TreeRenderer",
    "format_flow",
    "format_flow_mermaid",
    "build_dependency_tree",
    "build_scenario_flow",
    "detect_entry_points",
    "detect_scenarios",
    "get_architecture_view",
    "get_directory_tree",
    "get_module_detail",
    "get_statistics",
    "get_symbol_references",
    "search_blueprint",
]
