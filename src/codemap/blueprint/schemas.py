"""Data models for the persisted blueprint document.

Everything here is serialized with camelCase keys; Python code uses the
snake_case field names.
"""

from functools import cached_property
from typing import TYPE_CHECKING, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from .edge_index import EdgeIndex


SymbolKind = Literal[
    "function", "class", "interface", "method", "property",
    "variable", "constant", "type", "enum",
]
DependencyType = Literal["import", "require", "dynamic"]
CallType = Literal["direct", "method", "constructor", "callback", "dynamic"]
ArchitectureLayer = Literal[
    "presentation", "business", "data", "infrastructure", "crossCutting",
]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SemanticInfo(CamelModel):
    """Natural-language annotation attached to a module or symbol."""

    description: str = Field("", description="One or two sentence summary")
    tags: List[str] = Field(default_factory=list)
    architecture_layer: Optional[str] = Field(
        None, description="Explicit layer assignment; overrides path heuristics when it names a known layer"
    )
    business_domain: Optional[str] = None
    responsibility: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    generated_at: Optional[str] = None


class ProjectSemantic(CamelModel):
    description: str = ""
    purpose: str = ""
    domains: List[str] = Field(default_factory=list)
    key_concepts: List[str] = Field(default_factory=list)


class Location(CamelModel):
    start_line: int
    end_line: int


class Module(CamelModel):
    """A single source file."""

    id: str = Field(description="Project-relative path, unique within a blueprint")
    name: str
    path: str = ""
    language: str = "unknown"
    lines: int = 0
    size: int = Field(0, description="File size in bytes")
    imports: List[str] = Field(
        default_factory=list, description="Ordered target module ids; may dangle"
    )
    semantic: Optional[SemanticInfo] = None


class Symbol(CamelModel):
    """A named declaration inside a module."""

    id: str = Field(description="Unique across the whole blueprint")
    name: str
    kind: SymbolKind
    module_id: str
    location: Location
    signature: Optional[str] = None
    children: List[str] = Field(default_factory=list, description="Ids of nested symbols")
    parent: Optional[str] = None
    semantic: Optional[SemanticInfo] = None


class ModuleDependency(CamelModel):
    source: str
    target: str
    type: DependencyType = "import"
    symbols: List[str] = Field(default_factory=list)


class SymbolCall(CamelModel):
    caller_symbol_id: str
    callee_symbol_id: str
    call_type: CallType = "direct"
    line: Optional[int] = None


class TypeReference(CamelModel):
    """Inheritance or implementation edge.

    direction="parent" means target is a base class or implemented
    interface of source; "child" is the reverse.
    """

    source: str
    target: str
    direction: Literal["parent", "child"] = "parent"
    kind: Literal["extends", "implements"] = "extends"


class References(CamelModel):
    module_deps: List[ModuleDependency] = Field(default_factory=list)
    symbol_calls: List[SymbolCall] = Field(default_factory=list)
    type_refs: List[TypeReference] = Field(default_factory=list)


class RankedModule(CamelModel):
    id: str
    count: int


class RankedSymbol(CamelModel):
    id: str
    name: str
    count: int


class LargestFile(CamelModel):
    id: str
    lines: int


class SemanticCoverage(CamelModel):
    modules_with_description: int = 0
    symbols_with_description: int = 0
    coverage: float = Field(0.0, description="Fraction of modules with a description")
    coverage_percent: int = 0


class ReferenceStats(CamelModel):
    total_module_deps: int = 0
    total_symbol_calls: int = 0
    total_type_refs: int = 0


class Statistics(CamelModel):
    total_modules: int = 0
    total_symbols: int = 0
    total_lines: int = 0
    language_breakdown: Dict[str, int] = Field(default_factory=dict)
    layer_distribution: Dict[str, int] = Field(default_factory=dict)
    most_imported_modules: List[RankedModule] = Field(default_factory=list)
    most_called_symbols: List[RankedSymbol] = Field(default_factory=list)
    largest_files: List[LargestFile] = Field(default_factory=list)
    semantic_coverage: SemanticCoverage = Field(default_factory=SemanticCoverage)
    reference_stats: ReferenceStats = Field(default_factory=ReferenceStats)


class BlueprintMeta(CamelModel):
    version: str
    generated_at: str
    generator_version: str
    semantic_version: Optional[str] = None


class ProjectInfo(CamelModel):
    name: str
    root_path: str = ""
    languages: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    semantic: Optional[ProjectSemantic] = None


class Blueprint(CamelModel):
    """Immutable, self-contained model of a codebase."""

    meta: BlueprintMeta
    project: ProjectInfo
    modules: Dict[str, Module] = Field(default_factory=dict)
    symbols: Dict[str, List[Symbol]] = Field(
        default_factory=dict, description="Symbols grouped by module id"
    )
    references: References = Field(default_factory=References)
    statistics: Optional[Statistics] = None

    @cached_property
    def edges(self) -> "EdgeIndex":
        """Endpoint index over every reference list, built on first use."""
        from .edge_index import EdgeIndex

        return EdgeIndex(self)

    def get_module(self, module_id: str) -> Optional[Module]:
        return self.modules.get(module_id)

    def module_symbols(self, module_id: str) -> List[Symbol]:
        return self.symbols.get(module_id, [])

    def iter_symbols(self) -> Iterator[Symbol]:
        """Yield every symbol, module by module in insertion order."""
        for symbols in self.symbols.values():
            yield from symbols


class FileFacts(CamelModel):
    """Extracted facts for one source file, the input to generation."""

    module: Module
    symbols: List[Symbol] = Field(default_factory=list)
    calls: List[SymbolCall] = Field(default_factory=list)
    type_refs: List[TypeReference] = Field(default_factory=list)
    dependency_type: DependencyType = "import"
