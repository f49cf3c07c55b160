"""Result models returned by blueprint queries."""

from typing import Dict, List, Literal, Optional

from pydantic import Field

from .schemas import ArchitectureLayer, CamelModel, SemanticInfo


class DependencyTreeNode(CamelModel):
    id: str
    name: str
    path: str = ""
    language: str = "unknown"
    lines: int = 0
    semantic: Optional[SemanticInfo] = None
    children: List["DependencyTreeNode"] = Field(default_factory=list)
    depth: int = 0
    is_circular: bool = False

    def walk(self):
        """Yield this node and all descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


DependencyTreeNode.model_rebuild()


class EntryPointCandidate(CamelModel):
    """Score breakdown for one module."""

    id: str
    score: int
    matched_pattern: Optional[str] = None
    root_like: bool = False
    imported: bool = False
    import_count: int = 0


class ClassificationResult(CamelModel):
    layer: ArchitectureLayer
    sub_layer: Optional[str] = None
    confidence: float
    matched_rules: List[str] = Field(default_factory=list)


class LayerInfo(CamelModel):
    name: ArchitectureLayer
    description: str
    modules: List[str] = Field(default_factory=list)
    sub_layers: Dict[str, List[str]] = Field(default_factory=dict)


BlockType = Literal["entry", "core", "feature", "ui", "data", "config", "util"]


class ArchitectureBlock(CamelModel):
    """One or more related modules presented as a unit."""

    id: str
    name: str
    type: BlockType
    layer: ArchitectureLayer
    description: str = ""
    files: List[str] = Field(default_factory=list)
    file_count: int = 0
    total_lines: int = 0
    parent: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)


class BlockEdge(CamelModel):
    source: str
    target: str


class ArchitectureView(CamelModel):
    project_name: str
    project_description: str = ""
    layers: List[LayerInfo] = Field(default_factory=list)
    blocks: List[ArchitectureBlock] = Field(default_factory=list)
    block_edges: List[BlockEdge] = Field(default_factory=list)


class DirectoryNode(CamelModel):
    name: str
    path: str
    type: Literal["directory", "file"]
    language: Optional[str] = None
    lines: int = 0
    children: List["DirectoryNode"] = Field(default_factory=list)


DirectoryNode.model_rebuild()


class CallReference(CamelModel):
    """The far end of a call edge."""

    symbol_id: str
    name: str
    module_id: Optional[str] = None
    call_type: str = "direct"
    line: Optional[int] = None
    external: bool = False


class TypeReferenceEntry(CamelModel):
    symbol_id: str
    name: str
    module_id: Optional[str] = None
    kind: str = "extends"
    direction: Literal["parent", "child"]
    external: bool = False


class SymbolReferences(CamelModel):
    symbol_id: str
    name: str
    module_id: str
    callers: List[CallReference] = Field(default_factory=list)
    callees: List[CallReference] = Field(default_factory=list)
    type_refs: List[TypeReferenceEntry] = Field(default_factory=list)


class ModuleDetail(CamelModel):
    id: str
    name: str
    language: str
    lines: int
    layer: ArchitectureLayer
    semantic: Optional[SemanticInfo] = None
    symbols_by_kind: Dict[str, List[str]] = Field(default_factory=dict)
    internal_imports: List[str] = Field(default_factory=list)
    external_imports: List[str] = Field(default_factory=list)
    imported_by: List[str] = Field(default_factory=list)


class SearchHit(CamelModel):
    id: str
    name: str
    type: Literal["module", "symbol"]
    kind: Optional[str] = None
    module_id: Optional[str] = None
    score: int = 0


FlowRole = Literal["entry", "process", "decision", "data", "end"]
FlowEdgeType = Literal["normal", "conditional", "loop", "async"]


class FlowNode(CamelModel):
    id: str
    label: str
    role: FlowRole
    module_id: Optional[str] = None
    depth: int = 0
    description: Optional[str] = None
    external: bool = False


class FlowEdge(CamelModel):
    source: str
    target: str
    type: FlowEdgeType = "normal"
    call_type: Optional[str] = None


class ScenarioFlow(CamelModel):
    title: str
    entry_ids: List[str] = Field(default_factory=list)
    unknown_entries: List[str] = Field(default_factory=list)
    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)
    max_depth: int = 5


class Scenario(CamelModel):
    """A named execution scenario proposed from the blueprint."""

    id: str
    name: str
    description: str
    keywords: List[str] = Field(default_factory=list)
    modules: List[str] = Field(default_factory=list)
    entry_symbols: List[str] = Field(default_factory=list)


class GenerationProgress(CamelModel):
    phase: str
    current: int
    total: int
    current_item: Optional[str] = None
