"""Text renderers for query results (ASCII trees, flow listings, mermaid)."""

from typing import List, Optional, Union

from .results import DependencyTreeNode, DirectoryNode, ScenarioFlow

TreeNode = Union[DependencyTreeNode, DirectoryNode]


class TreeRenderer:
    """Builds ASCII tree representations of nested results."""

    # Tree drawing characters
    BRANCH = "├── "
    LAST_BRANCH = "└── "
    VERTICAL = "│   "
    SPACE = "    "

    def __init__(self, max_depth: Optional[int] = None, show_lines: bool = True):
        self.max_depth = max_depth
        self.show_lines = show_lines

    def render(self, root: TreeNode) -> str:
        lines = [self._label(root)]
        for i, child in enumerate(root.children):
            lines.extend(self._render_node(child, 0, i == len(root.children) - 1, []))
        return "\n".join(lines)

    def _render_node(
        self,
        node: TreeNode,
        depth: int,
        is_last: bool,
        parent_prefixes: List[bool],
    ) -> List[str]:
        if self.max_depth is not None and depth >= self.max_depth:
            return []

        prefix = "".join(self.SPACE if last else self.VERTICAL for last in parent_prefixes)
        prefix += self.LAST_BRANCH if is_last else self.BRANCH
        lines = [f"{prefix}{self._label(node)}"]

        new_prefixes = parent_prefixes + [is_last]
        for i, child in enumerate(node.children):
            lines.extend(
                self._render_node(child, depth + 1, i == len(node.children) - 1, new_prefixes)
            )
        return lines

    def _label(self, node: TreeNode) -> str:
        if isinstance(node, DirectoryNode):
            label = f"{node.name}/" if node.type == "directory" else node.name
        else:
            label = node.id
        if getattr(node, "is_circular", False):
            return f"{label} (circular)"
        if self.show_lines and node.lines:
            label += f" [{node.lines} lines]"
        return label


def format_flow(flow: ScenarioFlow) -> str:
    """Plain listing: nodes by depth, then edges."""
    lines = [flow.title]
    if flow.unknown_entries:
        lines.append(f"Unknown entries: {', '.join(flow.unknown_entries)}")
    for node in sorted(flow.nodes, key=lambda n: (n.depth, n.id)):
        marker = " (external)" if node.external else ""
        lines.append(f"{'  ' * node.depth}[{node.role}] {node.label}{marker}")
    if flow.edges:
        lines.append("")
        for edge in flow.edges:
            lines.append(f"{edge.source} -> {edge.target} ({edge.type})")
    return "\n".join(lines)


MERMAID_SHAPES = {
    "entry": ("([", "])"),
    "process": ("[", "]"),
    "decision": ("{", "}"),
    "data": ("[(", ")]"),
    "end": ("((", "))"),
}

MERMAID_ARROWS = {
    "normal": "-->",
    "conditional": "-.->",
    "loop": "==>",
    "async": "--o",
}


def format_flow_mermaid(flow: ScenarioFlow) -> str:
    """Render a flow as a mermaid flowchart definition."""
    ids = {node.id: f"n{i}" for i, node in enumerate(flow.nodes)}
    lines = ["flowchart TD"]
    for node in flow.nodes:
        left, right = MERMAID_SHAPES[node.role]
        label = node.label.replace('"', "'")
        lines.append(f'    {ids[node.id]}{left}"{label}"{right}')
    for edge in flow.edges:
        lines.append(f"    {ids[edge.source]} {MERMAID_ARROWS[edge.type]} {ids[edge.target]}")
    return "\n".join(lines)
