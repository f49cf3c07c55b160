"""Structural views: entry points, dependency tree, architecture, statistics."""
from typing import Optional

from codemap.blueprint import (
    TreeRenderer,
    build_dependency_tree,
    detect_entry_points,
    get_architecture_view,
    get_directory_tree,
    get_statistics,
)
from codemap.blueprint.facade import score_entry_points

from .common import active_blueprint, dump, error


def register(mcp):
    @mcp.tool()
    def entry_points(limit: int = 5, explain: bool = False) -> dict:
        """
        Rank modules most likely to start execution.

        Best-effort heuristic over filenames, path depth and import edges.
        Pass the result (or any module id you prefer) to dependency_tree.

        Args:
            limit: Maximum number of candidates (default 5)
            explain: Include the per-module score breakdown

        Returns:
            dict with status and entry_points (module ids, best first);
            candidates with scores when explain=True
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        result = {"status": "ok", "entry_points": detect_entry_points(blueprint, limit)}
        if explain:
            result["candidates"] = dump(score_entry_points(blueprint)[:limit])
        return result

    @mcp.tool()
    def dependency_tree(root: Optional[str] = None, max_depth: int = 10, format: str = "tree") -> dict:
        """
        Import tree below a module.

        Modules re-appearing on their own ancestor chain are marked circular
        and not expanded. The same module reached through separate branches
        is expanded on each branch.

        Args:
            root: Root module id (default: best detected entry point)
            max_depth: Maximum expansion depth (default 10)
            format: "tree" (ASCII, compact) or "json" (nested nodes)

        Returns:
            dict with status, root and either tree (str) or nodes (nested dict)
        """
        blueprint, err = active_blueprint()
        if err:
            return err

        if root is None:
            entries = detect_entry_points(blueprint, 1)
            if not entries:
                return error("no_entry_point", "No entry point detected; pass root explicitly")
            root = entries[0]

        tree = build_dependency_tree(blueprint, root, max_depth)
        if tree is None:
            return error("module_not_found", f"Module '{root}' not found", root=root)

        circular = [node.id for node in tree.walk() if node.is_circular]
        result = {"status": "ok", "root": root, "circular": circular}
        if format == "json":
            result["nodes"] = dump(tree)
        else:
            result["tree"] = TreeRenderer().render(tree)
        return result

    @mcp.tool()
    def architecture() -> dict:
        """
        Layered architecture view plus directory blocks and block edges.

        Returns:
            dict with status and view {projectName, layers, blocks, blockEdges}
        """
        blueprint, err = active_blueprint()
        if err:
            return err
        return {"status": "ok", "view": dump(get_architecture_view(blueprint))}

    @mcp.tool()
    def statistics(top_n: Optional[int] = None) -> dict:
        """
        Blueprint statistics: totals, language breakdown, most imported
        modules, most called symbols, largest files, semantic coverage.

        Args:
            top_n: Recompute rankings with this many entries (default: stored statistics)
        """
        blueprint, err = active_blueprint()
        if err:
            return err
        return {"status": "ok", "statistics": dump(get_statistics(blueprint, top_n))}

    @mcp.tool()
    def directory_tree(format: str = "tree") -> dict:
        """
        Modules nested by directory, directories first.

        Args:
            format: "tree" (ASCII) or "json"
        """
        blueprint, err = active_blueprint()
        if err:
            return err
        tree = get_directory_tree(blueprint)
        if format == "json":
            return {"status": "ok", "nodes": dump(tree)}
        return {"status": "ok", "tree": TreeRenderer().render(tree)}
