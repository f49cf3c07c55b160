"""Dependency tree builder: module import hierarchy from a chosen root."""

from typing import List, Optional, Set

from codemap.logging_config import logger

from .results import DependencyTreeNode
from .schemas import Blueprint, Module, ModuleDependency


class DependencyTreeBuilder:
    """
    Expands outgoing module dependencies depth-first.

    Cycle detection is per path: a module reached again through an
    independent branch is expanded again, while a module already on its
    own ancestor chain is emitted with is_circular=True and no children.
    """

    def build(
        self,
        blueprint: Blueprint,
        root_id: str,
        max_depth: int = 10,
    ) -> Optional[DependencyTreeNode]:
        """
        Build the tree rooted at root_id.

        Returns:
            Root node, or None if root_id is not a module of the blueprint
        """
        root = blueprint.get_module(root_id)
        if root is None:
            logger.debug(f"Dependency tree root '{root_id}' not found")
            return None
        return self._expand(blueprint, root, 0, max_depth, set())

    def _expand(
        self,
        blueprint: Blueprint,
        module: Module,
        depth: int,
        max_depth: int,
        on_path: Set[str],
    ) -> DependencyTreeNode:
        node = self._make_node(module, depth)

        if module.id in on_path:
            node.is_circular = True
            return node
        if depth >= max_depth:
            return node

        on_path.add(module.id)
        for dep in self._sorted_deps(blueprint, module.id):
            target = blueprint.get_module(dep.target)
            if target is None:
                continue
            node.children.append(
                self._expand(blueprint, target, depth + 1, max_depth, on_path)
            )
        on_path.discard(module.id)
        return node

    @staticmethod
    def _sorted_deps(blueprint: Blueprint, module_id: str) -> List[ModuleDependency]:
        # One child per edge, repeated edges included
        return sorted(blueprint.edges.outgoing_deps(module_id), key=lambda dep: dep.target)

    @staticmethod
    def _make_node(module: Module, depth: int) -> DependencyTreeNode:
        return DependencyTreeNode(
            id=module.id,
            name=module.name,
            path=module.path,
            language=module.language,
            lines=module.lines,
            semantic=module.semantic,
            depth=depth,
        )
