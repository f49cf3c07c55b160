"""Directory tree view of the modules in a blueprint."""

from typing import Dict

from .results import DirectoryNode
from .schemas import Blueprint


def build_directory_tree(blueprint: Blueprint) -> DirectoryNode:
    """
    Nest modules under their path segments.

    Directories sort before files; each group sorts by name. Directory
    line counts are the sum of everything beneath them.
    """
    root = DirectoryNode(name=blueprint.project.name or ".", path="", type="directory")
    directories: Dict[str, DirectoryNode] = {"": root}

    for module in blueprint.modules.values():
        parts = module.id.split("/")
        parent = root
        for index, part in enumerate(parts[:-1]):
            dir_path = "/".join(parts[: index + 1])
            node = directories.get(dir_path)
            if node is None:
                node = DirectoryNode(name=part, path=dir_path, type="directory")
                directories[dir_path] = node
                parent.children.append(node)
            parent = node

        parent.children.append(
            DirectoryNode(
                name=parts[-1],
                path=module.id,
                type="file",
                language=module.language,
                lines=module.lines,
            )
        )

    _finalize(root)
    return root


def _finalize(node: DirectoryNode) -> int:
    if node.type == "file":
        return node.lines
    node.children.sort(key=lambda child: (child.type != "directory", child.name))
    node.lines = sum(_finalize(child) for child in node.children)
    return node.lines
