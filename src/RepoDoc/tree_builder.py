"""Hierarchical tree construction from a flat forge listing."""

from __future__ import annotations

from RepoDoc.models import EntryType, TreeEntry, TreeNode


def _sort_key(entry: TreeEntry) -> tuple[int, str]:
    return (0 if entry.type is EntryType.TREE else 1, entry.path)


def build_tree_structure(entries: list[TreeEntry]) -> list[TreeNode]:
    """Nest a flat list of tree entries and return the root-level nodes.

    Entries are visited directories-first, then by full path, so a directory
    is registered before anything beneath it. An entry whose parent directory
    was never listed becomes a root node instead of being dropped.
    """
    roots: list[TreeNode] = []
    by_path: dict[str, TreeNode] = {}

    for entry in sorted(entries, key=_sort_key):
        parent_path, _, name = entry.path.rpartition("/")
        node = TreeNode(
            name=name,
            path=entry.path,
            type=entry.type,
            sha=entry.sha,
            children=[] if entry.type is EntryType.TREE else None,
        )
        by_path[entry.path] = node

        parent = by_path.get(parent_path) if parent_path else None
        if parent is not None and parent.children is not None:
            parent.children.append(node)
        else:
            roots.append(node)

    return roots


def iter_nodes(nodes: list[TreeNode]):
    """Yield every node depth-first, parents before children."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def render_tree(nodes: list[TreeNode]) -> str:
    """Render nodes as an ASCII directory tree.

    Example output:
        ├── src/
        │   ├── main.py
        │   └── utils.py
        └── README.md
    """
    lines: list[str] = []
    _render_tree(nodes, lines, prefix="")
    return "\n".join(lines)


def _render_tree(
    nodes: list[TreeNode],
    lines: list[str],
    prefix: str,
) -> None:
    for i, node in enumerate(nodes):
        is_last = i == len(nodes) - 1
        connector = "└── " if is_last else "├── "
        display_name = f"{node.name}/" if node.is_dir else node.name
        lines.append(f"{prefix}{connector}{display_name}")

        if node.children:
            extension = "    " if is_last else "│   "
            _render_tree(node.children, lines, prefix + extension)
