from __future__ import annotations

"""
Size Tree Data Models.

Provides the immutable node types produced by the attribution engine and the
export node types consumed by the visualization client. Directory children are
keyed by path segment (str) and file line counters by line number (int), so a
directory literally named "5" never collides with line 5.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

# Key of the synthetic file child that holds bytes attributed to a path which
# is both a file and a directory. Segments never contain the separator.
SELF_FILE_KEY = "/"

# -----------------------------------------------------------------------------
# RESOLVER CONTRACT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Location:
    """
    Source location attributed to a single byte offset.

    Attributes:
        file: Source file path as recorded in the debug info, if known.
        line: 1-based line number, if known.
    """
    file: Optional[str] = None
    line: Optional[int] = None


Resolver = Callable[[int], Optional[Location]]

# -----------------------------------------------------------------------------
# SIZE TREE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileNode:
    """
    Leaf of the Size Tree representing one source file.

    Attributes:
        name: Path segment of the file.
        size: Bytes attributed to the file.
        line_bytes: Bytes attributed to each known line (read-only).
    """
    name: str
    size: int
    line_bytes: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def unattributed_lines(self) -> int:
        """Bytes that reached this file without a line number."""
        return self.size - sum(self.line_bytes.values())


@dataclass(frozen=True)
class DirectoryNode:
    """
    Internal node of the Size Tree.

    Attributes:
        name: Path segment of the directory (the binary path for the root).
        size: Bytes routed through this directory.
        children: Child nodes keyed by path segment (read-only).
    """
    name: str
    size: int
    children: Mapping[str, "SizeNode"] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def unattributed_children(self) -> int:
        """Bytes counted here but not routed to any child (root only)."""
        return self.size - sum(child.size for child in self.children.values())


SizeNode = Union[DirectoryNode, FileNode]

# -----------------------------------------------------------------------------
# EXPORT MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExportLeaf:
    """Collapsed export node carrying an aggregate byte count."""
    name: str
    value: int


@dataclass(frozen=True)
class ExportBranch:
    """Expanded export node."""
    name: str
    children: Tuple["ExportNode", ...]


ExportNode = Union[ExportLeaf, ExportBranch]


def export_to_dict(node: ExportNode) -> Dict[str, Any]:
    """
    Convert an export node into the JSON wire shape.

    Args:
        node: Export node to convert.

    Returns:
        Dict[str, Any]: ``{"name", "value"}`` for leaves,
                        ``{"name", "children"}`` for branches.
    """
    if isinstance(node, ExportLeaf):
        return {"name": node.name, "value": node.value}
    return {"name": node.name, "children": [export_to_dict(c) for c in node.children]}


def export_total(node: ExportNode) -> int:
    """Sum every leaf value beneath an export node."""
    if isinstance(node, ExportLeaf):
        return node.value
    return sum(export_total(c) for c in node.children)

# -----------------------------------------------------------------------------
# TRAVERSAL HELPERS
# -----------------------------------------------------------------------------

def iter_nodes(node: SizeNode, path: str = "") -> Iterator[Tuple[str, SizeNode]]:
    """
    Walk a Size Tree depth-first, yielding ``(path, node)`` pairs.

    The starting node is yielded with the given path (empty for the root).
    Children are visited in segment order.
    """
    yield path, node
    if isinstance(node, DirectoryNode):
        for segment in sorted(node.children):
            child_path = f"{path}/{segment}" if path else segment
            yield from iter_nodes(node.children[segment], child_path)


def find_file_nodes(node: SizeNode) -> List[Tuple[str, FileNode]]:
    """Return every file beneath a node, largest first."""
    files = [(p, n) for p, n in iter_nodes(node) if isinstance(n, FileNode)]
    files.sort(key=lambda item: (-item[1].size, item[0]))
    return files
