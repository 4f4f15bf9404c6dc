from __future__ import annotations

"""
Depth-Limited Export.

Converts any Size Tree node into a bounded-depth nested structure for the
treemap client. Levels below the depth limit collapse into leaves carrying the
node's own size, so totals never change, only granularity.
"""

from typing import List, Optional

from binary2treemap.domain.constants import NO_FILE_LABEL, NO_LINE_LABEL
from binary2treemap.domain.size_models import (
    DirectoryNode,
    ExportBranch,
    ExportLeaf,
    ExportNode,
    FileNode,
    SizeNode,
)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def export(node: SizeNode, max_depth: int, name: Optional[str] = None) -> ExportNode:
    """
    Export a node down to at most ``max_depth`` levels of children.

    A directory expands when depth remains and it has children. A file expands
    into one leaf per line under the same rule. When an expanded node holds
    bytes its children do not account for, a remainder leaf is appended.

    Args:
        node: Subtree to export.
        max_depth: Remaining levels to expand (values below 0 act as 0).
        name: Display name for the exported node (defaults to ``node.name``).

    Returns:
        ExportNode: ExportLeaf or ExportBranch whose leaf values sum to
                    ``node.size``.
    """
    label = node.name if name is None else name

    if max_depth <= 0:
        return ExportLeaf(label, node.size)

    if isinstance(node, DirectoryNode):
        children = _export_directory_children(node, max_depth - 1)
    else:
        children = _export_line_children(node)

    if not children:
        return ExportLeaf(label, node.size)
    return ExportBranch(label, tuple(children))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _export_directory_children(node: DirectoryNode, depth: int) -> List[ExportNode]:
    children: List[ExportNode] = [
        export(node.children[key], depth) for key in sorted(node.children)
    ]
    remainder = node.unattributed_children
    if children and remainder > 0:
        children.append(ExportLeaf(NO_FILE_LABEL, remainder))
    return children


def _export_line_children(node: FileNode) -> List[ExportNode]:
    children: List[ExportNode] = [
        ExportLeaf(str(line), node.line_bytes[line]) for line in sorted(node.line_bytes)
    ]
    remainder = node.unattributed_lines
    if children and remainder > 0:
        children.append(ExportLeaf(NO_LINE_LABEL, remainder))
    return children
