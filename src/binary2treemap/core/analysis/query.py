from __future__ import annotations

"""
Path-Indexed Query.

Navigates a finished Size Tree by slash-delimited path. Empty segments are
ignored, so "a//b/", "a/b" and "/a/b/" address the same node.
"""

from typing import List, Optional

from binary2treemap.domain.constants import PATH_SEPARATOR
from binary2treemap.domain.size_models import DirectoryNode, SizeNode


def split_path(path: Optional[str]) -> List[str]:
    """
    Split a path into its non-empty segments.

    Args:
        path: Slash-separated path (may be None or empty).

    Returns:
        List[str]: Segments in order, without empty components.
    """
    if not path:
        return []
    return [segment for segment in path.split(PATH_SEPARATOR) if segment]


def query(root: SizeNode, path: Optional[str] = None) -> Optional[SizeNode]:
    """
    Resolve a path against the tree.

    Args:
        root: Node the path is relative to (usually the Size Tree root).
        path: Slash-separated path. Empty or None addresses ``root``.

    Returns:
        Optional[SizeNode]: The addressed node, or None when any segment is
                            missing or the path continues below a file.
    """
    current = root
    for segment in split_path(path):
        if not isinstance(current, DirectoryNode):
            return None
        child = current.children.get(segment)
        if child is None:
            return None
        current = child
    return current
