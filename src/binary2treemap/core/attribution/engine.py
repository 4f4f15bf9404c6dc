from __future__ import annotations

"""
Attribution Engine.

Probes every byte offset of a binary through a location resolver and
aggregates the results into a path-segmented Size Tree. Sizes are maintained
incrementally: each resolved byte adds exactly 1 to every node on its path in
a single walk. The tree is built from private mutable nodes confined to this
module and frozen before it is handed to the caller.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Union

from binary2treemap.core.analysis.query import split_path
from binary2treemap.domain.constants import DEFAULT_PROGRESS_INTERVAL
from binary2treemap.domain.errors import AttributionError
from binary2treemap.domain.size_models import (
    SELF_FILE_KEY,
    DirectoryNode,
    FileNode,
    Location,
    Resolver,
    SizeNode,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def attribute(
        binary_length: int,
        resolver: Resolver,
        *,
        name: str = "",
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> DirectoryNode:
    """
    Build the Size Tree for a binary.

    Offsets for which the resolver returns None are skipped entirely. Every
    other offset increments the root, then each directory along its file path,
    then the file node and its line counter when those are known.

    Args:
        binary_length: Number of bytes in the binary image.
        resolver: Callable mapping an offset to a Location or None.
        name: Label of the root node (the binary path).
        progress_interval: Offsets between DEBUG progress records (0 disables).

    Returns:
        DirectoryNode: Immutable root of the finished tree.

    Raises:
        AttributionError: If the resolver raises for any offset.
    """
    if binary_length < 0:
        raise ValueError(f"binary_length must be non-negative, got {binary_length}")

    logger.info(f"Attributing {binary_length:,} bytes of '{name}'")
    root = _MutableDirectory(name)

    for offset in range(binary_length):
        try:
            location = resolver(offset)
        except Exception as e:
            logger.error(f"Resolver failed at offset {offset:#x}: {e}")
            raise AttributionError(
                f"Resolver failed at offset {offset:#x}: {e}", offset=offset
            ) from e

        if location is not None:
            _record(root, location)

        if progress_interval and offset and offset % progress_interval == 0:
            logger.debug(f"Probed {offset:,}/{binary_length:,} bytes")

    tree = _freeze_directory(root)
    logger.info(
        f"Attribution complete: {tree.size:,} of {binary_length:,} bytes resolved"
    )
    return tree

# -----------------------------------------------------------------------------
# CONSTRUCTION STATE
# -----------------------------------------------------------------------------

class _MutableFile:
    __slots__ = ("name", "size", "line_bytes")

    def __init__(self, name: str) -> None:
        self.name = name
        self.size = 0
        self.line_bytes: Dict[int, int] = {}


class _MutableDirectory:
    __slots__ = ("name", "size", "children")

    def __init__(self, name: str) -> None:
        self.name = name
        self.size = 0
        self.children: Dict[str, Union[_MutableDirectory, _MutableFile]] = {}

    def enter_directory(self, segment: str) -> _MutableDirectory:
        """Return the child directory for a segment, promoting a file if needed."""
        child = self.children.get(segment)
        if child is None:
            child = _MutableDirectory(segment)
            self.children[segment] = child
        elif isinstance(child, _MutableFile):
            child = _promote(child)
            self.children[segment] = child
        child.size += 1
        return child

    def enter_file(self, segment: str) -> _MutableFile:
        """Return the file node for a terminal segment."""
        child = self.children.get(segment)
        if child is None:
            child = _MutableFile(segment)
            self.children[segment] = child
        if isinstance(child, _MutableDirectory):
            # Path used both as a directory and as a file
            child.size += 1
            child = child.self_file()
        child.size += 1
        return child

    def self_file(self) -> _MutableFile:
        node = self.children.get(SELF_FILE_KEY)
        if isinstance(node, _MutableFile):
            return node
        node = _MutableFile(SELF_FILE_KEY)
        self.children[SELF_FILE_KEY] = node
        return node


def _promote(node: _MutableFile) -> _MutableDirectory:
    """
    Turn a file node into a directory that keeps the file's bytes.

    The accumulated size and line data move to the synthetic SELF_FILE_KEY
    child, so the new directory's size equals the sum of its children.
    """
    logger.debug(f"Promoting file node '{node.name}' to a directory")
    directory = _MutableDirectory(node.name)
    directory.size = node.size
    node.name = SELF_FILE_KEY
    directory.children[SELF_FILE_KEY] = node
    return directory


def _record(root: _MutableDirectory, location: Location) -> None:
    """Add one resolved byte to every node on its path."""
    root.size += 1

    segments: List[str] = split_path(location.file)
    if not segments:
        # No usable file path: only the root counts this byte
        return

    current = root
    for segment in segments[:-1]:
        current = current.enter_directory(segment)
    file_node = current.enter_file(segments[-1])

    line = location.line
    if line is not None and line > 0:
        file_node.line_bytes[line] = file_node.line_bytes.get(line, 0) + 1


def _freeze(node: Union[_MutableDirectory, _MutableFile]) -> SizeNode:
    """Copy the construction state into immutable nodes without re-summing."""
    if isinstance(node, _MutableFile):
        return FileNode(
            name=node.name,
            size=node.size,
            line_bytes=MappingProxyType(dict(node.line_bytes)),
        )
    return _freeze_directory(node)


def _freeze_directory(node: _MutableDirectory) -> DirectoryNode:
    children = {key: _freeze(child) for key, child in node.children.items()}
    return DirectoryNode(
        name=node.name,
        size=node.size,
        children=MappingProxyType(children),
    )

