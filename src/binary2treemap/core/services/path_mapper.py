from __future__ import annotations

"""
Source Path Mapping Service.

Rewrites source paths recorded at build time (toolchain checkouts, build
machines) to the local paths where the sources can be read.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class PathMapper:
    """
    Prefix-based path rewriter.

    The longest matching recorded prefix wins. A prefix only matches on a
    segment boundary, so "/src/a" does not rewrite "/src/ab/file.c".
    """

    def __init__(self, mappings: Optional[Mapping[str, str]] = None) -> None:
        items = [
            (src.rstrip("/"), dst.rstrip("/"))
            for src, dst in (mappings or {}).items()
            if src
        ]
        self._rules = sorted(items, key=lambda item: len(item[0]), reverse=True)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def map(self, path: str) -> str:
        """Return the local path for a recorded path (unchanged if no rule applies)."""
        for src, dst in self._rules:
            if path == src or path.startswith(src + "/"):
                mapped = dst + path[len(src):]
                logger.debug(f"Mapped source path {path} -> {mapped}")
                return mapped
        return path


def parse_mapping(value: str) -> Tuple[str, str]:
    """
    Parse a ``RECORDED=LOCAL`` mapping argument.

    Raises:
        ValueError: If the separator is missing or the recorded side is empty.
    """
    src, sep, dst = value.partition("=")
    src = src.strip()
    if not sep or not src:
        raise ValueError(f"Invalid path mapping '{value}': expected RECORDED=LOCAL")
    return src, dst.strip()


def parse_mappings(values: Optional[list]) -> Dict[str, str]:
    """Parse a list of ``RECORDED=LOCAL`` arguments into a dictionary."""
    result: Dict[str, str] = {}
    for value in values or []:
        src, dst = parse_mapping(value)
        result[src] = dst
    return result
