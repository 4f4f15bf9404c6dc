from __future__ import annotations

"""
Tree Renderer.

Converts a Size Tree into a visual ASCII representation annotated with byte
counts. Used by the CLI preview and the debug page.
"""

from typing import List, Optional

from binary2treemap.domain.size_models import FileNode, SizeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_size_tree(
        node: SizeNode,
        lines: List[str],
        prefix: str = "",
        max_depth: Optional[int] = None,
        show_lines: bool = False,
) -> None:
    """
    Recursively transform a Size Tree into a list of strings.

    Uses standard ASCII connectors (├──, └──). The node itself is not
    rendered, only what lies beneath it.

    Args:
        node: Current node to process.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        max_depth: Levels to render below ``node``; None renders everything.
        show_lines: Render per-line byte counts beneath files.
    """
    if max_depth is not None and max_depth <= 0:
        return

    next_depth = None if max_depth is None else max_depth - 1

    # Scenario A: Node is a File, children are its lines
    if isinstance(node, FileNode):
        if not show_lines:
            return
        entries = sorted(node.line_bytes)
        for i, line in enumerate(entries):
            connector = "└── " if i == len(entries) - 1 else "├── "
            lines.append(f"{prefix}{connector}line {line} ({node.line_bytes[line]} B)")
        return

    # Scenario B: Node is a Directory
    entries_keys = sorted(node.children)
    total = len(entries_keys)

    for i, key in enumerate(entries_keys):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        child = node.children[key]

        lines.append(f"{prefix}{connector}{key} ({child.size:,} B)")
        new_prefix = prefix + ("    " if is_last else "│   ")
        render_size_tree(child, lines, new_prefix, next_depth, show_lines)


def render_summary_header(node: SizeNode) -> str:
    """Return the heading line printed above a rendered tree."""
    return f"{node.name or '.'} ({node.size:,} B)"
