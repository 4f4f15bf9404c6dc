from __future__ import annotations

"""
Binary2Treemap.

Attributes the bytes of a compiled binary to the source files and lines that
produced them and serves the result as an interactive treemap.
"""

__version__ = "0.2.0"
