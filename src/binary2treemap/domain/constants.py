from __future__ import annotations

"""
Domain Constants.

Centralizes addressing rules, export labels and serving defaults shared by
the engine, the CLI and the web layer.
"""

CURRENT_CONFIG_VERSION = "1.0.0"

# Paths are slash-separated regardless of host OS
PATH_SEPARATOR = "/"

# Remainder leaves appended by the exporter so totals are preserved
NO_FILE_LABEL = "(no file)"
NO_LINE_LABEL = "(no line)"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_MAX_DEPTH = 3
DEFAULT_PROGRESS_INTERVAL = 1_000_000

D3_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/d3@7/dist/d3.min.js"
