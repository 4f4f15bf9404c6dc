from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the OS-specific application data directory and the local file
checks used before a source file is opened for display.
"""

import os

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Binary2Treemap"
UNIX_APP_DIR_NAME = ".binary2treemap"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Binary2Treemap
    - Linux/Mac: ~/.binary2treemap

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def is_readable_file(path: str) -> bool:
    """
    Check that a path names a regular file the current process can open.

    Args:
        path: Local filesystem path.

    Returns:
        bool: True if the file exists, is regular, and can be opened.
    """
    if not path or not os.path.isfile(path):
        return False
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False
