from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Table-driven resolvers and prebuilt Size Trees shared across tests.
"""

import os
import sys
from typing import Any, Callable, Dict, Optional, Sequence

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from binary2treemap.core.attribution.engine import attribute  # noqa: E402
from binary2treemap.domain.size_models import DirectoryNode, Location  # noqa: E402


def make_resolver(table: Sequence[Optional[Location]]) -> Callable[[int], Optional[Location]]:
    """Return a resolver answering offset ``i`` with ``table[i]``."""
    def resolve(offset: int) -> Optional[Location]:
        return table[offset]
    return resolve


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def resolver_factory() -> Callable[[Sequence[Optional[Location]]], Callable[[int], Optional[Location]]]:
    """Expose make_resolver to test modules."""
    return make_resolver


@pytest.fixture
def scenario_table() -> Sequence[Optional[Location]]:
    """
    Four-byte binary: two bytes of a/b.rs:5, one byte of a/c.rs:1 and one
    unattributable byte.
    """
    return [
        Location("a/b.rs", 5),
        Location("a/b.rs", 5),
        Location("a/c.rs", 1),
        None,
    ]


@pytest.fixture
def scenario_tree(scenario_table: Sequence[Optional[Location]]) -> DirectoryNode:
    """Size Tree built from the four-byte scenario."""
    return attribute(len(scenario_table), make_resolver(scenario_table), name="root")


@pytest.fixture
def mixed_tree() -> DirectoryNode:
    """
    Tree exercising every resolver result combination.

    Structure:
    /usr/src/lib.rs      3 bytes (lines 10, 10, none)
    /usr/src/main.rs     2 bytes (line 1, line 2)
    /usr/include/x.h     1 byte  (line 7)
    (no file)            2 bytes
    (unresolved)         2 bytes
    """
    table = [
        Location("/usr/src/lib.rs", 10),
        Location("/usr/src/lib.rs", 10),
        Location("/usr/src/lib.rs", None),
        Location("/usr/src/main.rs", 1),
        Location("/usr/src/main.rs", 2),
        Location("/usr/include/x.h", 7),
        Location(None, None),
        Location("///", 3),
        None,
        None,
    ]
    return attribute(len(table), make_resolver(table), name="bin/app")


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'binary2treemap.domain.config'.
    """
    return {
        "host": "127.0.0.1",
        "port": 3000,
        "serve": True,
        "max_depth": 3,
        "path_map": {},
        "print_tree": False,
        "json_output": False,
        "progress_interval": 1_000_000,
    }
