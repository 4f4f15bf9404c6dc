from __future__ import annotations

"""
Integration tests for the Web Interface.

Runs the bottle application on a real WSGI server bound to an ephemeral port
and talks to it with requests.
"""

import threading
from pathlib import Path
from typing import Any, Dict, Generator, Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

import pytest
import requests

from binary2treemap.core.attribution.engine import attribute
from binary2treemap.domain.size_models import DirectoryNode, Location
from binary2treemap.interface.web.server import create_app


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        pass


def _start(root: DirectoryNode, settings: Optional[Dict[str, Any]] = None):
    server = make_server("127.0.0.1", 0, create_app(root, settings), handler_class=_QuietHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, f"http://127.0.0.1:{server.server_port}"


@pytest.fixture
def base_url(scenario_tree: DirectoryNode) -> Generator[str, None, None]:
    server, url = _start(scenario_tree, {"max_depth": 1})
    yield url
    server.shutdown()
    server.server_close()


@pytest.fixture
def source_tree(tmp_path: Path) -> DirectoryNode:
    """Tree whose single file exists on disk under tmp_path/src."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.c").write_text("int main() {\n  return 0;\n}\n", encoding="utf-8")

    recorded = "/build/src/main.c"
    table = [Location(recorded, 1), Location(recorded, 2), Location(recorded, 2)]
    return attribute(len(table), lambda offset: table[offset], name="app")

# -----------------------------------------------------------------------------
# DATA ENDPOINT
# -----------------------------------------------------------------------------

def test_data_root_uses_configured_depth(base_url: str) -> None:
    response = requests.get(f"{base_url}/__data__/", timeout=5)

    assert response.status_code == 200
    assert response.headers["Content-Type"].startswith("application/json")
    assert response.json() == {"name": "root", "children": [{"name": "a", "value": 3}]}


def test_data_depth_parameter(base_url: str) -> None:
    response = requests.get(f"{base_url}/__data__/a", params={"depth": 0}, timeout=5)
    assert response.json() == {"name": "a", "value": 3}

    response = requests.get(f"{base_url}/__data__/a/b.rs", params={"depth": 1}, timeout=5)
    assert response.json() == {"name": "b.rs", "children": [{"name": "5", "value": 2}]}


def test_data_path_equivalence(base_url: str) -> None:
    first = requests.get(f"{base_url}/__data__/a/c.rs", timeout=5).json()
    second = requests.get(f"{base_url}/__data__//a//c.rs/", timeout=5).json()
    assert first == second


def test_data_miss_is_404(base_url: str) -> None:
    response = requests.get(f"{base_url}/__data__/a/missing.rs", timeout=5)
    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.parametrize("depth", ["-1", "deep"])
def test_data_invalid_depth_is_400(base_url: str, depth: str) -> None:
    response = requests.get(f"{base_url}/__data__/", params={"depth": depth}, timeout=5)
    assert response.status_code == 400

# -----------------------------------------------------------------------------
# PAGES
# -----------------------------------------------------------------------------

def test_treemap_page(base_url: str) -> None:
    response = requests.get(f"{base_url}/a", timeout=5)

    assert response.status_code == 200
    assert "d3" in response.text
    assert '"/__data__/a?depth=1"' in response.text


def test_page_miss_is_404(base_url: str) -> None:
    response = requests.get(f"{base_url}/nowhere", timeout=5)
    assert response.status_code == 404
    assert "nowhere" in response.text


def test_line_leaf_page_redirects_to_file(base_url: str) -> None:
    response = requests.get(f"{base_url}/a/b.rs/5", timeout=5)

    assert response.status_code == 200
    assert response.history[0].status_code in (302, 303)
    assert response.url == f"{base_url}/a/b.rs"


def test_unknown_leaf_below_missing_node_is_404(base_url: str) -> None:
    response = requests.get(f"{base_url}/a/missing.rs/5", timeout=5)
    assert response.status_code == 404


def test_remainder_leaves_redirect_to_owner(mixed_tree: DirectoryNode) -> None:
    server, url = _start(mixed_tree)
    try:
        no_line = requests.get(f"{url}/usr/src/lib.rs/(no line)", timeout=5)
        no_file = requests.get(f"{url}/(no file)", timeout=5)
    finally:
        server.shutdown()
        server.server_close()

    assert no_line.status_code == 200
    assert no_line.url == f"{url}/usr/src/lib.rs"
    assert no_file.status_code == 200
    assert no_file.url == f"{url}/"


def test_debug_page(base_url: str) -> None:
    response = requests.get(f"{base_url}/__debug__", timeout=5)

    assert response.status_code == 200
    assert "root (3 B)" in response.text
    assert "b.rs (2 B)" in response.text
    assert "line 5 (2 B)" in response.text


def test_unreadable_source_falls_back_to_treemap(base_url: str) -> None:
    response = requests.get(f"{base_url}/a/b.rs", timeout=5)
    assert response.status_code == 200
    assert "__data__/a/b.rs" in response.text


def test_source_view_with_path_mapping(source_tree: DirectoryNode, tmp_path: Path) -> None:
    server, url = _start(source_tree, {"path_map": {"/build": str(tmp_path)}})
    try:
        response = requests.get(f"{url}/build/src/main.c", timeout=5)
    finally:
        server.shutdown()
        server.server_close()

    assert response.status_code == 200
    assert "return 0;" in response.text
    assert "int main() {" in response.text
    assert "3 bytes" in response.text
