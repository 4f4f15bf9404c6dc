from __future__ import annotations

"""
Web Interface.

Serves the finished Size Tree over HTTP with bottle. The tree is shared
read-only by every request, so handlers need no locking.

Routes:
    /__data__/<path>  JSON export of the addressed node (?depth=N)
    /__debug__        Text dump of the whole tree
    /<path>           Treemap page, or an annotated source view for files
                      whose source is readable locally
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from bottle import Bottle, HTTPResponse, redirect, request, template

from binary2treemap.core.analysis.exporter import export
from binary2treemap.core.analysis.query import query, split_path
from binary2treemap.core.analysis.tree_renderer import render_size_tree, render_summary_header
from binary2treemap.core.services.path_mapper import PathMapper
from binary2treemap.domain.constants import (
    D3_SCRIPT_URL,
    DEFAULT_HOST,
    DEFAULT_MAX_DEPTH,
    DEFAULT_PORT,
    NO_FILE_LABEL,
    NO_LINE_LABEL,
)
from binary2treemap.domain.size_models import (
    SELF_FILE_KEY,
    DirectoryNode,
    FileNode,
    SizeNode,
    export_to_dict,
)
from binary2treemap.infra.fs import is_readable_file
from binary2treemap.interface.web import templates

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# APPLICATION FACTORY
# -----------------------------------------------------------------------------

def create_app(root: DirectoryNode, settings: Optional[Dict[str, Any]] = None) -> Bottle:
    """
    Build the WSGI application bound to a Size Tree.

    Args:
        root: Root of the finished tree.
        settings: Validated configuration (uses ``max_depth`` and ``path_map``).

    Returns:
        Bottle: The configured application.
    """
    settings = settings or {}
    default_depth = int(settings.get("max_depth", DEFAULT_MAX_DEPTH))
    mapper = PathMapper(settings.get("path_map") or {})
    app = Bottle()

    @app.get("/__data__/")
    @app.get("/__data__/<path:path>")
    def data_handler(path: str = "") -> Any:
        depth = _parse_depth(request.query.get("depth"), default_depth)
        if depth is None:
            return _json_error(400, f"Invalid depth: {request.query.get('depth')!r}")

        node = query(root, path)
        if node is None:
            logger.debug(f"Data request missed: {path!r}")
            return _json_error(404, f"No attributed bytes at '{path}'")

        name = root.name if node is root else None
        return export_to_dict(export(node, depth, name=name))

    @app.get("/__debug__")
    def debug_handler() -> str:
        lines: List[str] = []
        render_size_tree(root, lines, show_lines=True)
        return template(templates.DEBUG_PAGE, header=render_summary_header(root), lines=lines)

    @app.get("/")
    @app.get("/<path:path>")
    def page_handler(path: str = "") -> Any:
        node = query(root, path)
        if node is None:
            owner = _owner_link(root, path)
            if owner is not None:
                # Line and remainder leaves have no page of their own
                redirect(owner)
            logger.info(f"Page request missed: {path!r}")
            return HTTPResponse(template(templates.NOT_FOUND_PAGE, path=path), status=404)

        file_node = _file_of(node)
        if file_node is not None:
            local_path = _find_local_source(path, mapper)
            if local_path:
                logger.info(f"Loading source file: {local_path}")
                return _render_source(file_node, local_path)
            logger.debug(f"No readable local source for {path!r}")

        return _render_treemap(root, node, path, default_depth)

    return app


def serve(root: DirectoryNode, settings: Optional[Dict[str, Any]] = None) -> None:
    """
    Run the web interface until interrupted.

    Args:
        root: Root of the finished tree.
        settings: Validated configuration (``host``, ``port``, ``max_depth``,
                  ``path_map``).
    """
    settings = settings or {}
    host = settings.get("host", DEFAULT_HOST)
    port = int(settings.get("port", DEFAULT_PORT))
    app = create_app(root, settings)

    logger.info(f"listening on http://{host}:{port}")
    print(f"listening on http://{host}:{port}")
    app.run(host=host, port=port, quiet=True)

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

def _render_treemap(root: DirectoryNode, node: SizeNode, path: str, depth: int) -> str:
    segments = split_path(path)
    crumbs: List[Tuple[str, str]] = []
    for i, segment in enumerate(segments):
        crumbs.append((segment, "/" + "/".join(segments[: i + 1])))

    base_path = "/".join(segments)
    data_url = f"/__data__/{base_path}?depth={depth}"
    return template(
        templates.TREEMAP_PAGE,
        title=segments[-1] if segments else root.name,
        root_name=root.name,
        crumbs=crumbs,
        size=node.size,
        d3_url=D3_SCRIPT_URL,
        base_path_json=json.dumps(base_path),
        data_url_json=json.dumps(data_url),
    )


def _render_source(node: FileNode, local_path: str) -> str:
    rows: List[Tuple[int, int, str]] = []
    with open(local_path, "r", encoding="utf-8", errors="replace") as f:
        for nbr, text in enumerate(f, start=1):
            rows.append((nbr, node.line_bytes.get(nbr, 0), text.rstrip("\r\n")))

    return template(
        templates.SOURCE_PAGE,
        title=local_path.rsplit("/", 1)[-1],
        source_path=local_path,
        size=node.size,
        unattributed=node.unattributed_lines,
        rows=rows,
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _file_of(node: SizeNode) -> Optional[FileNode]:
    """Return the file node behind a path, including a promoted file's own bytes."""
    if isinstance(node, FileNode):
        return node
    own = node.children.get(SELF_FILE_KEY)
    return own if isinstance(own, FileNode) else None


def _owner_link(root: DirectoryNode, path: str) -> Optional[str]:
    """Return the page of the node owning a line or remainder leaf, if any."""
    segments = split_path(path)
    if not segments:
        return None
    owner_segments = segments[:-1]
    owner = query(root, "/".join(owner_segments))
    if owner is None:
        return None

    leaf = segments[-1]
    if leaf in (NO_FILE_LABEL, NO_LINE_LABEL) or (leaf.isdigit() and _file_of(owner) is not None):
        return "/" + quote("/".join(owner_segments))
    return None


def _find_local_source(path: str, mapper: PathMapper) -> Optional[str]:
    """Locate a readable local copy of a recorded source path."""
    joined = "/".join(split_path(path))
    for candidate in ("/" + joined, joined):
        mapped = mapper.map(candidate)
        if is_readable_file(mapped):
            return mapped
    return None


def _parse_depth(raw: Optional[str], fallback: int) -> Optional[int]:
    if raw is None or raw == "":
        return fallback
    try:
        depth = int(raw)
    except ValueError:
        return None
    return depth if depth >= 0 else None


def _json_error(status: int, message: str) -> HTTPResponse:
    return HTTPResponse(
        body=json.dumps({"error": message}),
        status=status,
        headers={"Content-Type": "application/json"},
    )
