from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, persistent storage and CLI overrides), debug-info loading, tree
construction, terminal output and finally the web UI.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from binary2treemap.core.analysis.exporter import export
from binary2treemap.core.analysis.query import query
from binary2treemap.core.analysis.tree_renderer import render_size_tree, render_summary_header
from binary2treemap.core.attribution.engine import attribute
from binary2treemap.core.resolver.dwarf import DwarfLineResolver, binary_length
from binary2treemap.core.services.validator import validate_config
from binary2treemap.domain.config import get_default_config, load_config, save_config
from binary2treemap.domain.errors import AttributionError, ResolverError
from binary2treemap.domain.size_models import DirectoryNode, export_to_dict, find_file_nodes
from binary2treemap.infra.logging import LoggingConfig, configure_logging, get_logger
from binary2treemap.interface.cli import args as cli_args
from binary2treemap.interface.web.server import serve

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3
EXIT_INTERRUPTED = 130

_SUMMARY_TOP_FILES = 10

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    # 3. Resolve base configuration
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 4. Map and merge command-line overrides
    try:
        overrides = cli_args.args_to_overrides(args)
    except ValueError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(conf)

    # 6. Pre-flight input verification
    if not args.path:
        parser.print_usage(sys.stderr)
        print("ERROR: a binary path is required", file=sys.stderr)
        return EXIT_USAGE
    if not os.path.isfile(args.path):
        msg = f"Binary not found: {args.path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_USAGE

    # 7. Tree construction phase
    print(f"Processing {args.path}, please wait")
    try:
        tree = build_size_tree(args.path, conf["progress_interval"])
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED
    except (ResolverError, AttributionError) as e:
        logger.critical(f"Attribution failed: {e}", exc_info=args.debug)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    _log_summary(tree)

    # 8. Terminal output phase
    if conf["json_output"] or conf["print_tree"]:
        node = query(tree, args.query_path)
        if node is None:
            msg = f"No attributed bytes at '{args.query_path}'"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_NOT_FOUND

        if conf["json_output"]:
            name = tree.name if node is tree else None
            print(json.dumps(export_to_dict(export(node, conf["max_depth"], name=name)), indent=2))
        if conf["print_tree"]:
            lines: List[str] = [render_summary_header(node)]
            render_size_tree(node, lines, max_depth=conf["max_depth"])
            print("\n".join(lines))

    # 9. Serving phase
    if conf["serve"]:
        try:
            serve(tree, conf)
        except KeyboardInterrupt:
            logger.info("Server stopped.")
        except OSError as e:
            logger.critical(f"Cannot start web UI: {e}")
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_FAILURE

    return EXIT_OK


def build_size_tree(path: str, progress_interval: int) -> DirectoryNode:
    """
    Load the debug info of a binary and attribute all of its bytes.

    Raises:
        ResolverError: If the debug info cannot be loaded.
        AttributionError: If resolution fails during the pass.
    """
    resolver = DwarfLineResolver.from_path(path)
    return attribute(
        binary_length(path),
        resolver,
        name=path,
        progress_interval=progress_interval,
    )

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge override values into the base configuration.

    None values are ignored. Path mappings are combined with the stored ones,
    with the command line winning on conflicts.
    """
    out = dict(base)
    for k, v in overrides.items():
        if v is None:
            continue
        if k == "path_map" and isinstance(out.get(k), dict):
            merged_map = dict(out[k])
            merged_map.update(v)
            out[k] = merged_map
        else:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _log_summary(tree: DirectoryNode) -> None:
    """Log the largest contributing source files."""
    files = find_file_nodes(tree)
    logger.info(f"{len(files):,} source files contribute {tree.size:,} bytes")
    for path, node in files[:_SUMMARY_TOP_FILES]:
        logger.debug(f"  {node.size:>10,} B  {path}")


if __name__ == "__main__":
    sys.exit(main())
