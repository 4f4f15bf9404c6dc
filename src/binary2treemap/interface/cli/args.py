from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from binary2treemap import __version__
from binary2treemap.core.services.path_mapper import parse_mappings

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the binary2treemap CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="binary2treemap",
        description=(
            "Create a treemap of the source code of each byte in a binary. "
            "Investigate binary bloat."
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    p.add_argument("path", nargs="?", default=None, help="Path to the binary file.")

    # --- Export ---
    p.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        help="Maximum depth of the treemap.",
    )
    p.add_argument(
        "--query",
        dest="query_path",
        default="",
        help="Slash-separated path of the subtree to print (with --json/--print-tree).",
    )

    # --- Serving ---
    p.add_argument("--host", default=None, help="Interface to bind the web UI to.")
    p.add_argument("--port", type=int, default=None, help="Port of the web UI.")
    p.add_argument(
        "--map-path",
        dest="map_path",
        action="append",
        default=None,
        metavar="RECORDED=LOCAL",
        help="Rewrite a recorded source path prefix to a local one (repeatable).",
    )

    serve_group = p.add_mutually_exclusive_group()
    serve_group.add_argument(
        "--serve",
        dest="serve",
        action="store_true",
        default=None,
        help="Start the web UI even when printing to the terminal.",
    )
    serve_group.add_argument(
        "--no-serve",
        dest="serve",
        action="store_false",
        default=None,
        help="Do not start the web UI.",
    )

    # --- Terminal output ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the depth-limited export as JSON.",
    )
    p.add_argument(
        "--print-tree",
        action="store_true",
        help="Print the size tree as text.",
    )

    # --- Configuration and diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the stored configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Store the effective serving options and path mappings.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Printing to the terminal disables the web UI unless ``--serve`` is
    given explicitly.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.

    Raises:
        ValueError: If a --map-path value is malformed.
    """
    overrides: Dict[str, Any] = {}

    overrides["host"] = args.host
    overrides["port"] = args.port
    overrides["max_depth"] = args.max_depth

    if args.map_path:
        overrides["path_map"] = parse_mappings(args.map_path)

    if args.json_output:
        overrides["json_output"] = True
    if args.print_tree:
        overrides["print_tree"] = True

    if args.serve is not None:
        overrides["serve"] = args.serve
    elif args.json_output or args.print_tree:
        overrides["serve"] = False

    return overrides
