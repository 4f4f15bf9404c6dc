from __future__ import annotations

"""
Main Entry Point.

Installs a last-resort exception hook so unexpected crashes are logged before
the process exits, then hands control to the CLI controller.
"""

import logging
import os
import sys
import traceback
from typing import Any

# Make the package importable when this file is run as a script
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.dirname(BASE_DIR)
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Log unhandled exceptions with their stack trace and exit with status 1.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    if issubclass(exctype, KeyboardInterrupt):
        sys.__excepthook__(exctype, value, tb)
        return

    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logger = logging.getLogger("binary2treemap.supervisor")
    logger.critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (BINARY2TREEMAP)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)
    sys.exit(1)


def main() -> int:
    """Console script entry point."""
    sys.excepthook = global_exception_handler
    from binary2treemap.infra.logging import shutdown_logging
    from binary2treemap.interface.cli.app import main as cli_main

    exit_code = cli_main()
    shutdown_logging()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
