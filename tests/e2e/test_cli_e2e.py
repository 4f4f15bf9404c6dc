from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the package entry point in a separate process and checks exit codes
and stream output.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"


def run_cli(args: List[str], home: Path) -> subprocess.CompletedProcess[str]:
    """
    Execute ``python -m binary2treemap`` with ``src`` on PYTHONPATH.

    HOME points at a temporary directory so no real configuration is read.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["LOCALAPPDATA"] = str(home)

    return subprocess.run(
        [sys.executable, "-m", "binary2treemap"] + args,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=60,
    )


def test_cli_dump_config(tmp_path: Path) -> None:
    result = run_cli(["--dump-config", "--max-depth", "6"], tmp_path)

    assert result.returncode == 0, result.stderr
    config = json.loads(result.stdout)
    assert config["max_depth"] == 6
    assert config["port"] == 3000


def test_cli_missing_binary(tmp_path: Path) -> None:
    result = run_cli([str(tmp_path / "missing.bin"), "--no-serve"], tmp_path)

    assert result.returncode == 2
    assert "Binary not found" in result.stderr


def test_cli_non_elf_input_fails(tmp_path: Path) -> None:
    target = tmp_path / "script.sh"
    target.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")

    result = run_cli([str(target), "--json"], tmp_path)

    assert result.returncode == 1
    assert "ERROR" in result.stderr
