from __future__ import annotations

"""
Unit tests for the console script entry point.
"""

import logging
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from binary2treemap.infra.logging import _HANDLER_TAG_ATTR, shutdown_logging
from binary2treemap.main import main


@pytest.fixture(autouse=True)
def restore_hooks() -> Generator[None, None, None]:
    hook = sys.excepthook
    yield
    sys.excepthook = hook
    shutdown_logging()


def test_entry_point_releases_logging(tmp_path: Path, capsys) -> None:
    log_file = tmp_path / "run.log"
    argv = ["binary2treemap", "--use-defaults", "--dump-config", "--log-file", str(log_file)]

    with patch.object(sys, "argv", argv):
        assert main() == 0

    assert log_file.exists()
    ours = [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]
    assert ours == []
    assert '"port": 3000' in capsys.readouterr().out
