from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates data directory resolution and the readable-file check used before
serving source files.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from binary2treemap.infra.fs import get_user_data_dir, is_readable_file


def test_get_user_data_dir_unix() -> None:
    """Resolution of ~/.binary2treemap on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
    assert path == os.path.abspath(os.path.join(mock_home, ".binary2treemap"))


def test_get_user_data_dir_creates_directory(tmp_path: Path) -> None:
    with patch("os.path.expanduser", return_value=str(tmp_path)):
        path = get_user_data_dir()
    assert Path(path).is_dir()


def test_is_readable_file(tmp_path: Path) -> None:
    target = tmp_path / "main.c"
    target.write_text("int x;\n", encoding="utf-8")

    assert is_readable_file(str(target)) is True
    assert is_readable_file(str(tmp_path)) is False
    assert is_readable_file(str(tmp_path / "missing.c")) is False
    assert is_readable_file("") is False


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits not enforced")
def test_unreadable_file(tmp_path: Path) -> None:
    target = tmp_path / "secret.c"
    target.write_text("int y;\n", encoding="utf-8")
    target.chmod(0)
    try:
        assert is_readable_file(str(target)) is False
    finally:
        target.chmod(0o644)
