from __future__ import annotations

"""
Integration tests for DWARF loading from real ELF binaries.

A tiny C program is compiled with gcc into tmp_path; the tests are skipped
when no compiler is available.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from binary2treemap.core.analysis.query import query
from binary2treemap.core.attribution.engine import attribute
from binary2treemap.core.resolver.dwarf import DwarfLineResolver, binary_length
from binary2treemap.domain.size_models import find_file_nodes

GCC = shutil.which("gcc")

SOURCE = "int main(void) {\n  return 0; }\n"

pytestmark = pytest.mark.skipif(GCC is None, reason="gcc not available")


def _compile(tmp_path: Path, dwarf_flag: str) -> Path:
    """Build sub/m.c with a relative path so the file name needs its directory entry."""
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "m.c").write_text(SOURCE, encoding="utf-8")
    output = tmp_path / "prog"
    result = subprocess.run(
        [GCC, "-g", dwarf_flag, "-O0", "-o", str(output), "sub/m.c"],
        cwd=str(tmp_path),
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        pytest.skip(f"gcc cannot build {dwarf_flag} binaries: {result.stderr.strip()}")
    return output


@pytest.mark.parametrize("dwarf_flag", ["-gdwarf-4", "-gdwarf-5"])
def test_source_lines_are_attributed(tmp_path: Path, dwarf_flag: str) -> None:
    binary = _compile(tmp_path, dwarf_flag)

    resolver = DwarfLineResolver.from_path(str(binary))
    tree = attribute(binary_length(str(binary)), resolver, name="prog")

    matches = [(p, n) for p, n in find_file_nodes(tree) if p.endswith("sub/m.c")]
    assert len(matches) == 1
    path, node = matches[0]

    assert node.size > 0
    assert set(node.line_bytes) == {1, 2}
    assert all(count > 0 for count in node.line_bytes.values())
    assert query(tree, path) is node


def test_elf_header_is_not_attributed(tmp_path: Path) -> None:
    binary = _compile(tmp_path, "-g")
    resolver = DwarfLineResolver.from_path(str(binary))

    # Offset 0 holds the ELF header, which no allocated section covers
    assert resolver(0) is None

