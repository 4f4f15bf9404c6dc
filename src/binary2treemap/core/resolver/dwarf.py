from __future__ import annotations

"""
DWARF Location Resolver.

Maps byte offsets of an ELF image to (source file, line) pairs using the
DWARF line programs read by pyelftools. The line tables are decoded once into
a sorted table of half-open address ranges; each lookup is a binary search.
"""

import bisect
import logging
import os
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from elftools.common.exceptions import DWARFError, ELFError, ELFParseError
from elftools.elf.constants import SH_FLAGS
from elftools.elf.elffile import ELFFile

from binary2treemap.domain.errors import ResolverError
from binary2treemap.domain.size_models import Location

logger = logging.getLogger(__name__)

# A decoded line-program row: (address, file path, line, end_sequence)
Row = Tuple[int, Optional[str], int, bool]

# -----------------------------------------------------------------------------
# ADDRESS TRANSLATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SectionRange:
    """File-backed, allocated section: file bytes [offset, offset+size) load at addr."""
    offset: int
    size: int
    addr: int


class SectionMap:
    """Translates file offsets into virtual addresses."""

    def __init__(self, sections: Iterable[SectionRange]) -> None:
        self._sections = sorted((s for s in sections if s.size > 0), key=lambda s: s.offset)
        self._offsets = [s.offset for s in self._sections]

    def __len__(self) -> int:
        return len(self._sections)

    def offset_to_address(self, offset: int) -> Optional[int]:
        """Return the load address of a file offset, or None if it is not loaded."""
        idx = bisect.bisect_right(self._offsets, offset) - 1
        if idx < 0:
            return None
        section = self._sections[idx]
        if offset >= section.offset + section.size:
            return None
        return section.addr + (offset - section.offset)

# -----------------------------------------------------------------------------
# LINE TABLE
# -----------------------------------------------------------------------------

class LineTable:
    """Sorted, non-empty address ranges mapped to source locations."""

    def __init__(self, ranges: Iterable[Tuple[int, int, Location]]) -> None:
        ordered = sorted((r for r in ranges if r[1] > r[0]), key=lambda r: (r[0], r[1]))
        self._starts = [r[0] for r in ordered]
        self._ends = [r[1] for r in ordered]
        self._locations = [r[2] for r in ordered]

    def __len__(self) -> int:
        return len(self._starts)

    @classmethod
    def from_rows(cls, rows: Sequence[Row]) -> LineTable:
        """
        Build a table from line-program rows in emission order.

        Each row covers the addresses up to the next row of the same
        sequence; an end_sequence row closes the sequence without
        describing any bytes itself.
        """
        ranges: List[Tuple[int, int, Location]] = []
        cache: Dict[Tuple[Optional[str], int], Location] = {}

        for current, following in zip(rows, rows[1:]):
            address, file_path, line, end_sequence = current
            if end_sequence:
                continue
            key = (file_path, line)
            location = cache.get(key)
            if location is None:
                location = Location(file=file_path, line=line if line > 0 else None)
                cache[key] = location
            ranges.append((address, following[0], location))

        return cls(ranges)

    def lookup(self, address: int) -> Optional[Location]:
        """Return the location covering an address, if any."""
        idx = bisect.bisect_right(self._starts, address) - 1
        if idx < 0 or address >= self._ends[idx]:
            return None
        return self._locations[idx]

# -----------------------------------------------------------------------------
# RESOLVER
# -----------------------------------------------------------------------------

class DwarfLineResolver:
    """
    Callable resolver bound to one ELF image.

    Instances are immutable after construction and may be shared.
    """

    def __init__(self, sections: SectionMap, table: LineTable) -> None:
        self._sections = sections
        self._table = table

    def __call__(self, offset: int) -> Optional[Location]:
        address = self._sections.offset_to_address(offset)
        if address is None:
            return None
        return self._table.lookup(address)

    @classmethod
    def from_path(cls, path: str) -> DwarfLineResolver:
        """
        Read the section headers and DWARF line programs of an ELF file.

        Args:
            path: Path to the binary.

        Returns:
            DwarfLineResolver: Resolver for that binary.

        Raises:
            ResolverError: If the file cannot be read, is not ELF, or carries
                           no DWARF line information.
        """
        logger.info(f"Loading debug info from: {path}")
        try:
            with open(path, "rb") as stream:
                elf = ELFFile(stream)
                sections = SectionMap(_iter_loaded_sections(elf))
                if not elf.has_dwarf_info():
                    raise ResolverError(f"No DWARF debug info in '{path}'")
                rows = list(_iter_line_rows(elf))
        except OSError as e:
            raise ResolverError(f"Cannot read '{path}': {e}") from e
        except (ELFError, ELFParseError, DWARFError) as e:
            raise ResolverError(f"Cannot parse debug info of '{path}': {e}") from e

        table = LineTable.from_rows(rows)
        if not len(table):
            raise ResolverError(f"No line table entries in '{path}'")

        logger.info(f"Loaded {len(table):,} line ranges across {len(sections)} sections")
        return cls(sections, table)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def compose_file_path(comp_dir: str, directory: str, name: str) -> str:
    """
    Build the full source path recorded for a line-program file entry.

    Absolute names win over directories, and relative directories are
    anchored at the compilation directory.
    """
    if posixpath.isabs(name):
        return name
    if directory and not posixpath.isabs(directory) and comp_dir:
        directory = posixpath.join(comp_dir, directory)
    elif not directory:
        directory = comp_dir
    return posixpath.join(directory, name) if directory else name


def _iter_loaded_sections(elf: ELFFile) -> Iterable[SectionRange]:
    for section in elf.iter_sections():
        header = section.header
        if not header["sh_flags"] & SH_FLAGS.SHF_ALLOC:
            continue
        if header["sh_type"] == "SHT_NOBITS":
            continue
        yield SectionRange(
            offset=header["sh_offset"],
            size=header["sh_size"],
            addr=header["sh_addr"],
        )


def _decode(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value) if value is not None else ""


def _iter_line_rows(elf: ELFFile) -> Iterable[Row]:
    dwarf = elf.get_dwarf_info()

    for cu in dwarf.iter_CUs():
        lineprog = dwarf.line_program_for_CU(cu)
        if lineprog is None:
            continue

        comp_dir_attr = cu.get_top_DIE().attributes.get("DW_AT_comp_dir")
        comp_dir = _decode(comp_dir_attr.value) if comp_dir_attr else ""
        files = _file_table(lineprog, comp_dir)
        # DWARF 5 file indices start at 0; earlier versions start at 1
        base = 0 if lineprog["version"] >= 5 else 1

        for entry in lineprog.get_entries():
            state = entry.state
            if state is None:
                continue
            idx = state.file - base
            file_path = files[idx] if 0 <= idx < len(files) else None
            yield state.address, file_path, state.line, bool(state.end_sequence)


def _file_table(lineprog, comp_dir: str) -> List[str]:
    version = lineprog["version"]
    directories = [_decode(d) for d in lineprog["include_directory"]]
    paths: List[str] = []

    for entry in lineprog["file_entry"]:
        dir_index = entry.dir_index
        if version >= 5:
            directory = directories[dir_index] if dir_index < len(directories) else ""
        else:
            directory = directories[dir_index - 1] if 0 < dir_index <= len(directories) else ""
        paths.append(compose_file_path(comp_dir, directory, _decode(entry.name)))

    return paths


def binary_length(path: str) -> int:
    """Size in bytes of the binary on disk."""
    return os.path.getsize(path)
