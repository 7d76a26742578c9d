"""File name table parser and tree walk.

FNT layout:
  Main table at the FNT base, one 8-byte entry per directory:
    +0  u32 offset of the directory's sub-table (relative to the FNT base)
    +4  u16 ID of the first file in the directory
    +6  u16 total directory count (root) / parent directory ID (others)

  Sub-table, one record per child, in on-disk order:
    [1 byte]  marker: bit 7 = directory, bits 0-6 = name length (0 = end)
    [N bytes] name
    [2 bytes] directory ID (directories only)

Directory index i has ID 0xF000 + i. File IDs are not stored: each directory
numbers its files sequentially from its ``id_of_first_file``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from ndsunpack.byte_types import (
    DynamicEmbeddedString,
    IntField,
    StructView,
    U16LE,
    U32LE,
)

from .models import (
    DIRECTORY_BIT,
    DIRECTORY_ID_BASE,
    FNT_MAIN_ENTRY_SIZE,
    MAX_NAME_LENGTH,
    NAME_LENGTH_MASK,
)

Path = Tuple[DynamicEmbeddedString, ...]


class DirectoryMainTableEntry(StructView):
    SIZE = FNT_MAIN_ENTRY_SIZE

    offset_to_sub_table = IntField(0x0, U32LE)
    id_of_first_file = IntField(0x4, U16LE)
    # Root: total number of directories. Others: parent directory ID.
    total_or_parent = IntField(0x6, U16LE)


@dataclass(frozen=True)
class FileEntry:
    name: DynamicEmbeddedString


@dataclass(frozen=True)
class DirectoryEntry:
    name: DynamicEmbeddedString
    directory_id: int


SubTableEntry = Union[FileEntry, DirectoryEntry]


def parse_sub_table_entry(data: memoryview, pos: int) -> Optional[Tuple[SubTableEntry, int]]:
    """Decode the record at ``pos``.

    Returns (entry, position after it), or None at the end marker, at the end
    of the buffer, or when the record runs past the buffer.
    """
    if pos >= len(data):
        return None
    marker = data[pos]
    length = marker & NAME_LENGTH_MASK
    if length == 0:
        return None

    name_start = pos + 1
    name_end = name_start + length
    if name_end > len(data):
        return None
    name = DynamicEmbeddedString.from_slice(data[name_start:name_end], MAX_NAME_LENGTH)

    if not marker & DIRECTORY_BIT:
        return FileEntry(name), name_end

    directory_id = U16LE.from_prefix(data, name_end)
    if directory_id is None:
        return None
    return DirectoryEntry(name, directory_id.get()), name_end + U16LE.WIDTH


def parse_sub_table(data: memoryview, pos: int) -> List[SubTableEntry]:
    """Decode records from ``pos`` until the end marker or a bad record."""
    entries = []
    while True:
        parsed = parse_sub_table_entry(data, pos)
        if parsed is None:
            break
        entry, pos = parsed
        entries.append(entry)
    return entries


def format_path(path: Path, separator: str = "/") -> str:
    """Join path components, decoding names lossily."""
    return separator.join(name.as_str_lossy() for name in path)


@dataclass
class _Frame:
    path: Path
    next_file_id: int
    children: Iterator[SubTableEntry]


@dataclass
class FileNameTable:
    main_table: List[DirectoryMainTableEntry] = field(default_factory=list)
    sub_tables: List[List[SubTableEntry]] = field(default_factory=list)

    @classmethod
    def read(cls, rom, start: int) -> Optional["FileNameTable"]:
        """Parse the FNT whose main table begins at ``start``."""
        data = memoryview(rom)
        root = DirectoryMainTableEntry.from_prefix(data, start)
        if root is None:
            return None
        main_table = DirectoryMainTableEntry.array_from_prefix(
            data, root.total_or_parent, start
        )
        if main_table is None:
            return None

        sub_tables = []
        for entry in main_table:
            sub_table_start = start + entry.offset_to_sub_table
            if sub_table_start > len(data):
                return None
            sub_tables.append(parse_sub_table(data, sub_table_start))

        return cls(main_table=main_table, sub_tables=sub_tables)

    @property
    def directory_count(self) -> int:
        return len(self.main_table)

    def walk(self) -> Iterator[Tuple[Path, int]]:
        """Yield (path, id) for every file and directory, depth-first, pre-order.

        Files get sequential IDs from their directory's ``id_of_first_file``;
        directories yield their own ID (>= 0xF000) and are then descended into.
        A directory ID that points outside the main table, or to a directory
        already descended into anywhere in this walk, is yielded but not
        descended into again, so each directory is expanded at most once.
        """
        if not self.main_table:
            return
        visited = {0}
        stack = [self._frame(0, ())]
        while stack:
            frame = stack[-1]
            entry = next(frame.children, None)
            if entry is None:
                stack.pop()
                continue

            path = frame.path + (entry.name,)
            if isinstance(entry, FileEntry):
                yield path, frame.next_file_id
                frame.next_file_id += 1
                continue

            yield path, entry.directory_id
            index = entry.directory_id - DIRECTORY_ID_BASE
            if not 0 <= index < len(self.main_table):
                continue
            if index in visited:
                continue
            visited.add(index)
            stack.append(self._frame(index, path))

    def fold(self, function: Callable[[Any, Path, int], Any], initial: Any) -> Any:
        """Thread an accumulator through the walk: ``acc = function(acc, path, id)``."""
        accumulator = initial
        for path, entry_id in self.walk():
            accumulator = function(accumulator, path, entry_id)
        return accumulator

    def _frame(self, index: int, path: Path) -> _Frame:
        return _Frame(
            path=path,
            next_file_id=self.main_table[index].id_of_first_file,
            children=iter(self.sub_tables[index]),
        )
