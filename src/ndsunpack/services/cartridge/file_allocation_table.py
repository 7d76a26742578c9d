"""File allocation table view.

The FAT is a packed array of 8-byte (start, end) pairs. There is no ID field:
the entry at index N describes file ID N.
"""

from typing import Iterator, Optional

from ndsunpack.byte_types import IntField, StructView, U32LE, get_range

from .models import FAT_ENTRY_SIZE


class FileAllocationTableEntry(StructView):
    SIZE = FAT_ENTRY_SIZE

    start = IntField(0x0, U32LE)
    end = IntField(0x4, U32LE)  # exclusive

    def get_file(self, rom) -> Optional[memoryview]:
        """File contents, or None if [start, end) is not inside the image."""
        return get_range(rom, self.start, self.end)


class FileAllocationTable:
    """Zero-copy sequence of FAT entries indexed by file ID."""

    def __init__(self, raw: memoryview):
        if len(raw) % FAT_ENTRY_SIZE:
            raise ValueError(f"FAT size {len(raw)} is not a multiple of {FAT_ENTRY_SIZE}")
        self._raw = raw

    @classmethod
    def read(cls, rom, offset: int, size: int) -> Optional["FileAllocationTable"]:
        """View ``size`` bytes at ``offset`` as FAT entries.

        Returns None if the range is outside the image or does not hold a
        whole number of entries.
        """
        raw = get_range(rom, offset, offset + size)
        if raw is None or size % FAT_ENTRY_SIZE:
            return None
        return cls(raw)

    def __len__(self) -> int:
        return len(self._raw) // FAT_ENTRY_SIZE

    def __getitem__(self, file_id: int) -> FileAllocationTableEntry:
        entry = self.get(file_id)
        if entry is None:
            raise IndexError(f"file ID {file_id} outside FAT of {len(self)} entries")
        return entry

    def __iter__(self) -> Iterator[FileAllocationTableEntry]:
        for file_id in range(len(self)):
            yield self[file_id]

    def get(self, file_id: int) -> Optional[FileAllocationTableEntry]:
        if not 0 <= file_id < len(self):
            return None
        start = file_id * FAT_ENTRY_SIZE
        return FileAllocationTableEntry(self._raw[start:start + FAT_ENTRY_SIZE])

    def get_file(self, file_id: int, rom) -> Optional[memoryview]:
        """Contents of file ``file_id``, or None if the ID or its range is invalid."""
        entry = self.get(file_id)
        if entry is None:
            return None
        return entry.get_file(rom)

    def __repr__(self):
        return f"FileAllocationTable({len(self)} entries)"
