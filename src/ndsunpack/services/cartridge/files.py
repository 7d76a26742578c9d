"""All files of one cartridge image: FNT + FAT over the image buffer."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .file_allocation_table import FileAllocationTable
from .file_name_table import FileNameTable

if TYPE_CHECKING:
    from .header import CartridgeHeader


@dataclass
class Files:
    fnt: FileNameTable
    fat: FileAllocationTable
    rom: memoryview

    @classmethod
    def read(cls, header: "CartridgeHeader", rom) -> Optional["Files"]:
        fnt = header.read_fnt(rom)
        if fnt is None:
            return None
        fat = header.read_fat(rom)
        if fat is None:
            return None
        return cls(fnt=fnt, fat=fat, rom=memoryview(rom))
