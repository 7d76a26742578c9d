"""Data models for Nintendo DS cartridge images.

All multi-byte integers in the image are little-endian. The header occupies
the first 0x200 bytes; the file name table (FNT) and file allocation table
(FAT) live wherever the header's offset/size pairs point.

References:
  - https://problemkaputt.de/gbatek.htm#dscartridgeheader
  - https://problemkaputt.de/gbatek.htm#dscartridgenitroromandnitroarcfilesystems
"""

from dataclasses import dataclass
from typing import Optional

from ndsunpack.byte_types import IntField, StructView, U32LE, get_range

HEADER_SIZE = 0x200

# Device capacity is stored as an exponent: 128 KiB << raw
DEVICE_CAPACITY_UNIT = 128 * 1024

# File IDs run below this value, directory IDs start at it
DIRECTORY_ID_BASE = 0xF000

FAT_ENTRY_SIZE = 8
FNT_MAIN_ENTRY_SIZE = 8

# Sub-table record marker: bit 7 = directory, bits 0-6 = name length
DIRECTORY_BIT = 0x80
NAME_LENGTH_MASK = 0x7F
MAX_NAME_LENGTH = 127

# Unit code (header 0x12) -> device type
UNIT_CODES = {
    0x00: "NDS",
    0x02: "NDS+DSi",
    0x03: "DSi",
}

# Region byte (header 0x1D)
REGION_CODES = {
    0x00: "Normal",
    0x40: "Korea",
    0x80: "China",
}

# Last character of the game code -> region
GAME_CODE_REGIONS = {
    "J": "Japan",
    "E": "USA",
    "P": "Europe",
    "O": "International",
    "K": "Korea",
    "D": "Germany",
    "F": "France",
    "S": "Spain",
    "I": "Italy",
    "U": "Australia",
    "C": "China",
}


class CartridgeError(Exception):
    """Raised when a cartridge image cannot be decoded or exported."""


def is_directory_id(entry_id: int) -> bool:
    """True for IDs emitted by the FNT walk for directories."""
    return entry_id >= DIRECTORY_ID_BASE


class OffsetAndSize(StructView):
    """Byte range inside the image."""

    SIZE = 8

    offset = IntField(0x0, U32LE)
    size = IntField(0x4, U32LE)

    def read(self, rom) -> Optional[memoryview]:
        """Bytes of the range, or None if it runs past the image."""
        return get_range(rom, self.offset, self.offset + self.size)


class CodeSegmentInfo(StructView):
    """Where an ARM9/ARM7 binary lives in the image and where it loads."""

    SIZE = 16

    rom_offset = IntField(0x0, U32LE)
    entry_address = IntField(0x4, U32LE)
    ram_address = IntField(0x8, U32LE)
    size = IntField(0xC, U32LE)

    def read(self, rom) -> Optional[memoryview]:
        """Raw code bytes (not interpreted), or None if out of range."""
        return get_range(rom, self.rom_offset, self.rom_offset + self.size)


@dataclass
class CartridgeRomInfo:
    """Summary of a loaded cartridge image."""

    path: str
    size: int
    title: str = ""
    game_code: str = ""
    maker_code: str = ""
    unit_code: int = 0
    rom_version: int = 0
    device_capacity: int = 0
    file_count: int = 0
    directory_count: int = 0
    banner_title: str = ""
    is_valid: bool = False

    @property
    def region(self) -> str:
        if len(self.game_code) >= 4:
            return GAME_CODE_REGIONS.get(self.game_code[3], "")
        return ""

    @property
    def device_type(self) -> str:
        return UNIT_CODES.get(self.unit_code, "NDS")

    @property
    def version_string(self) -> str:
        return f"1.{self.rom_version}"
