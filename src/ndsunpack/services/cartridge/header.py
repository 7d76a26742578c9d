"""Cartridge header view.

Header layout (first 0x200 bytes, little-endian):
  0x000  title[12]            0x040  fnt (offset, size)
  0x00C  game_code[4]         0x048  fat (offset, size)
  0x010  maker_code[2]        0x050  arm9 overlay (offset, size)
  0x012  unit code            0x058  arm7 overlay (offset, size)
  0x013  encryption seed      0x068  icon/title offset
  0x014  device capacity      0x06C  secure area checksum
  0x01D  region               0x0C0  Nintendo logo[0x9C]
  0x01E  ROM version          0x15E  header checksum
  0x020  arm9 (rom offset, entry, ram address, size)
  0x030  arm7 (rom offset, entry, ram address, size)
"""

from typing import Optional

from ndsunpack.byte_types import (
    BytesField,
    IntField,
    StringField,
    StructField,
    StructView,
    U8,
    U16LE,
    U32LE,
)

from .banner import Banner
from .file_allocation_table import FileAllocationTable
from .file_name_table import FileNameTable
from .files import Files
from .models import (
    DEVICE_CAPACITY_UNIT,
    HEADER_SIZE,
    REGION_CODES,
    UNIT_CODES,
    CodeSegmentInfo,
    OffsetAndSize,
)


class CartridgeHeader(StructView):
    SIZE = HEADER_SIZE

    title = StringField(0x000, 12)
    game_code = StringField(0x00C, 4)
    maker_code = StringField(0x010, 2)
    unit_code = IntField(0x012, U8)
    encryption_seed_select = IntField(0x013, U8)
    device_capacity_raw = IntField(0x014, U8)
    _reserved_0 = BytesField(0x015, 8)
    region = IntField(0x01D, U8)
    rom_version = IntField(0x01E, U8)
    autostart = IntField(0x01F, U8)

    arm9 = StructField(0x020, CodeSegmentInfo)
    arm7 = StructField(0x030, CodeSegmentInfo)

    fnt = StructField(0x040, OffsetAndSize)
    fat = StructField(0x048, OffsetAndSize)

    arm9_overlay = StructField(0x050, OffsetAndSize)
    arm7_overlay = StructField(0x058, OffsetAndSize)

    port_40001a4_normal = IntField(0x060, U32LE)
    port_40001a4_key1 = IntField(0x064, U32LE)

    icon_title_offset = IntField(0x068, U32LE)

    secure_area_checksum = IntField(0x06C, U16LE)
    secure_area_delay = IntField(0x06E, U16LE)

    arm9_auto_load = IntField(0x070, U32LE)
    arm7_auto_load = IntField(0x074, U32LE)

    secure_area_disable = StringField(0x078, 8)

    total_used_rom_size = IntField(0x080, U32LE)
    rom_header_size = IntField(0x084, U32LE)

    _unknown_1 = BytesField(0x088, 4)
    _reserved_3 = BytesField(0x08C, 8)

    nand_end_of_rom = IntField(0x094, U16LE)
    nand_start_of_rw = IntField(0x096, U16LE)

    _reserved_4 = BytesField(0x098, 0x18)
    fast_boot = StringField(0x0B0, 0x10)

    nintendo_logo = BytesField(0x0C0, 0x9C, hidden=True)
    nintendo_logo_checksum = IntField(0x15C, U16LE, hidden=True)

    header_checksum = IntField(0x15E, U16LE)

    debug = StructField(0x160, OffsetAndSize)
    debug_ram_address = IntField(0x168, U32LE)

    _reserved_5 = BytesField(0x16C, HEADER_SIZE - 0x16C)

    def device_capacity(self) -> int:
        """Chip capacity in bytes."""
        return DEVICE_CAPACITY_UNIT << self.device_capacity_raw

    @property
    def unit_name(self) -> str:
        return UNIT_CODES.get(self.unit_code, f"Unknown (0x{self.unit_code:02X})")

    @property
    def region_name(self) -> str:
        return REGION_CODES.get(self.region, f"Unknown (0x{self.region:02X})")

    def read_fnt(self, rom) -> Optional[FileNameTable]:
        # Images without files have an empty FNT
        if self.fnt.size == 0:
            return FileNameTable(main_table=[], sub_tables=[])
        return FileNameTable.read(rom, self.fnt.offset)

    def read_fat(self, rom) -> Optional[FileAllocationTable]:
        return FileAllocationTable.read(rom, self.fat.offset, self.fat.size)

    def read_files(self, rom) -> Optional[Files]:
        return Files.read(self, rom)

    def read_banner(self, rom) -> Optional[Banner]:
        return Banner.read(rom, self.icon_title_offset)


def parse_header(data) -> Optional[CartridgeHeader]:
    """View the header at the start of ``data``; None if it is shorter than 0x200 bytes."""
    return CartridgeHeader.from_prefix(data)
