"""Tests for the cartridge header view, FAT view and the Files aggregator."""

import os
import struct
import sys

# Add src to path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ndsunpack.services.cartridge import (
    CartridgeHeader,
    FileAllocationTable,
    Files,
    HEADER_SIZE,
    parse_header,
)

from rom_factory import (
    SAMPLE_CONTENTS,
    build_header,
    build_rom,
    build_sample_rom,
)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def test_parse_header_needs_full_header():
    """Parsing fails iff the buffer is shorter than 0x200 bytes."""
    assert HEADER_SIZE == 0x200
    assert CartridgeHeader.SIZE == 0x200
    assert parse_header(b"\x00" * 0x1FF) is None
    assert parse_header(b"") is None
    assert parse_header(b"\x00" * 0x200) is not None
    assert parse_header(b"\x00" * 0x400) is not None
    print("  PASS: test_parse_header_needs_full_header")


def test_header_view_is_prefix_only():
    rom = bytes(build_header()) + b"\xAA" * 16
    header = parse_header(rom)
    assert len(header.raw) == 0x200
    assert header.raw.obj is rom  # a view of the caller's buffer, not a copy
    print("  PASS: test_header_view_is_prefix_only")


def test_device_capacity():
    assert parse_header(build_header(capacity_raw=0)).device_capacity() == 128 * 1024
    assert parse_header(build_header(capacity_raw=1)).device_capacity() == 256 * 1024
    assert parse_header(build_header(capacity_raw=9)).device_capacity() == 64 * 1024 * 1024
    print("  PASS: test_device_capacity")


def test_header_fields():
    raw = build_header(
        title=b"PONYFRIENDS",
        game_code=b"APFD",
        maker_code=b"41",
        unit_code=2,
        rom_version=1,
        fnt=(0x1000, 0x120),
        fat=(0x1200, 0x40),
        arm9=(0x4000, 0x2000000, 0x2000000, 0x8000),
        arm7=(0x10000, 0x2380000, 0x2380000, 0x2000),
        icon_title_offset=0x20000,
    )
    header = parse_header(raw)
    assert str(header.title) == "PONYFRIENDS"
    assert str(header.game_code) == "APFD"
    assert str(header.maker_code) == "41"
    assert header.unit_code == 2
    assert header.unit_name == "NDS+DSi"
    assert header.rom_version == 1
    assert header.fnt.offset == 0x1000 and header.fnt.size == 0x120
    assert header.fat.offset == 0x1200 and header.fat.size == 0x40
    assert header.arm9.rom_offset == 0x4000
    assert header.arm9.entry_address == 0x2000000
    assert header.arm7.ram_address == 0x2380000
    assert header.arm7.size == 0x2000
    assert header.icon_title_offset == 0x20000
    assert header.header_checksum == 0xBEEF
    assert header.region_name == "Normal"
    print("  PASS: test_header_fields")


def test_header_fields_listing_skips_reserved():
    names = [name for name, _ in CartridgeHeader.fields()]
    assert names[:3] == ["title", "game_code", "maker_code"]
    assert "fnt" in names and "fat" in names
    assert "nintendo_logo" not in names
    assert not any(name.startswith("_") for name in names)
    print("  PASS: test_header_fields_listing_skips_reserved")


def test_non_utf8_title_displays_as_hex():
    raw = build_header(title=b"\xffAB")
    header = parse_header(raw)
    assert header.title.as_str() is None
    assert str(header.title) == "ff4142"
    print("  PASS: test_non_utf8_title_displays_as_hex")


def test_read_fnt_size_zero_is_empty_table():
    """A zero-size FNT is an image without files, not an error."""
    raw = bytes(build_header(fnt=(0xFFFFFFF0, 0)))
    fnt = parse_header(raw).read_fnt(raw)
    assert fnt is not None
    assert fnt.main_table == [] and fnt.sub_tables == []
    assert list(fnt.walk()) == []
    print("  PASS: test_read_fnt_size_zero_is_empty_table")


def test_read_fnt_out_of_range_fails():
    raw = bytes(build_header(fnt=(0x10000, 8)))
    assert parse_header(raw).read_fnt(raw) is None
    print("  PASS: test_read_fnt_out_of_range_fails")


def test_code_segment_read():
    rom = bytearray(build_header(arm9=(0x200, 0, 0, 4)))
    rom += b"\xDE\xAD\xBE\xEF"
    header = parse_header(rom)
    assert bytes(header.arm9.read(rom)) == b"\xDE\xAD\xBE\xEF"
    assert header.arm7.read(rom) is not None  # zero-size segment at offset 0
    assert parse_header(build_header(arm7=(0x1F0, 0, 0, 0x20))).arm7.read(bytes(0x200)) is None
    print("  PASS: test_code_segment_read")


# ---------------------------------------------------------------------------
# FAT
# ---------------------------------------------------------------------------

def _fat_bytes(*pairs):
    return b"".join(struct.pack("<II", start, end) for start, end in pairs)


def test_fat_entry_count():
    rom = b"\x00" * 16 + _fat_bytes((0, 4), (4, 10), (10, 10))
    fat = FileAllocationTable.read(rom, 16, 24)
    assert len(fat) == 3
    assert fat[1].start == 4 and fat[1].end == 10
    assert [entry.end for entry in fat] == [4, 10, 10]
    print("  PASS: test_fat_entry_count")


def test_fat_read_bounds():
    rom = _fat_bytes((0, 1), (1, 2))
    assert FileAllocationTable.read(rom, 0, 17) is None  # past the end
    assert FileAllocationTable.read(rom, 0, 12) is None  # not whole entries
    assert len(FileAllocationTable.read(rom, 0, 0)) == 0
    assert len(FileAllocationTable.read(rom, 8, 8)) == 1
    print("  PASS: test_fat_read_bounds")


def test_fat_get_file():
    table = _fat_bytes((16, 21), (21, 16), (16, 100))
    data = b"0123456789ABCDEFGHIJKLMNOP"
    fat = FileAllocationTable.read(table, 0, 24)

    assert bytes(fat.get_file(0, data)) == b"GHIJK"
    assert len(fat.get_file(0, data)) == fat[0].end - fat[0].start
    assert fat.get_file(1, data) is None  # start > end
    assert fat.get_file(2, data) is None  # end past the image
    assert fat.get_file(3, data) is None  # no such file ID
    assert fat.get(-1) is None
    try:
        fat[3]
    except IndexError:
        pass
    else:
        raise AssertionError("expected IndexError")
    print("  PASS: test_fat_get_file")


def test_fat_entries_unaligned():
    """Entries are byte-packed; an odd offset decodes the same way."""
    rom = b"\x00" * 3 + _fat_bytes((0x01020304, 0x05060708))
    fat = FileAllocationTable.read(rom, 3, 8)
    assert fat[0].start == 0x01020304
    assert fat[0].end == 0x05060708
    print("  PASS: test_fat_entries_unaligned")


# ---------------------------------------------------------------------------
# Files aggregator
# ---------------------------------------------------------------------------

def test_read_files():
    rom = build_sample_rom()
    header = parse_header(rom)
    files = header.read_files(rom)
    assert isinstance(files, Files)
    assert files.fnt.directory_count == 2
    assert len(files.fat) == 3
    for file_id, expected in enumerate(SAMPLE_CONTENTS):
        assert bytes(files.fat.get_file(file_id, files.rom)) == expected
    print("  PASS: test_read_files")


def test_read_files_fails_when_either_table_fails():
    rom = bytearray(build_sample_rom())
    struct.pack_into("<I", rom, 0x48, len(rom))  # FAT offset at the very end
    rom = bytes(rom)
    header = parse_header(rom)
    assert header.read_fnt(rom) is not None
    assert header.read_fat(rom) is None
    assert header.read_files(rom) is None

    rom = bytearray(build_sample_rom())
    struct.pack_into("<I", rom, 0x40, len(rom) + 1)
    rom = bytes(rom)
    assert parse_header(rom).read_files(rom) is None
    print("  PASS: test_read_files_fails_when_either_table_fails")


def test_read_files_without_fnt():
    rom = build_rom([], [b"abc"], fnt_size=0)
    files = parse_header(rom).read_files(rom)
    assert files is not None
    assert list(files.fnt.walk()) == []
    assert bytes(files.fat.get_file(0, rom)) == b"abc"
    print("  PASS: test_read_files_without_fnt")


if __name__ == "__main__":
    tests = [
        test_parse_header_needs_full_header,
        test_header_view_is_prefix_only,
        test_device_capacity,
        test_header_fields,
        test_header_fields_listing_skips_reserved,
        test_non_utf8_title_displays_as_hex,
        test_read_fnt_size_zero_is_empty_table,
        test_read_fnt_out_of_range_fails,
        test_code_segment_read,
        test_fat_entry_count,
        test_fat_read_bounds,
        test_fat_get_file,
        test_fat_entries_unaligned,
        test_read_files,
        test_read_files_fails_when_either_table_fails,
        test_read_files_without_fnt,
    ]
    failed = 0
    for test in tests:
        try:
            test()
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test.__name__}: {e}")
    print(f"\nResults: {len(tests) - failed} passed, {failed} failed out of {len(tests)} tests")
    sys.exit(1 if failed else 0)
