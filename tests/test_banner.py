"""Tests for the icon/title banner."""

import os
import sys

# Add src to path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ndsunpack.services.cartridge import Banner, parse_header
from ndsunpack.services.cartridge.banner import bgr555_to_rgb888

from rom_factory import build_banner, build_sample_rom


def _bitmap_with(**pixels):
    """Zeroed bitmap with byte ``bN`` set to the given value."""
    bitmap = bytearray(0x200)
    for key, value in pixels.items():
        bitmap[int(key[1:])] = value
    return bytes(bitmap)


def test_bgr555_expansion():
    assert bgr555_to_rgb888(0x0000) == (0, 0, 0)
    assert bgr555_to_rgb888(0x7FFF) == (255, 255, 255)
    assert bgr555_to_rgb888(0x001F) == (255, 0, 0)
    assert bgr555_to_rgb888(0x03E0) == (0, 255, 0)
    assert bgr555_to_rgb888(0x7C00) == (0, 0, 255)
    assert bgr555_to_rgb888(0x0010) == (132, 0, 0)
    print("  PASS: test_bgr555_expansion")


def test_banner_titles():
    banner_bytes = build_banner(titles={0: "Japanese", 1: "Game Title\nSubtitle\nMaker"})
    rom = build_sample_rom(banner=banner_bytes)
    banner = parse_header(rom).read_banner(rom)
    assert banner is not None
    assert banner.version == 1
    assert banner.title_count == 6
    assert banner.title("english") == "Game Title\nSubtitle\nMaker"
    assert banner.title("japanese") == "Japanese"
    assert banner.title("french") == ""
    assert banner.title("chinese") is None  # not in a version 1 banner
    assert list(banner.titles()) == [
        "japanese", "english", "french", "german", "italian", "spanish",
    ]
    print("  PASS: test_banner_titles")


def test_banner_v2_has_chinese_title():
    banner_bytes = build_banner(titles={6: "中文"}, version=2)
    rom = build_sample_rom(banner=banner_bytes)
    banner = parse_header(rom).read_banner(rom)
    assert banner.version == 2
    assert banner.title_count == 7
    assert len(banner.raw) == 0x940
    assert banner.title("chinese") == "中文"
    assert banner.title("korean") is None
    print("  PASS: test_banner_v2_has_chinese_title")


def test_banner_missing_or_truncated():
    rom = build_sample_rom()
    assert parse_header(rom).icon_title_offset == 0
    assert parse_header(rom).read_banner(rom) is None

    truncated = build_banner()[:0x800]
    assert Banner.read(b"\x00" * 4 + truncated, 4) is None
    # v2 banner cut at the v1 size is truncated too
    assert Banner.read(b"\x00" * 4 + build_banner(version=2)[:0x840], 4) is None
    print("  PASS: test_banner_missing_or_truncated")


def test_palette_and_icon_indices():
    palette = [0x0000, 0x001F, 0x7C00] + [0] * 13
    # Tile 0, first byte: pixel (0, 0) = 1 (low nibble), pixel (1, 0) = 2
    # Tile 0, byte 4: first pixel of row 1
    # Tile 1, first byte: pixel (8, 0)
    # Tile 4 (second tile row), first byte: pixel (0, 8)
    bitmap = _bitmap_with(b0=0x21, b4=0x02, b32=0x01, b128=0x20)
    banner = Banner(build_banner(palette=palette, bitmap=bitmap))

    assert banner.palette()[:3] == [(0, 0, 0), (255, 0, 0), (0, 0, 255)]
    rows = banner.icon_indices()
    assert len(rows) == 32 and all(len(row) == 32 for row in rows)
    assert rows[0][0] == 1 and rows[0][1] == 2
    assert rows[1][0] == 2
    assert rows[0][8] == 1
    assert rows[8][0] == 0 and rows[8][1] == 2
    print("  PASS: test_palette_and_icon_indices")


def test_icon_image():
    palette = [0x7FFF, 0x001F] + [0] * 14
    bitmap = _bitmap_with(b0=0x10)
    image = Banner(build_banner(palette=palette, bitmap=bitmap)).icon_image()
    assert image.size == (32, 32)
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == (255, 255, 255, 0)  # index 0 is transparent
    assert image.getpixel((1, 0)) == (255, 0, 0, 255)
    print("  PASS: test_icon_image")


def test_unknown_title_language():
    banner = Banner(build_banner(titles={1: "Game"}))
    assert banner.title("klingon") is None
    assert banner.title("english") == "Game"
    print("  PASS: test_unknown_title_language")


def test_banner_view_hides_icon_data():
    names = [name for name, _ in Banner.fields()]
    assert names == ["version", "crc16_v1", "crc16_v2", "crc16_v3", "crc16_v103"]
    print("  PASS: test_banner_view_hides_icon_data")


if __name__ == "__main__":
    tests = [
        test_bgr555_expansion,
        test_banner_titles,
        test_banner_v2_has_chinese_title,
        test_banner_missing_or_truncated,
        test_palette_and_icon_indices,
        test_icon_image,
        test_unknown_title_language,
        test_banner_view_hides_icon_data,
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
