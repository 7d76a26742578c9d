"""Icon/title banner pointed to by the header's icon_title_offset.

Banner layout:
  +0x000  u16 version (0x0001, 0x0002, 0x0003, 0x0103)
  +0x002  u16 CRC16 x4 (one per version range)
  +0x020  icon bitmap: 32x32, 4x4 tiles of 8x8 pixels, 4bpp, low nibble first
  +0x220  icon palette: 16 x u16 BGR555, index 0 is transparent
  +0x240  titles: 0x100 bytes each, UTF-16LE, NUL padded
          JP, EN, FR, DE, IT, ES (+ ZH from v2, + KO from v3)
"""

from typing import Dict, List, Optional, Tuple

from PIL import Image

from ndsunpack.byte_types import BytesField, IntField, StructView, U16LE, get_range

ICON_SIZE = 32
TILE_SIZE = 8
TITLE_OFFSET = 0x240
TITLE_SIZE = 0x100

TITLE_LANGUAGES = (
    "japanese",
    "english",
    "french",
    "german",
    "italian",
    "spanish",
    "chinese",
    "korean",
)

BANNER_SIZE_V1 = 0x840

# version -> (banner size, number of titles)
_BANNER_VERSIONS = {
    0x0001: (0x840, 6),
    0x0002: (0x940, 7),
    0x0003: (0xA40, 8),
    0x0103: (0x23C0, 8),
}

RGB = Tuple[int, int, int]


def bgr555_to_rgb888(value: int) -> RGB:
    """Expand a 15-bit BGR color to 8 bits per channel."""
    r = value & 0x1F
    g = (value >> 5) & 0x1F
    b = (value >> 10) & 0x1F
    return ((r << 3) | (r >> 2), (g << 3) | (g >> 2), (b << 3) | (b >> 2))


class Banner(StructView):
    SIZE = BANNER_SIZE_V1

    version = IntField(0x000, U16LE)
    crc16_v1 = IntField(0x002, U16LE)
    crc16_v2 = IntField(0x004, U16LE)
    crc16_v3 = IntField(0x006, U16LE)
    crc16_v103 = IntField(0x008, U16LE)
    _reserved = BytesField(0x00A, 0x16)
    icon_bitmap = BytesField(0x020, 0x200, hidden=True)
    icon_palette = BytesField(0x220, 0x20, hidden=True)

    def __init__(self, raw):
        # Newer versions append titles past the v1 size
        raw = memoryview(raw)
        if len(raw) < self.SIZE:
            raise ValueError(f"Banner needs at least {self.SIZE} bytes, got {len(raw)}")
        self._raw = raw

    @classmethod
    def read(cls, rom, offset: int) -> Optional["Banner"]:
        """Banner at ``offset``; None if there is none or it is truncated."""
        if offset == 0:
            return None
        version = U16LE.from_prefix(rom, offset)
        if version is None:
            return None
        size, _ = _BANNER_VERSIONS.get(version.get(), _BANNER_VERSIONS[0x0001])
        raw = get_range(rom, offset, offset + size)
        if raw is None:
            return None
        return cls(raw)

    @property
    def title_count(self) -> int:
        _, count = _BANNER_VERSIONS.get(self.version, _BANNER_VERSIONS[0x0001])
        return count

    def title(self, language: str = "english") -> Optional[str]:
        """Decoded title for ``language``, or None if unknown or this version lacks it."""
        if language not in TITLE_LANGUAGES:
            return None
        index = TITLE_LANGUAGES.index(language)
        if index >= self.title_count:
            return None
        start = TITLE_OFFSET + index * TITLE_SIZE
        raw = self._raw[start:start + TITLE_SIZE].tobytes()
        return raw.decode("utf-16-le", errors="replace").split("\x00", 1)[0]

    def titles(self) -> Dict[str, str]:
        return {
            language: self.title(language)
            for language in TITLE_LANGUAGES[: self.title_count]
        }

    def palette(self) -> List[RGB]:
        raw = self.icon_palette
        return [
            bgr555_to_rgb888(U16LE(raw[i:i + 2]).get())
            for i in range(0, len(raw), 2)
        ]

    def icon_indices(self) -> List[List[int]]:
        """32 rows of 32 palette indices."""
        bitmap = self.icon_bitmap
        tiles_per_row = ICON_SIZE // TILE_SIZE
        bytes_per_tile = TILE_SIZE * TILE_SIZE // 2
        rows = [[0] * ICON_SIZE for _ in range(ICON_SIZE)]
        for tile in range(tiles_per_row * tiles_per_row):
            tile_x = (tile % tiles_per_row) * TILE_SIZE
            tile_y = (tile // tiles_per_row) * TILE_SIZE
            base = tile * bytes_per_tile
            for i in range(bytes_per_tile):
                byte = bitmap[base + i]
                y = tile_y + (i * 2) // TILE_SIZE
                x = tile_x + (i * 2) % TILE_SIZE
                rows[y][x] = byte & 0xF
                rows[y][x + 1] = byte >> 4
        return rows

    def icon_image(self) -> Image.Image:
        """Icon as a 32x32 RGBA image; palette index 0 is transparent."""
        palette = self.palette()
        pixels = []
        for row in self.icon_indices():
            for index in row:
                r, g, b = palette[index]
                pixels.append((r, g, b, 0 if index == 0 else 255))
        image = Image.new("RGBA", (ICON_SIZE, ICON_SIZE))
        image.putdata(pixels)
        return image
