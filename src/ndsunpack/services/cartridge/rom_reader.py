"""ROM reader for Nintendo DS cartridge images.

Loads an image file into memory and summarizes it. The decoding itself is
done by the header/FNT/FAT views, which only ever see the in-memory buffer.
"""

import os
import traceback
from typing import Optional

from ndsunpack.utils.logging import log_error

from .banner import Banner
from .files import Files
from .header import CartridgeHeader, parse_header
from .models import CartridgeRomInfo, HEADER_SIZE, is_directory_id


class CartridgeRomReader:
    """Reads and parses a cartridge image file."""

    def __init__(self, rom_path: str):
        self.rom_path = rom_path
        self.data: Optional[bytes] = None
        self.header: Optional[CartridgeHeader] = None

    def load(self) -> bool:
        """Load ROM file into memory."""
        if not os.path.exists(self.rom_path):
            return False
        try:
            with open(self.rom_path, "rb") as f:
                self.data = f.read()
            return True
        except OSError as e:
            log_error(
                f"Failed to read ROM {self.rom_path}",
                type(e).__name__,
                traceback.format_exc(),
            )
            return False

    def validate(self) -> bool:
        """Check that the image is large enough to hold a header."""
        if self.data is None:
            return False
        self.header = parse_header(self.data)
        return self.header is not None

    def read_files(self) -> Optional[Files]:
        if not self.validate():
            return None
        return self.header.read_files(self.data)

    def read_banner(self) -> Optional[Banner]:
        if not self.validate():
            return None
        return self.header.read_banner(self.data)

    def get_info(self) -> CartridgeRomInfo:
        """Get ROM information: header identity plus file/directory counts."""
        if self.data is None:
            return CartridgeRomInfo(path=self.rom_path, size=0, is_valid=False)
        if not self.validate():
            log_error(
                f"{self.rom_path}: {len(self.data)} bytes is shorter than the "
                f"0x{HEADER_SIZE:X}-byte header"
            )
            return CartridgeRomInfo(path=self.rom_path, size=len(self.data), is_valid=False)

        header = self.header
        info = CartridgeRomInfo(
            path=self.rom_path,
            size=len(self.data),
            title=header.title.as_str_lossy(),
            game_code=header.game_code.as_str_lossy(),
            maker_code=header.maker_code.as_str_lossy(),
            unit_code=header.unit_code,
            rom_version=header.rom_version,
            device_capacity=header.device_capacity(),
            is_valid=True,
        )

        files = header.read_files(self.data)
        if files is None:
            log_error(f"{self.rom_path}: file tables could not be decoded")
            info.is_valid = False
        else:
            info.directory_count = files.fnt.directory_count
            info.file_count = files.fnt.fold(
                lambda count, _path, entry_id: count + (not is_directory_id(entry_id)),
                0,
            )

        banner = header.read_banner(self.data)
        if banner is not None:
            info.banner_title = banner.title("english") or ""

        return info
