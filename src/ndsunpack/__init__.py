"""
ndsunpack - read-only decoder for Nintendo DS cartridge images.

    from ndsunpack import parse_header

    header = parse_header(rom)
    files = header.read_files(rom)
    for path, entry_id in files.fnt.walk():
        ...
"""

from ndsunpack.constants import APP_VERSION as __version__  # noqa: F401
from ndsunpack.services.cartridge import (  # noqa: F401
    Banner,
    CartridgeError,
    CartridgeHeader,
    CartridgeRomReader,
    DirectoryEntry,
    FileAllocationTable,
    FileEntry,
    FileNameTable,
    Files,
    format_path,
    is_directory_id,
    parse_header,
)
