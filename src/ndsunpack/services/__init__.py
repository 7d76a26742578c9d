"""
Services layer for ndsunpack.
Handles cartridge decoding, ROM loading and export.
"""

from .cartridge import (
    CartridgeError,
    CartridgeExporter,
    CartridgeHeader,
    CartridgeRomReader,
    Files,
    parse_header,
)

__all__ = [
    'CartridgeError',
    'CartridgeExporter',
    'CartridgeHeader',
    'CartridgeRomReader',
    'Files',
    'parse_header',
]
