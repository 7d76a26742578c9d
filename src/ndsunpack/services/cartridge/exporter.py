"""Cartridge exporter: writes decoded tables and extracted files to a directory.

Output layout (under the output directory):
  header.json, fnt.json, fat.json, banner.json   decoded structures
  files.txt                                      one "/dir/name" line per file
  files/<dir>/<name>                             file contents
  arm9.bin, arm7.bin                             raw code blobs (optional)
  icon.png                                       banner icon (optional)
"""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from ndsunpack.constants import (
    ARM7_BIN,
    ARM9_BIN,
    BANNER_JSON,
    FAT_JSON,
    FILE_LIST,
    FILES_DIR,
    FNT_JSON,
    HEADER_JSON,
    ICON_PNG,
)
from ndsunpack.utils.formatting import sanitize_filename
from ndsunpack.utils.logging import log_warning

from .files import Files
from .file_name_table import format_path
from .header import CartridgeHeader
from .models import CartridgeError, is_directory_id
from .rom_reader import CartridgeRomReader
from .serializer import banner_to_dict, fat_to_list, fnt_to_dict, header_to_dict


@dataclass
class ExtractedFile:
    path: Tuple[str, ...]
    file_id: int
    data: memoryview


@dataclass
class ExportResult:
    output_dir: str
    file_count: int = 0
    directory_count: int = 0
    files_written: int = 0
    skipped: int = 0
    max_file_id: Optional[int] = None


def iter_file_entries(files: Files) -> Iterator[ExtractedFile]:
    """Every file in the FNT walk whose ID resolves through the FAT."""
    for path, entry_id in files.fnt.walk():
        if is_directory_id(entry_id):
            continue
        data = files.fat.get_file(entry_id, files.rom)
        if data is None:
            log_warning(
                f"File ID {entry_id} (/{format_path(path)}) is outside the FAT "
                f"or points outside the image, skipping"
            )
            continue
        yield ExtractedFile(
            path=tuple(name.as_str_lossy() for name in path),
            file_id=entry_id,
            data=data,
        )


def safe_relative_path(path: Tuple[str, ...]) -> str:
    """Join ROM path components so the result stays below the destination."""
    return os.path.join(*(sanitize_filename(component) for component in path))


class CartridgeExporter:
    """Writes everything decoded from one cartridge image."""

    def __init__(self, settings: Dict[str, Any]):
        """
        Initialize the exporter.

        Args:
            settings: Settings dictionary (see config.settings.Settings)
        """
        self.settings = settings

    def export(self, rom_path: str, output_dir: Optional[str] = None) -> ExportResult:
        """
        Decode ``rom_path`` and write its contents.

        Raises:
            CartridgeError: If the image cannot be read or its tables cannot be decoded.
        """
        reader = CartridgeRomReader(rom_path)
        if not reader.load():
            raise CartridgeError(f"Could not read ROM: {rom_path}")
        if not reader.validate():
            raise CartridgeError(f"{rom_path} is too small to contain a cartridge header")

        header = reader.header
        rom = reader.data
        files = header.read_files(rom)
        if files is None:
            raise CartridgeError(f"{rom_path}: file name or allocation table is out of range")

        output_dir = output_dir or self.settings.get("output_dir", "out")
        os.makedirs(output_dir, exist_ok=True)
        result = ExportResult(
            output_dir=output_dir,
            directory_count=files.fnt.directory_count,
        )

        if self.settings.get("write_tables", True):
            self._write_tables(header, files, rom, output_dir)
        if self.settings.get("extract_code", False):
            self._write_code(header, rom, output_dir)
        if self.settings.get("extract_icon", False):
            self._write_icon(header, rom, output_dir)

        self._write_files(files, output_dir, result)
        return result

    def _write_json(self, output_dir: str, name: str, data: Any) -> None:
        with open(os.path.join(output_dir, name), "w") as f:
            json.dump(data, f, indent=self.settings.get("json_indent", 2))

    def _write_tables(
        self, header: CartridgeHeader, files: Files, rom: bytes, output_dir: str
    ) -> None:
        self._write_json(output_dir, HEADER_JSON, header_to_dict(header))
        self._write_json(output_dir, FNT_JSON, fnt_to_dict(files.fnt))
        self._write_json(output_dir, FAT_JSON, fat_to_list(files.fat))
        banner = header.read_banner(rom)
        if banner is not None:
            self._write_json(output_dir, BANNER_JSON, banner_to_dict(banner))

    def _write_code(self, header: CartridgeHeader, rom: bytes, output_dir: str) -> None:
        for name, segment in ((ARM9_BIN, header.arm9), (ARM7_BIN, header.arm7)):
            data = segment.read(rom)
            if data is None:
                log_warning(f"{name}: code segment points outside the image, skipping")
                continue
            with open(os.path.join(output_dir, name), "wb") as f:
                f.write(data)

    def _write_icon(self, header: CartridgeHeader, rom: bytes, output_dir: str) -> None:
        banner = header.read_banner(rom)
        if banner is None:
            log_warning("No banner in image, icon not written")
            return
        banner.icon_image().save(os.path.join(output_dir, ICON_PNG))

    def _write_files(self, files: Files, output_dir: str, result: ExportResult) -> None:
        write_list = self.settings.get("write_file_list", True)
        extract = self.settings.get("extract_files", True)
        limit = self.settings.get("file_limit", 0)
        files_dir = os.path.join(output_dir, FILES_DIR)

        lines = []
        for entry in iter_file_entries(files):
            result.file_count += 1
            if result.max_file_id is None or entry.file_id > result.max_file_id:
                result.max_file_id = entry.file_id
            lines.append("/" + "/".join(entry.path))

            if not extract or (limit and result.files_written >= limit):
                result.skipped += 1
                continue
            out_path = os.path.join(files_dir, safe_relative_path(entry.path))
            try:
                os.makedirs(os.path.dirname(out_path), exist_ok=True)
                with open(out_path, "wb") as f:
                    f.write(entry.data)
            except OSError as e:
                # Sanitized names can collide, e.g. file "X?" and directory "X*"
                log_warning(f"Could not write /{'/'.join(entry.path)} to {out_path}: {e}")
                result.skipped += 1
                continue
            result.files_written += 1

        if write_list:
            with open(os.path.join(output_dir, FILE_LIST), "w", encoding="utf-8") as f:
                for line in lines:
                    f.write(line + "\n")
