"""
Command-line entry point for ndsunpack.

    ndsunpack info ROM
    ndsunpack list ROM [--dirs] [--ids] [--json]
    ndsunpack extract ROM [-o DIR] [--limit N] [--no-tables] [--no-files] [--code] [--icon]
"""

import argparse
import json
import sys
import traceback
from typing import List, Optional

from ndsunpack.config.settings import Settings, load_settings
from ndsunpack.constants import APP_NAME, APP_VERSION
from ndsunpack.services.cartridge import (
    CartridgeError,
    CartridgeExporter,
    CartridgeRomReader,
    Files,
    format_path,
    is_directory_id,
)
from ndsunpack.services.cartridge.serializer import walk_to_list
from ndsunpack.utils.formatting import format_hex, format_size
from ndsunpack.utils.logging import init_log_file, log_error, update_log_file_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description="Inspect and extract Nintendo DS cartridge images"
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--config", help="Path to a settings JSON file")
    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Show header and table summary")
    info.add_argument("rom", help="Path to the .nds image")

    listing = commands.add_parser("list", help="List files in the image")
    listing.add_argument("rom", help="Path to the .nds image")
    listing.add_argument("--dirs", action="store_true", help="Include directories")
    listing.add_argument("--ids", action="store_true", help="Prefix each line with its ID")
    listing.add_argument("--json", action="store_true", help="Print the walk as JSON")

    extract = commands.add_parser("extract", help="Extract files and decoded tables")
    extract.add_argument("rom", help="Path to the .nds image")
    extract.add_argument("-o", "--out", help="Output directory")
    extract.add_argument("--limit", type=int, help="Max files to extract (0 = all)")
    extract.add_argument("--no-tables", action="store_true", help="Skip header/fnt/fat JSON")
    extract.add_argument("--no-files", action="store_true", help="Only write files.txt")
    extract.add_argument("--code", action="store_true", help="Also write arm9.bin/arm7.bin")
    extract.add_argument("--icon", action="store_true", help="Also write icon.png")
    return parser


class NdsUnpackApp:
    """
    Runs one CLI command against a cartridge image.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def _load(self, rom_path: str) -> CartridgeRomReader:
        reader = CartridgeRomReader(rom_path)
        if not reader.load():
            raise CartridgeError(f"ROM not found or unreadable: {rom_path}")
        if not reader.validate():
            raise CartridgeError(f"{rom_path} is too small to contain a cartridge header")
        return reader

    def _files(self, reader: CartridgeRomReader) -> Files:
        files = reader.read_files()
        if files is None:
            raise CartridgeError(
                f"{reader.rom_path}: file name or allocation table is out of range"
            )
        return files

    def info(self, rom_path: str) -> None:
        reader = self._load(rom_path)
        info = reader.get_info()
        header = reader.header

        print(f"Title:        {info.title}")
        if info.banner_title:
            print(f"Banner title: {info.banner_title.splitlines()[0]}")
        print(f"Game code:    {header.game_code} ({info.region or 'unknown region'})")
        print(f"Maker code:   {header.maker_code}")
        print(f"Unit:         {header.unit_name} / region byte {header.region_name}")
        print(f"Version:      {info.version_string}")
        print(f"Capacity:     {format_size(info.device_capacity)}")
        print(f"Image size:   {format_size(info.size)}")
        for name, segment in (("ARM9", header.arm9), ("ARM7", header.arm7)):
            print(
                f"{name}:         rom {format_hex(segment.rom_offset)}  "
                f"entry {format_hex(segment.entry_address)}  "
                f"ram {format_hex(segment.ram_address)}  "
                f"size {format_size(segment.size)}"
            )
        print(f"FNT:          {format_hex(header.fnt.offset)} ({header.fnt.size} bytes)")
        print(f"FAT:          {format_hex(header.fat.offset)} ({header.fat.size} bytes)")
        print(f"Directories:  {info.directory_count}")
        print(f"Files:        {info.file_count}")
        if not info.is_valid:
            raise CartridgeError(f"{rom_path}: file tables could not be decoded")

    def list(self, rom_path: str, dirs: bool = False, ids: bool = False, as_json: bool = False) -> None:
        files = self._files(self._load(rom_path))
        if as_json:
            entries = walk_to_list(files.fnt)
            if not dirs:
                entries = [e for e in entries if not is_directory_id(e["id"])]
            print(json.dumps(entries, indent=self.settings.json_indent))
            return

        for path, entry_id in files.fnt.walk():
            is_dir = is_directory_id(entry_id)
            if is_dir and not dirs:
                continue
            line = "/" + format_path(path) + ("/" if is_dir else "")
            if ids:
                line = f"{format_hex(entry_id, 4)}  {line}"
            print(line)

    def extract(self, rom_path: str) -> None:
        exporter = CartridgeExporter(self.settings.to_dict())
        result = exporter.export(rom_path)
        print(f"Total files found: {result.file_count} in {result.directory_count} directories")
        if result.max_file_id is not None:
            print(f"Max file id: {result.max_file_id}")
        print(f"Extracted {result.files_written} files to {result.output_dir}")


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_dict(load_settings(args.config))
    if args.command == "extract":
        if args.out:
            settings.output_dir = args.out
        if args.limit is not None:
            settings.file_limit = args.limit
        if args.no_tables:
            settings.write_tables = False
        if args.no_files:
            settings.extract_files = False
        if args.code:
            settings.extract_code = True
        if args.icon:
            settings.extract_icon = True
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the command line."""
    args = build_parser().parse_args(argv)
    settings = _settings_from_args(args)
    update_log_file_path(settings.work_dir)
    init_log_file()

    app = NdsUnpackApp(settings)
    try:
        if args.command == "info":
            app.info(args.rom)
        elif args.command == "list":
            app.list(args.rom, dirs=args.dirs, ids=args.ids, as_json=args.json)
        elif args.command == "extract":
            app.extract(args.rom)
    except CartridgeError as e:
        log_error(str(e), type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        log_error(f"Application error: {e}", type(e).__name__, traceback.format_exc())
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
