"""
JSON-friendly serialization of decoded cartridge structures.

Embedded strings become text when they are valid UTF-8 and a list of byte
values otherwise. Sub-table entries are tagged with their kind
(``{"FileEntry": {...}}`` / ``{"DirectoryEntry": {...}}``).
"""

from typing import Any, Dict, List

from ndsunpack.byte_types import DynamicEmbeddedString, EmbeddedString, StructView

from .banner import Banner
from .file_allocation_table import FileAllocationTable
from .file_name_table import DirectoryEntry, FileNameTable, SubTableEntry, format_path
from .header import CartridgeHeader


def _string_value(value):
    text = value.as_str()
    if text is not None:
        return text
    return list(value.data())


def _value(value):
    if isinstance(value, StructView):
        return view_to_dict(value)
    if isinstance(value, (EmbeddedString, DynamicEmbeddedString)):
        return _string_value(value)
    if isinstance(value, memoryview):
        return value.hex()
    return value


def view_to_dict(view: StructView) -> Dict[str, Any]:
    """Public fields of a struct view, in layout order."""
    return {name: _value(getattr(view, name)) for name, _ in type(view).fields()}


def header_to_dict(header: CartridgeHeader) -> Dict[str, Any]:
    result = view_to_dict(header)
    result["device_capacity"] = header.device_capacity()
    return result


def sub_entry_to_dict(entry: SubTableEntry) -> Dict[str, Any]:
    if isinstance(entry, DirectoryEntry):
        return {
            "DirectoryEntry": {
                "name": _string_value(entry.name),
                "directory_id": entry.directory_id,
            }
        }
    return {"FileEntry": {"name": _string_value(entry.name)}}


def fnt_to_dict(fnt: FileNameTable) -> Dict[str, Any]:
    return {
        "main_table": [view_to_dict(entry) for entry in fnt.main_table],
        "sub_tables": [
            [sub_entry_to_dict(entry) for entry in sub_table]
            for sub_table in fnt.sub_tables
        ],
    }


def fat_to_list(fat: FileAllocationTable) -> List[Dict[str, Any]]:
    return [view_to_dict(entry) for entry in fat]


def banner_to_dict(banner: Banner) -> Dict[str, Any]:
    result = view_to_dict(banner)
    result["titles"] = banner.titles()
    return result


def walk_to_list(fnt: FileNameTable) -> List[Dict[str, Any]]:
    """Flattened walk: one {"path", "id"} record per file or directory."""
    return [
        {"path": "/" + format_path(path), "id": entry_id}
        for path, entry_id in fnt.walk()
    ]
