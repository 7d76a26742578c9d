from .models import (  # noqa: F401
    CartridgeError,
    CartridgeRomInfo,
    CodeSegmentInfo,
    OffsetAndSize,
    DIRECTORY_ID_BASE,
    HEADER_SIZE,
    is_directory_id,
)
from .file_allocation_table import FileAllocationTable, FileAllocationTableEntry  # noqa: F401
from .file_name_table import (  # noqa: F401
    DirectoryEntry,
    DirectoryMainTableEntry,
    FileEntry,
    FileNameTable,
    format_path,
)
from .files import Files  # noqa: F401
from .banner import Banner  # noqa: F401
from .header import CartridgeHeader, parse_header  # noqa: F401
from .rom_reader import CartridgeRomReader  # noqa: F401
from .exporter import CartridgeExporter, ExportResult, iter_file_entries  # noqa: F401
