"""
Utility functions for ndsunpack.
"""

from .logging import log_error, log_warning, init_log_file, update_log_file_path, get_log_file
from .formatting import format_size, format_hex, sanitize_filename

__all__ = [
    "log_error",
    "log_warning",
    "init_log_file",
    "update_log_file_path",
    "get_log_file",
    "format_size",
    "format_hex",
    "sanitize_filename",
]
