"""
Formatting utilities for ndsunpack.
Provides functions for formatting sizes and turning ROM names into safe filenames.
"""


def format_size(size_bytes: float) -> str:
    """
    Convert bytes to human readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string with appropriate unit (B, KB, MB, GB, TB)
    """
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def format_hex(value: int, width: int = 8) -> str:
    """Format an offset or address as 0x-prefixed uppercase hex."""
    return f"0x{value:0{width}X}"


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a filename by removing or replacing invalid characters.

    Names come straight from the ROM, so separators and "." / ".." are
    neutralised as well; the result is always a single, non-empty component.

    Args:
        filename: The filename to sanitize

    Returns:
        Sanitized filename
    """
    # Characters not allowed in filenames on various systems
    invalid_chars = '<>:"/\\|?*\x00'

    result = filename
    for char in invalid_chars:
        result = result.replace(char, "_")

    # Remove leading/trailing spaces and dots
    result = result.strip(" .")

    return result or "_"
