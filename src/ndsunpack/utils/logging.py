"""
Logging utilities for ndsunpack.
Appends timestamped ERROR/WARNING records to the work directory's error.log.
"""

import os
from datetime import datetime
from typing import Optional

from ndsunpack.constants import LOG_FILE

_SEPARATOR = "-" * 80 + "\n"

# Module-level log file path
_log_file: str = LOG_FILE


def get_log_file() -> str:
    """Get the current log file path."""
    return _log_file


def update_log_file_path(work_dir: str) -> None:
    """
    Move the log into ``work_dir`` (created if needed).

    Args:
        work_dir: The work directory path
    """
    global _log_file
    os.makedirs(work_dir, exist_ok=True)
    _log_file = os.path.join(work_dir, "error.log")


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _append(record: str) -> None:
    try:
        log_dir = os.path.dirname(_log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_log_file, "a") as f:
            f.write(record)
    except OSError as e:
        # If logging fails, print to console as fallback
        print(f"Failed to write to log file: {e}")
        print(record)


def log_error(
    error_msg: str,
    error_type: Optional[str] = None,
    traceback_str: Optional[str] = None,
) -> None:
    """
    Record a failure: an unreadable ROM, undecodable tables, a crashed command.

    Args:
        error_msg: What went wrong
        error_type: Optional exception class name
        traceback_str: Optional formatted traceback
    """
    record = f"[{_timestamp()}] ERROR: {error_msg}\n"
    if error_type:
        record += f"Type: {error_type}\n"
    if traceback_str:
        record += f"Traceback:\n{traceback_str}\n"
    _append(record + _SEPARATOR)


def log_warning(message: str) -> None:
    """Record something that was skipped while the rest of the export went on."""
    _append(f"[{_timestamp()}] WARNING: {message}\n" + _SEPARATOR)


def init_log_file() -> bool:
    """
    Start a fresh log with a session banner.

    Returns:
        True if successful, False otherwise
    """
    import sys

    from ndsunpack.constants import APP_NAME, APP_VERSION

    try:
        log_dir = os.path.dirname(_log_file) or "."
        os.makedirs(log_dir, exist_ok=True)

        with open(_log_file, "w") as f:
            f.write(f"{APP_NAME} {APP_VERSION} session started at {_timestamp()}\n")
            f.write(f"Python {sys.version.split()[0]} on {sys.platform}\n")
            f.write(_SEPARATOR)
        return True

    except OSError as e:
        print(f"Failed to initialize log file: {e}")
        return False
