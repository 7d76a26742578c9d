"""
Settings management for ndsunpack.
Handles loading, saving, and managing export settings.
"""

import json
import os
import traceback
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from ndsunpack.constants import CONFIG_FILE, DEFAULT_OUTPUT_DIR, TEMP_LOG_DIR


@dataclass
class Settings:
    """Export settings with default values."""

    work_dir: str = ""  # where error.log lives
    output_dir: str = DEFAULT_OUTPUT_DIR
    write_tables: bool = True  # header.json, fnt.json, fat.json, banner.json
    write_file_list: bool = True  # files.txt
    extract_files: bool = True
    extract_code: bool = False  # arm9.bin / arm7.bin, copied verbatim
    extract_icon: bool = False  # icon.png from the banner
    file_limit: int = 0  # 0 = no limit
    json_indent: int = 2

    def __post_init__(self):
        """Set default paths if not specified."""
        if not self.work_dir:
            self.work_dir = TEMP_LOG_DIR

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create Settings from dictionary."""
        # Filter out unknown keys
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered_data)


def get_default_settings() -> Dict[str, Any]:
    """Get default settings as a dictionary."""
    return Settings().to_dict()


def load_settings(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load settings from config file.

    Args:
        config_file: Path to the JSON config (defaults to CONFIG_FILE)

    Returns:
        Dictionary of settings with defaults for missing values
    """
    config_file = config_file or CONFIG_FILE
    default_settings = get_default_settings()

    try:
        if os.path.exists(config_file):
            with open(config_file, "r") as f:
                loaded_settings = json.load(f)
                # Merge with defaults to handle new settings
                default_settings.update(loaded_settings)
        else:
            # Create config file with defaults
            save_settings(default_settings, config_file)
    except (OSError, ValueError) as e:
        from ndsunpack.utils.logging import log_error

        log_error(
            "Failed to load settings, using defaults",
            type(e).__name__,
            traceback.format_exc(),
        )

    return default_settings


def save_settings(
    settings_to_save: Dict[str, Any], config_file: Optional[str] = None
) -> bool:
    """
    Save settings to config file.

    Args:
        settings_to_save: Dictionary of settings to save
        config_file: Path to the JSON config (defaults to CONFIG_FILE)

    Returns:
        True if successful, False otherwise
    """
    config_file = config_file or CONFIG_FILE
    try:
        # Create directory if it doesn't exist
        config_dir = os.path.dirname(config_file)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(settings_to_save, f, indent=2)
        return True
    except OSError as e:
        from ndsunpack.utils.logging import log_error

        log_error("Failed to save settings", type(e).__name__, traceback.format_exc())
        return False
