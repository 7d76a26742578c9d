"""
Global constants for ndsunpack.
Contains version info and path configuration.
"""

import os

# **************************************************************** #
#                       Build Info                                     #
# **************************************************************** #
APP_NAME = "ndsunpack"
APP_VERSION = "0.1.0"

# **************************************************************** #
#                       Environment Detection                        #
# **************************************************************** #
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))

# **************************************************************** #
#                       Path Configuration                           #
# **************************************************************** #
if DEV_MODE:
    TEMP_LOG_DIR = os.path.join(SCRIPT_DIR, "..", "..", "workdir")
else:
    TEMP_LOG_DIR = os.path.join(os.path.expanduser("~"), ".ndsunpack")

CONFIG_FILE = os.path.join(TEMP_LOG_DIR, "config.json")
LOG_FILE = os.path.join(TEMP_LOG_DIR, "error.log")

DEFAULT_OUTPUT_DIR = "out"

# **************************************************************** #
#                       Export Layout                                #
# **************************************************************** #
HEADER_JSON = "header.json"
FNT_JSON = "fnt.json"
FAT_JSON = "fat.json"
BANNER_JSON = "banner.json"
FILE_LIST = "files.txt"
FILES_DIR = "files"
ARM9_BIN = "arm9.bin"
ARM7_BIN = "arm7.bin"
ICON_PNG = "icon.png"
