"""Global constants for addonpack"""

import re

APP_NAME = "addonpack"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = "addonpack.yaml"

# Source tree folders, one per built-in addon location
CORE_FOLDER = "addons"
OPTIONAL_FOLDER = "optionals"
COMPAT_FOLDER = "compats"

# Release tree
RELEASES_DIR = "releases"
KEYS_DIR = "keys"
RELEASE_ADDONS_DIR = CORE_FOLDER
RELEASE_KEYS_DIR = KEYS_DIR

# Archive and key naming
ARCHIVE_EXTENSION = "pbo"
PRIVATE_KEY_EXTENSION = "privkey"
PUBLIC_KEY_EXTENSION = "pubkey"
SIGNATURE_EXTENSION = "sig"

# Special value for the optionals list meaning "every optional on disk"
ALL_OPTIONALS = "all"

# Addon name validation
STANDARD_NAME_CHARACTERS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789_")
DISCOURAGED_NAME_CHARACTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ-")

# Error codes
class ErrorCode:
    INVALID_NAME = "AP001"
    LOCATION_NOT_FOUND = "AP002"
    KEY_READ_FAILURE = "AP003"
    PACKING_FAILURE = "AP004"
    SIGNING_FAILURE = "AP005"
    IO_FAILURE = "AP006"
    CONFIG_FORMAT_ERROR = "AP007"
    PROJECT_NOT_FOUND = "AP008"
    OVERLAY_FAILURE = "AP009"

# Environment variables
ENV_PROJECT_ROOT = "ADDONPACK_PROJECT_ROOT"
ENV_JOBS = "ADDONPACK_JOBS"

# Validation patterns
MOD_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_KEY = "🔑"
EMOJI_PACKAGE = "📦"

# Messages templates
MSG_KEYGEN = f"{EMOJI_KEY} KeyGen {{key_name}}.{PUBLIC_KEY_EXTENSION}"
MSG_SIGNED = f"{EMOJI_SUCCESS} Signed {{count}}"
MSG_FINISHED = f"{EMOJI_SUCCESS} Finished {{name}} v{{version}}"
