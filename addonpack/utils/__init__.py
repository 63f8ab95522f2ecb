# addonpack/utils/__init__.py
"""Utility functions for addonpack"""

from .file_utils import (
    get_file_size,
    format_size,
)

from .version_utils import (
    parse_version,
    is_valid_version,
)

__all__ = [
    'get_file_size',
    'format_size',
    'parse_version',
    'is_valid_version',
]
