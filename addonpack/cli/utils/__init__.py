"""CLI utility functions"""

from .output import (
    console,
    format_release_result,
    format_pack_report,
    format_failures,
    print_error,
)
from .progress import unit_progress

__all__ = [
    # Output utilities
    'console',
    'format_release_result',
    'format_pack_report',
    'format_failures',
    'print_error',

    # Progress utilities
    'unit_progress',
]
