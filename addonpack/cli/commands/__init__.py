"""CLI commands"""

from . import build
from . import clean
from . import locate

__all__ = [
    "build",
    "clean",
    "locate",
]
