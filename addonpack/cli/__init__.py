"""Command line interface for addonpack"""

from .main import cli, main

__all__ = ["cli", "main"]
