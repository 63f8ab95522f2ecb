# addonpack/utils/file_utils.py
"""File operation utilities"""

from pathlib import Path


def get_file_size(file_path: Path) -> int:
    """
    Get file size in bytes

    Args:
        file_path: Path to file

    Returns:
        Size in bytes, 0 if the file is gone
    """
    try:
        return file_path.stat().st_size
    except FileNotFoundError:
        return 0


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"
