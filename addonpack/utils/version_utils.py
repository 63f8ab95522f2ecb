"""Version management utilities"""

from typing import Optional

from packaging.version import parse, Version, InvalidVersion


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(version_str)
    except InvalidVersion:
        return None


def is_valid_version(version_str: Optional[str]) -> bool:
    """Check if a release version can be parsed"""
    if not version_str or not version_str.strip():
        return False
    if "/" in version_str or "\\" in version_str:
        return False
    return parse_version(version_str) is not None

