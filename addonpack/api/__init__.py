# addonpack/api/__init__.py
"""API layer for addonpack"""

from .exceptions import (
    AddonPackError,
    InvalidNameError,
    LocationNotFoundError,
    KeyReadFailure,
    PackingFailure,
    SigningFailure,
    IoFailure,
    ConfigError,
    ProjectNotFoundError,
    OverlayError,
)
from .release import (
    load_project,
    prepare_release,
    build_release,
    pack_addons,
    clean_release,
    clean_archives,
)

__all__ = [
    # Convenience functions
    "load_project",
    "prepare_release",
    "build_release",
    "pack_addons",
    "clean_release",
    "clean_archives",

    # Exceptions
    "AddonPackError",
    "InvalidNameError",
    "LocationNotFoundError",
    "KeyReadFailure",
    "PackingFailure",
    "SigningFailure",
    "IoFailure",
    "ConfigError",
    "ProjectNotFoundError",
    "OverlayError",
]
