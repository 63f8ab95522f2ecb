"""addonpack - Release packaging for modular game-content addons.

This tool resolves addon source and release paths, manages the signing key,
and packs, signs and lays out every addon of a project into a versioned
release tree.
"""

from .__version__ import __version__, __version_info__, __license__

# Exceptions
from .api.exceptions import (
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

# Core API
from .api.release import (
    load_project,
    prepare_release,
    build_release,
    pack_addons,
    clean_release,
    clean_archives,
)

# Data models
from .models import (
    Addon,
    AddonLocation,
    ProjectConfig,
    ReleaseContext,
    ReleaseResult,
    PackReport,
    BuildFailure,
    BuildStatus,
)
from .core import BuildOrchestrator, KeyPair, KeyStore, ReleaseLayout
from .storage import VirtualFileOverlay

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Core API functions
    "load_project",
    "prepare_release",
    "build_release",
    "pack_addons",
    "clean_release",
    "clean_archives",

    # Main classes
    "BuildOrchestrator",
    "KeyPair",
    "KeyStore",
    "ReleaseLayout",
    "VirtualFileOverlay",

    # Data models
    "Addon",
    "AddonLocation",
    "ProjectConfig",
    "ReleaseContext",
    "ReleaseResult",
    "PackReport",
    "BuildFailure",
    "BuildStatus",

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
