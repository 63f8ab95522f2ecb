# addonpack/models/__init__.py
"""Data models for addonpack"""

from .location import AddonLocation, LocationKind
from .addon import Addon, validate_name
from .project import ProjectConfig, file_pattern_issue
from .release import ReleaseContext
from .result import (
    BuildStatus,
    BuildStage,
    BuildFailure,
    BuildResult,
    ReleaseResult,
    PackReport,
)

__all__ = [
    # Addon models
    "AddonLocation",
    "LocationKind",
    "Addon",
    "validate_name",

    # Project models
    "ProjectConfig",
    "file_pattern_issue",
    "ReleaseContext",

    # Result models
    "BuildStatus",
    "BuildStage",
    "BuildFailure",
    "BuildResult",
    "ReleaseResult",
    "PackReport",
]
