"""Addon data model"""

import logging
from dataclasses import dataclass
from functools import total_ordering
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .location import AddonLocation
from ..api.exceptions import InvalidNameError, LocationNotFoundError
from ..constants import (
    ARCHIVE_EXTENSION,
    STANDARD_NAME_CHARACTERS,
    DISCOURAGED_NAME_CHARACTERS,
)

logger = logging.getLogger(__name__)


def validate_name(name: str) -> str:
    """Validate an addon name

    Characters from the standard set pass silently. Characters from the
    discouraged set pass but log one warning per occurrence.

    Args:
        name: Addon name

    Returns:
        The validated name

    Raises:
        InvalidNameError: If the name is empty or has any other character
    """
    if not name:
        raise InvalidNameError(name)

    allowed = STANDARD_NAME_CHARACTERS | DISCOURAGED_NAME_CHARACTERS
    for character in name:
        if character not in allowed:
            raise InvalidNameError(name, character)

    for character in name:
        if character in DISCOURAGED_NAME_CHARACTERS:
            logger.warning("Invalid character `%s` in addon `%s`", character, name)

    return name


@total_ordering
@dataclass(frozen=True)
class Addon:
    """One packageable unit of mod content

    Path helpers only compute paths; nothing here touches the filesystem
    except ``exists`` and ``locate``.
    """

    name: str
    location: AddonLocation

    def __post_init__(self):
        validate_name(self.name)

    @classmethod
    def locate(cls, name: str, root: Union[str, Path] = ".") -> Optional['Addon']:
        """Find the first first-class location holding an addon folder

        Args:
            name: Addon folder name
            root: Project root

        Returns:
            Addon or None when no location contains ``name``

        Raises:
            InvalidNameError: If ``name`` breaks the naming rules
        """
        validate_name(name)
        for location in AddonLocation.first_class():
            if not location.exists(root):
                continue
            if (location.path(root) / name).is_dir():
                return cls(name, location)
        return None

    @classmethod
    def find(cls, name: str, root: Union[str, Path] = ".") -> 'Addon':
        """Like ``locate`` but raises LocationNotFoundError"""
        addon = cls.locate(name, root)
        if addon is None:
            raise LocationNotFoundError(name)
        return addon

    @classmethod
    def from_archive(cls,
                     archive: Union[str, Path],
                     location: AddonLocation,
                     prefix: Optional[str] = None) -> 'Addon':
        """Recover the addon a packed archive was built from

        ``{prefix}_{name}.pbo`` and ``{name}.pbo`` both map back to ``name``.
        """
        stem = Path(archive).name
        suffix = f".{ARCHIVE_EXTENSION}"
        if stem.endswith(suffix):
            stem = stem[:-len(suffix)]
        if prefix and stem.startswith(f"{prefix}_"):
            stem = stem[len(prefix) + 1:]
        return cls(stem, location)

    @property
    def sort_key(self) -> Tuple[AddonLocation, str]:
        return (self.location, self.name)

    def __lt__(self, other: 'Addon') -> bool:
        if not isinstance(other, Addon):
            return NotImplemented
        return self.sort_key < other.sort_key

    def source(self) -> Path:
        """Path to the addon folder, relative to the project root"""
        return Path(self.location.folder) / self.name

    def exists(self, root: Union[str, Path] = ".") -> bool:
        """Check if the addon folder exists under ``root``"""
        return (Path(root) / self.source()).is_dir()

    def archive_name(self, prefix: Optional[str] = None) -> str:
        """Filename of the packed archive

        Args:
            prefix: ``{prefix}_{name}.pbo`` when given, else ``{name}.pbo``
        """
        if prefix:
            return f"{prefix}_{self.name}.{ARCHIVE_EXTENSION}"
        return f"{self.name}.{ARCHIVE_EXTENSION}"

    def destination_parent(self,
                           release_root: Union[str, Path],
                           standalone: Optional[str] = None) -> Path:
        """Folder containing the released archive

        Args:
            release_root: Root folder of the release
            standalone: Mod name when the addon ships as its own nested mod
        """
        parent = Path(release_root) / self.location.folder

        if standalone:
            if self.location == AddonLocation.CORE:
                logger.warning(
                    "Standalone addons should be in optionals or compats: %s", self.name
                )
            parent = parent / f"@{standalone}_{self.name}" / "addons"

        return parent

    def destination(self,
                    release_root: Union[str, Path],
                    prefix: Optional[str] = None,
                    standalone: Optional[str] = None) -> Path:
        """File path of the released archive"""
        return self.destination_parent(release_root, standalone) / self.archive_name(prefix)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "name": self.name,
            "location": self.location.folder,
            "source": self.source().as_posix(),
        }

    def __str__(self) -> str:
        return f"{self.location.folder}/{self.name}"
