"""Addon location models"""

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Tuple, Union

from ..constants import CORE_FOLDER, OPTIONAL_FOLDER, COMPAT_FOLDER, KEYS_DIR


class LocationKind(IntEnum):
    """Built-in location kinds, in discovery priority order"""
    CORE = 0
    OPTIONAL = 1
    COMPAT = 2
    CUSTOM = 3


_BUILTIN_FOLDERS = {
    LocationKind.CORE: CORE_FOLDER,
    LocationKind.OPTIONAL: OPTIONAL_FOLDER,
    LocationKind.COMPAT: COMPAT_FOLDER,
}

# Custom locations may not shadow a built-in folder or the release keys folder
_RESERVED_FOLDERS = frozenset(_BUILTIN_FOLDERS.values()) | {KEYS_DIR}


@dataclass(frozen=True, order=True)
class AddonLocation:
    """Category an addon belongs to

    One of the built-in locations (``AddonLocation.CORE``,
    ``AddonLocation.OPTIONAL``, ``AddonLocation.COMPAT``) or a custom
    location created with ``AddonLocation.custom(folder)``. Ordering follows
    the kind first, so built-ins sort before customs and customs sort by
    folder name.
    """

    kind: LocationKind
    custom_folder: str = ""

    def __post_init__(self):
        if self.kind == LocationKind.CUSTOM:
            if not self.custom_folder:
                raise ValueError("Custom location requires a folder name")
            if Path(self.custom_folder).name != self.custom_folder:
                raise ValueError(f"Custom location must be a single folder name: {self.custom_folder}")
            if self.custom_folder in _RESERVED_FOLDERS:
                raise ValueError(f"Folder name is reserved: {self.custom_folder}")
        elif self.custom_folder:
            raise ValueError(f"Built-in location {self.kind.name} does not take a folder name")

    @classmethod
    def custom(cls, folder: str) -> 'AddonLocation':
        """Create a custom location backed by ``folder``"""
        return cls(LocationKind.CUSTOM, folder)

    @classmethod
    def first_class(cls) -> Tuple['AddonLocation', ...]:
        """Locations searched by addon discovery, in priority order"""
        return (cls.CORE, cls.OPTIONAL, cls.COMPAT)

    @classmethod
    def from_folder(cls, folder: str) -> 'AddonLocation':
        """Map a folder name to a location, unknown names become custom"""
        for kind, name in _BUILTIN_FOLDERS.items():
            if name == folder:
                return cls(kind)
        return cls.custom(folder)

    @property
    def folder(self) -> str:
        """Conventional folder name for this location"""
        if self.kind == LocationKind.CUSTOM:
            return self.custom_folder
        return _BUILTIN_FOLDERS[self.kind]

    @property
    def is_custom(self) -> bool:
        return self.kind == LocationKind.CUSTOM

    def path(self, root: Union[str, Path] = ".") -> Path:
        """Folder of this location under ``root``"""
        return Path(root) / self.folder

    def exists(self, root: Union[str, Path] = ".") -> bool:
        return self.path(root).is_dir()

    def __str__(self) -> str:
        return self.folder

    def __repr__(self) -> str:
        if self.is_custom:
            return f"AddonLocation.custom({self.custom_folder!r})"
        return f"AddonLocation.{self.kind.name}"


AddonLocation.CORE = AddonLocation(LocationKind.CORE)
AddonLocation.OPTIONAL = AddonLocation(LocationKind.OPTIONAL)
AddonLocation.COMPAT = AddonLocation(LocationKind.COMPAT)
