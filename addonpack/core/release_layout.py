"""Release directory skeleton"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Union

from ..api.exceptions import IoFailure
from ..constants import RELEASE_ADDONS_DIR, RELEASE_KEYS_DIR
from ..models.addon import Addon
from ..models.location import AddonLocation

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """Create a directory and its parents

    Safe to call from several workers at once: an existing directory, even
    one created by a competing caller, is not an error.

    Raises:
        IoFailure: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailure(f"Failed to create directory {path}: {e}", str(path)) from e
    return path


class ReleaseLayout:
    """Creates the on-disk skeleton of one release

    Args:
        release_root: ``releases/{version}/@{mod_name}``
    """

    def __init__(self, release_root: Union[str, Path]):
        self.release_root = Path(release_root)

    @property
    def addons_dir(self) -> Path:
        return self.release_root / RELEASE_ADDONS_DIR

    @property
    def keys_dir(self) -> Path:
        return self.release_root / RELEASE_KEYS_DIR

    def prepare(self) -> Path:
        """Ensure the release root, its addons folder and its keys folder"""
        ensure_dir(self.addons_dir)
        ensure_dir(self.keys_dir)
        logger.debug("Prepared release layout at %s", self.release_root)
        return self.release_root

    def category_folder(self, location: AddonLocation) -> Path:
        return self.release_root / location.folder

    def ensure_category_folder(self, location: AddonLocation) -> Path:
        """Ensure the release folder of a location"""
        return ensure_dir(self.category_folder(location))

    def ensure_destination(self, addon: Addon, standalone: Optional[str] = None) -> Path:
        """Ensure the folder an addon's archive is released into

        Args:
            addon: Addon being released
            standalone: Mod name when the addon is nested into its own mod

        Returns:
            The destination folder
        """
        return ensure_dir(addon.destination_parent(self.release_root, standalone))

    def clear(self) -> bool:
        """Remove the whole release root

        Returns:
            True if something was removed
        """
        if not self.release_root.exists():
            return False
        try:
            shutil.rmtree(self.release_root)
        except OSError as e:
            raise IoFailure(f"Failed to remove {self.release_root}: {e}", str(self.release_root)) from e
        logger.info("Removed release %s", self.release_root)
        return True
