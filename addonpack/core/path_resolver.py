"""Path resolution module for addonpack"""

import os
from pathlib import Path
from typing import Optional, Union

from ..api.exceptions import ProjectNotFoundError
from ..constants import (
    ENV_PROJECT_ROOT,
    KEYS_DIR,
    PROJECT_CONFIG_FILE,
    RELEASES_DIR,
)
from ..models.location import AddonLocation


class PathResolver:
    """Resolves paths within an addonpack project"""

    def __init__(self, project_root: Optional[Union[str, Path]] = None):
        """Initialize path resolver

        Args:
            project_root: Root directory of the project, discovered from the
                          current directory when omitted
        """
        if project_root is None:
            project_root = self.find_project_root()
        self.project_root = Path(project_root).resolve()

    @staticmethod
    def find_project_root(start_path: Optional[Union[str, Path]] = None) -> Path:
        """Find the directory holding the project descriptor

        ADDONPACK_PROJECT_ROOT wins over the search when set.

        Args:
            start_path: Directory to start the upward search from

        Returns:
            Project root path

        Raises:
            ProjectNotFoundError: If no ancestor holds addonpack.yaml
        """
        env_root = os.environ.get(ENV_PROJECT_ROOT)
        if env_root:
            root = Path(env_root).expanduser().resolve()
            if (root / PROJECT_CONFIG_FILE).is_file():
                return root
            raise ProjectNotFoundError(
                f"{ENV_PROJECT_ROOT} points to {root}, which has no {PROJECT_CONFIG_FILE}"
            )

        current = Path(start_path or Path.cwd()).resolve()
        for candidate in [current, *current.parents]:
            if (candidate / PROJECT_CONFIG_FILE).is_file():
                return candidate

        raise ProjectNotFoundError()

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a path relative to project root

        Args:
            path: Path to resolve (can be relative or absolute)

        Returns:
            Resolved absolute path
        """
        path = Path(path)

        if path.is_absolute():
            return path

        return (self.project_root / path).resolve()

    def get_config_path(self) -> Path:
        return self.project_root / PROJECT_CONFIG_FILE

    def get_releases_dir(self) -> Path:
        """Get the folder holding every release"""
        return self.project_root / RELEASES_DIR

    def get_keys_dir(self) -> Path:
        """Get the project-wide keys folder"""
        return self.get_releases_dir() / KEYS_DIR

    def get_release_root(self, version: str, mod_name: str) -> Path:
        """Get the root of one release

        Args:
            version: Release version
            mod_name: Mod folder name, without the leading ``@``

        Returns:
            ``releases/{version}/@{mod_name}``
        """
        return self.get_releases_dir() / version / f"@{mod_name}"

    def get_location_dir(self, location: AddonLocation) -> Path:
        """Get the source folder of a location"""
        return location.path(self.project_root)

    def make_relative(self, path: Union[str, Path]) -> Path:
        """Make a path relative to project root

        Args:
            path: Path to make relative

        Returns:
            Relative path, or the path unchanged when outside the project
        """
        path = Path(path).resolve()

        try:
            return path.relative_to(self.project_root)
        except ValueError:
            return path
