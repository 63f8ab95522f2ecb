# addonpack/core/project_manager.py
"""Project descriptor loading and addon discovery"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

from .path_resolver import PathResolver
from ..api.exceptions import ConfigError, InvalidNameError
from ..models.addon import Addon
from ..models.location import AddonLocation
from ..models.project import ProjectConfig

logger = logging.getLogger(__name__)


class ProjectManager:
    """Load the project descriptor and enumerate the addons on disk

    The PathResolver is created lazily so that constructing a manager never
    triggers project detection by itself.
    """

    def __init__(self, path_resolver: Optional[PathResolver] = None):
        self._path_resolver = path_resolver

    @property
    def path_resolver(self) -> PathResolver:
        """Get path resolver with lazy initialization"""
        if self._path_resolver is None:
            self._path_resolver = PathResolver()
        return self._path_resolver

    @property
    def project_root(self) -> Path:
        return self.path_resolver.project_root

    def load_project(self) -> ProjectConfig:
        """Load addonpack.yaml

        Returns:
            ProjectConfig instance

        Raises:
            ConfigError: If the file is missing, malformed or invalid
        """
        config_path = self.path_resolver.get_config_path()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigError(f"Project descriptor not found: {config_path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Project descriptor must be a mapping: {config_path}")

        project = ProjectConfig.from_dict(data)
        issues = project.validate()
        if issues:
            raise ConfigError(f"Invalid project descriptor: {'; '.join(issues)}")

        return project

    def save_project(self, project: ProjectConfig) -> Path:
        """Write addonpack.yaml"""
        config_path = self.path_resolver.get_config_path()
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(project.to_dict(), f, default_flow_style=False, sort_keys=False)
        return config_path

    def discover_addons(self,
                        locations: Optional[Iterable[AddonLocation]] = None,
                        strict: bool = False) -> List[Addon]:
        """Scan location folders for addon source folders

        Args:
            locations: Locations to scan, the first-class ones by default
            strict: Raise on invalid folder names instead of skipping them

        Returns:
            Addons sorted by (location, name)
        """
        if locations is None:
            locations = AddonLocation.first_class()

        addons = []
        for location in locations:
            folder = self.path_resolver.get_location_dir(location)
            if not folder.is_dir():
                continue

            for entry in sorted(folder.iterdir()):
                if not entry.is_dir():
                    continue
                try:
                    addons.append(Addon(entry.name, location))
                except InvalidNameError:
                    if strict:
                        raise
                    logger.error("Skipping folder with invalid addon name: %s", entry)

        return sorted(addons)
