"""Release context model"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .project import ProjectConfig
from ..constants import RELEASES_DIR, KEYS_DIR, RELEASE_KEYS_DIR


@dataclass(frozen=True)
class ReleaseContext:
    """Everything fixed for the duration of one release build"""

    project: ProjectConfig
    project_root: Path
    release_root: Path
    version: str
    mod_name: str

    @property
    def keys_dir(self) -> Path:
        """Project-wide keys folder shared by every release"""
        return self.project_root / RELEASES_DIR / KEYS_DIR

    @property
    def release_keys_dir(self) -> Path:
        """Keys folder shipped with this release"""
        return self.release_root / RELEASE_KEYS_DIR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'project': self.project.name,
            'project_root': str(self.project_root),
            'release_root': str(self.release_root),
            'version': self.version,
            'mod_name': self.mod_name,
        }
