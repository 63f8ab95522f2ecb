"""Project descriptor models"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, Dict, List, Optional, Union

from .location import AddonLocation
from ..constants import ALL_OPTIONALS, MOD_NAME_PATTERN


def file_pattern_issue(pattern: Any) -> Optional[str]:
    """Problem with a ``files`` glob pattern, or None when usable

    Patterns are globbed relative to the project root, so they must be
    non-empty relative paths. ``..`` may be used to reach beside the root.
    """
    if not isinstance(pattern, str):
        return f"File pattern must be a string: {pattern!r}"
    if not pattern.strip():
        return "File pattern must not be empty"
    if PurePosixPath(pattern).is_absolute() or PureWindowsPath(pattern).is_absolute():
        return f"File pattern must be relative to the project root: '{pattern}'"
    return None


@dataclass
class ProjectConfig:
    """Project descriptor

    This represents the configuration stored in addonpack.yaml
    """
    name: str
    prefix: str = ""
    mod_name: str = ""
    key_name: str = ""
    version: Optional[str] = None
    files: List[str] = field(default_factory=list)
    optionals: Union[List[str], str] = field(default_factory=list)
    skip: List[str] = field(default_factory=list)
    custom_locations: List[str] = field(default_factory=list)
    reuse_private_key: bool = False
    nest_optionals_into_own_mods: bool = False

    def __post_init__(self):
        """Fill derived defaults"""
        if not self.mod_name:
            self.mod_name = self.prefix or self.name
        if not self.key_name:
            self.key_name = self.prefix or self.mod_name

    @property
    def all_optionals(self) -> bool:
        """Whether every optional on disk is selected"""
        return self.optionals == ALL_OPTIONALS

    @property
    def locations(self) -> List[AddonLocation]:
        """Built-in locations followed by the declared custom ones"""
        customs = sorted(AddonLocation.custom(folder) for folder in self.custom_locations)
        return list(AddonLocation.first_class()) + customs

    def is_skipped(self, addon_name: str) -> bool:
        return addon_name in self.skip

    def wants_optional(self, addon_name: str) -> bool:
        """Whether an optional addon is selected for packing"""
        return self.all_optionals or addon_name in self.optionals

    def with_overrides(self,
                       optionals: Optional[Union[List[str], str]] = None,
                       skip: Optional[List[str]] = None) -> 'ProjectConfig':
        """Return a copy with extra optionals and skipped addons merged in"""
        data = self.to_dict()

        if optionals == ALL_OPTIONALS:
            data['optionals'] = ALL_OPTIONALS
        elif optionals and not self.all_optionals:
            data['optionals'] = sorted(set(self.optionals) | set(optionals))

        if skip:
            data['skip'] = sorted(set(self.skip) | set(skip))

        return ProjectConfig.from_dict(data)

    def validate(self) -> List[str]:
        """Validate the descriptor

        Returns:
            List of problems, empty when valid
        """
        issues = []

        if not self.name:
            issues.append("Project name is required")
        if not MOD_NAME_PATTERN.match(self.mod_name or ""):
            issues.append(f"Invalid mod name: '{self.mod_name}'")
        if not MOD_NAME_PATTERN.match(self.key_name or ""):
            issues.append(f"Invalid key name: '{self.key_name}'")
        if isinstance(self.optionals, str) and self.optionals != ALL_OPTIONALS:
            issues.append(f"optionals must be a list or '{ALL_OPTIONALS}'")

        for pattern in self.files:
            issue = file_pattern_issue(pattern)
            if issue:
                issues.append(issue)

        for folder in self.custom_locations:
            try:
                AddonLocation.custom(folder)
            except ValueError as e:
                issues.append(str(e))

        return issues

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create ProjectConfig from dictionary"""
        version = data.get('version')
        return cls(
            name=data.get('name', ''),
            prefix=data.get('prefix', ''),
            mod_name=data.get('mod_name', ''),
            key_name=data.get('key_name', ''),
            version=str(version) if version is not None else None,
            files=list(data.get('files') or []),
            optionals=data.get('optionals') or [],
            skip=list(data.get('skip') or []),
            custom_locations=list(data.get('custom_locations') or []),
            reuse_private_key=bool(data.get('reuse_private_key', False)),
            nest_optionals_into_own_mods=bool(data.get('nest_optionals_into_own_mods', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'name': self.name,
            'prefix': self.prefix,
            'mod_name': self.mod_name,
            'key_name': self.key_name,
            'version': self.version,
            'files': list(self.files),
            'optionals': self.optionals if self.all_optionals else list(self.optionals),
            'skip': list(self.skip),
            'custom_locations': list(self.custom_locations),
            'reuse_private_key': self.reuse_private_key,
            'nest_optionals_into_own_mods': self.nest_optionals_into_own_mods,
        }
