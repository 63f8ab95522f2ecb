"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .location import AddonLocation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BuildStatus(Enum):
    """Outcome of one addon unit of work"""
    SIGNED = "signed"
    PACKED = "packed"
    SKIPPED_NOT_A_FILE = "skipped_not_a_file"
    FAILED = "failed"


class BuildStage(Enum):
    """Step of a unit of work where a failure happened"""
    NAME = "name"
    PACK = "pack"
    LAYOUT = "layout"
    COPY = "copy"
    SIGN = "sign"


@dataclass
class BuildFailure:
    """Failure of a single addon unit, with enough context to report it"""

    addon: str
    location: AddonLocation
    stage: BuildStage
    error: Exception
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def code(self) -> Optional[str]:
        return getattr(self.error, 'error_code', None)

    @property
    def message(self) -> str:
        return str(self.error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "addon": self.addon,
            "location": self.location.folder,
            "stage": self.stage.value,
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class BuildResult:
    """Result reported by one unit of work"""

    source: Path
    status: BuildStatus
    location: AddonLocation
    addon: Optional[str] = None
    output: Optional[Path] = None
    failure: Optional[BuildFailure] = None

    @classmethod
    def signed(cls, source: Path, location: AddonLocation, addon: str, output: Path) -> 'BuildResult':
        return cls(source, BuildStatus.SIGNED, location, addon=addon, output=output)

    @classmethod
    def packed(cls, source: Path, location: AddonLocation, addon: str, output: Path) -> 'BuildResult':
        return cls(source, BuildStatus.PACKED, location, addon=addon, output=output)

    @classmethod
    def skipped(cls, source: Path, location: AddonLocation) -> 'BuildResult':
        return cls(source, BuildStatus.SKIPPED_NOT_A_FILE, location)

    @classmethod
    def failed(cls,
               source: Path,
               location: AddonLocation,
               addon: str,
               stage: BuildStage,
               error: Exception) -> 'BuildResult':
        failure = BuildFailure(addon=addon, location=location, stage=stage, error=error)
        return cls(source, BuildStatus.FAILED, location, addon=addon, failure=failure)

    @property
    def is_success(self) -> bool:
        return self.status in (BuildStatus.SIGNED, BuildStatus.PACKED)


@dataclass
class ReleaseResult:
    """Aggregate of a release build"""

    version: str
    release_root: Path
    signed_count: int = 0
    failures: List[BuildFailure] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    copied_files: List[Path] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if every dispatched unit succeeded"""
        return not self.failures

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def complete(self) -> None:
        """Mark operation as complete"""
        self.end_time = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "release_root": str(self.release_root),
            "signed_count": self.signed_count,
            "failures": [f.to_dict() for f in self.failures],
            "skipped": [str(p) for p in self.skipped],
            "outputs": [str(p) for p in self.outputs],
            "copied_files": [str(p) for p in self.copied_files],
            "duration": self.duration,
        }


@dataclass
class PackReport:
    """Aggregate of a packing run"""

    packed_count: int = 0
    failures: List[BuildFailure] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        return not self.failures

    @property
    def duration(self) -> Optional[float]:
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def complete(self) -> None:
        self.end_time = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "packed_count": self.packed_count,
            "failures": [f.to_dict() for f in self.failures],
            "outputs": [str(p) for p in self.outputs],
            "duration": self.duration,
        }
