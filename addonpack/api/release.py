"""Release API for packing, signing and cleaning releases"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Union

from ..core import (
    BuildOrchestrator,
    KeyPair,
    Packer,
    PathResolver,
    ProjectManager,
    ReleaseLayout,
    Signer,
)
from ..core.orchestrator import ProgressCallback
from ..models import PackReport, ProjectConfig, ReleaseContext, ReleaseResult
from ..storage import VirtualFileOverlay
from ..utils.version_utils import is_valid_version
from .exceptions import ConfigError, IoFailure

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_project(project_root: Optional[PathLike] = None) -> ProjectConfig:
    """Load the project descriptor

    Args:
        project_root: Project root, discovered from the current directory
                      when omitted

    Returns:
        ProjectConfig
    """
    return ProjectManager(PathResolver(project_root)).load_project()


def prepare_release(project: ProjectConfig,
                    version: Optional[str] = None,
                    project_root: Optional[PathLike] = None) -> ReleaseContext:
    """
    Fix everything a release build needs before any file is written

    Args:
        project: Project descriptor
        version: Release version, the project's version when omitted
        project_root: Project root, discovered when omitted

    Returns:
        ReleaseContext

    Raises:
        ConfigError: If the version is missing or invalid, or the project
                     descriptor does not validate
        ProjectNotFoundError: If no project root can be found
    """
    resolver = PathResolver(project_root)

    issues = project.validate()
    if issues:
        raise ConfigError(f"Invalid project descriptor: {'; '.join(issues)}")

    version = version or project.version
    if not version:
        raise ConfigError("Unable to determine version number")
    if not is_valid_version(version):
        raise ConfigError(f"Invalid release version: '{version}'")

    return ReleaseContext(
        project=project,
        project_root=resolver.project_root,
        release_root=resolver.get_release_root(version, project.mod_name),
        version=version,
        mod_name=project.mod_name,
    )


def build_release(context: ReleaseContext,
                  jobs: Optional[int] = None,
                  signer: Optional[Signer] = None,
                  overlay: Optional[VirtualFileOverlay] = None,
                  key_pair: Optional[KeyPair] = None,
                  progress: Optional[ProgressCallback] = None) -> ReleaseResult:
    """
    Lay out, sign and aggregate a release

    Args:
        context: Release prepared by ``prepare_release``
        jobs: Worker count, CPU count when 0 or None
        signer: Signing capability, Ed25519 by default
        overlay: Source tree view
        key_pair: Signing key, obtained from the key store when omitted
        progress: Called with each unit result and the unit total

    Returns:
        ReleaseResult with ``signed_count`` and ``failures``

    Raises:
        IoFailure: If the shared release layout cannot be prepared
        KeyReadFailure: If the persisted private key is unreadable
    """
    orchestrator = BuildOrchestrator(
        context.project,
        context.project_root,
        signer=signer,
        overlay=overlay,
    )
    return orchestrator.run(context, key_pair=key_pair, jobs=jobs, progress=progress)


def pack_addons(project: ProjectConfig,
                project_root: Optional[PathLike] = None,
                jobs: Optional[int] = None,
                packer: Optional[Packer] = None,
                overlay: Optional[VirtualFileOverlay] = None,
                progress: Optional[ProgressCallback] = None) -> PackReport:
    """
    Pack every selected addon into an archive beside its source folder

    Returns:
        PackReport with ``packed_count`` and ``failures``
    """
    root = PathResolver(project_root).project_root
    orchestrator = BuildOrchestrator(project, root, packer=packer, overlay=overlay)
    return orchestrator.pack(jobs=jobs, progress=progress)


def clean_release(project_root: Optional[PathLike] = None,
                  version: Optional[str] = None,
                  mod_name: Optional[str] = None) -> List[Path]:
    """
    Remove release output

    Args:
        project_root: Project root, discovered when omitted
        version: Release to remove; every release when omitted
        mod_name: Only remove ``@{mod_name}`` of that version

    Returns:
        Removed paths. The project-wide keys folder is always kept.
    """
    resolver = PathResolver(project_root)
    releases_dir = resolver.get_releases_dir()
    removed = []

    if version is not None and mod_name is not None:
        layout = ReleaseLayout(resolver.get_release_root(version, mod_name))
        if layout.clear():
            removed.append(layout.release_root)
        return removed

    if not releases_dir.is_dir():
        return removed

    if version is not None:
        targets = [releases_dir / version]
    else:
        keys_dir = resolver.get_keys_dir()
        targets = sorted(p for p in releases_dir.iterdir() if p != keys_dir)

    for target in targets:
        if not target.exists():
            continue
        try:
            if target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise IoFailure(f"Failed to remove {target}: {e}", str(target)) from e
        logger.info("Removed %s", target)
        removed.append(target)

    return removed


def clean_archives(project: ProjectConfig, project_root: Optional[PathLike] = None) -> List[Path]:
    """Remove packed archives from the source tree

    Returns:
        Removed archive paths
    """
    root = PathResolver(project_root).project_root
    orchestrator = BuildOrchestrator(project, root)
    removed = []

    for location in orchestrator.release_locations():
        for item in orchestrator.discover_archives(location):
            path = root / item.path
            if path.is_file():
                try:
                    path.unlink()
                except OSError as e:
                    raise IoFailure(f"Failed to remove {path}: {e}", str(path)) from e
                removed.append(path)

    return removed
