# addonpack/core/orchestrator.py
"""Parallel packing, release and signing orchestration

Shared one-time setup (layout, key, auxiliary files) runs first and any
failure there aborts the release. Each archive is then an independent unit
of work on a bounded thread pool; a failing unit is recorded and never stops
its siblings.
"""

import logging
import os
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .keystore import KeyPair, KeyStore
from .packer import Packer, TarPacker
from .project_manager import ProjectManager
from .path_resolver import PathResolver
from .release_layout import ReleaseLayout
from .signer import Ed25519Signer, Signer
from ..api.exceptions import (
    AddonPackError,
    ConfigError,
    IoFailure,
    OverlayError,
    PackingFailure,
    SigningFailure,
)
from ..constants import ARCHIVE_EXTENSION, ENV_JOBS, MSG_SIGNED
from ..models.addon import Addon
from ..models.location import AddonLocation
from ..models.project import ProjectConfig, file_pattern_issue
from ..models.release import ReleaseContext
from ..models.result import (
    BuildResult,
    BuildStage,
    BuildStatus,
    PackReport,
    ReleaseResult,
)
from ..storage.overlay import VirtualFileOverlay

logger = logging.getLogger(__name__)

# Called as (unit result, total units) once per completed unit
ProgressCallback = Callable[[BuildResult, int], None]


def resolve_jobs(jobs: Optional[int] = None) -> int:
    """Worker count: explicit value, then ADDONPACK_JOBS, then CPU count"""
    if jobs is None or jobs == 0:
        env_jobs = os.environ.get(ENV_JOBS)
        if env_jobs:
            try:
                jobs = int(env_jobs)
            except ValueError:
                raise ConfigError(f"{ENV_JOBS} must be an integer, got '{env_jobs}'")

    if jobs is None or jobs == 0:
        return os.cpu_count() or 1

    if jobs < 0:
        raise ConfigError(f"Job count must not be negative: {jobs}")

    return jobs


@dataclass(frozen=True)
class WorkItem:
    """One discovered entry of a category folder"""

    path: str
    location: AddonLocation

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ReleaseUnit:
    """Archive entry claimed for one release destination"""

    item: WorkItem
    addon: Addon
    destination: Path


class ResultAccumulator:
    """Single aggregation point for unit results

    Every mutation happens under one lock, so workers may report
    concurrently. Read the totals only after the pool has been joined.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.success_count = 0
        self.failures = []
        self.skipped = []
        self.outputs = []

    def record(self, result: BuildResult) -> None:
        with self._lock:
            if result.status in (BuildStatus.SIGNED, BuildStatus.PACKED):
                self.success_count += 1
                if result.output is not None:
                    self.outputs.append(result.output)
            elif result.status == BuildStatus.SKIPPED_NOT_A_FILE:
                self.skipped.append(result.source)
            elif result.failure is not None:
                self.failures.append(result.failure)


class BuildOrchestrator:
    """Dispatch per-addon packing and signing work across a worker pool

    Args:
        project: Project descriptor
        project_root: Project root directory
        signer: Signing capability, Ed25519 by default
        packer: Packing capability, deterministic tar by default
        overlay: Source tree view, a fresh memory-over-physical overlay by default
    """

    def __init__(self,
                 project: ProjectConfig,
                 project_root: Union[str, Path],
                 signer: Optional[Signer] = None,
                 packer: Optional[Packer] = None,
                 overlay: Optional[VirtualFileOverlay] = None):
        self.project = project
        self.path_resolver = PathResolver(project_root)
        self.project_root = self.path_resolver.project_root
        self.signer = signer or Ed25519Signer()
        self.packer = packer or TarPacker()
        self.overlay = overlay or VirtualFileOverlay.over_project(self.project_root)

    # Release

    def run(self,
            context: ReleaseContext,
            key_pair: Optional[KeyPair] = None,
            jobs: Optional[int] = None,
            progress: Optional[ProgressCallback] = None) -> ReleaseResult:
        """Sign and lay out every packed archive of the project

        Args:
            context: Release being built
            key_pair: Signing key, obtained from the KeyStore when omitted
            jobs: Worker count, CPU count when 0 or None
            progress: Called with each unit result and the unit total as it completes

        Returns:
            ReleaseResult with the signed count and collected failures

        Raises:
            ConfigError: If a ``files`` pattern is unusable
            IoFailure: If the shared layout cannot be prepared
            KeyReadFailure: If the persisted private key is unreadable
        """
        workers = resolve_jobs(jobs)
        result = ReleaseResult(version=context.version, release_root=context.release_root)

        layout = ReleaseLayout(context.release_root)
        layout.prepare()

        key_store = KeyStore(context.keys_dir)
        if key_pair is None:
            key_pair = key_store.obtain(
                self.project.key_name,
                self.project.reuse_private_key,
                release_keys_dir=context.release_keys_dir,
            )
        else:
            key_store.publish(key_pair, context.release_keys_dir)

        result.copied_files = self.copy_project_files(context.release_root)

        items = []
        for location in self.release_locations():
            layout.ensure_category_folder(location)
            items.extend(self.discover_archives(location))

        accumulator = ResultAccumulator()

        def report(unit_result: BuildResult) -> None:
            accumulator.record(unit_result)
            if progress:
                progress(unit_result, len(items))

        units = self.plan_release(items, context, report)
        logger.info("Signing %d archive(s) with %d worker(s)", len(units), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="addonpack-sign") as pool:
            futures = [
                pool.submit(self._release_unit, unit, context, layout, key_pair)
                for unit in units
            ]
            for future in as_completed(futures):
                report(future.result())

        result.signed_count = accumulator.success_count
        result.failures = sorted(accumulator.failures, key=lambda f: (f.location, f.addon))
        result.skipped = sorted(accumulator.skipped)
        result.outputs = sorted(accumulator.outputs)
        result.complete()

        logger.info(MSG_SIGNED.format(count=result.signed_count))
        for failure in result.failures:
            logger.error("%s/%s failed during %s: %s",
                         failure.location.folder, failure.addon, failure.stage.value, failure.message)

        return result

    def release_locations(self) -> List[AddonLocation]:
        """Locations processed by a release

        Core always; the others only when their folder exists.
        """
        locations = []
        for location in self.project.locations:
            if location == AddonLocation.CORE or self.overlay.is_dir(location.folder):
                locations.append(location)
        return locations

    def discover_archives(self, location: AddonLocation) -> List[WorkItem]:
        """Archive entries of a category folder

        Entries named like an archive that are not files are returned too
        and reported as skipped by ``plan_release``. Archives of skipped
        addons are left out.
        """
        suffix = f".{ARCHIVE_EXTENSION}"
        items = []

        for name in self.overlay.list_dir(location.folder):
            path = f"{location.folder}/{name}"
            if not name.endswith(suffix):
                logger.debug("Ignoring non-archive entry %s", path)
                continue

            if self.overlay.is_file(path) and self._is_skipped_archive(name):
                logger.info("Skipping %s", path)
                continue

            items.append(WorkItem(path, location))

        return items

    def _is_skipped_archive(self, filename: str) -> bool:
        if not self.project.skip:
            return False
        stem = filename[:-len(ARCHIVE_EXTENSION) - 1]
        prefix = f"{self.project.prefix}_" if self.project.prefix else ""
        if prefix and stem.startswith(prefix):
            stem = stem[len(prefix):]
        return self.project.is_skipped(stem)

    def standalone_for(self, location: AddonLocation, context: ReleaseContext) -> Optional[str]:
        """Mod name to nest an addon under, or None"""
        if not self.project.nest_optionals_into_own_mods:
            return None
        if location in (AddonLocation.OPTIONAL, AddonLocation.COMPAT):
            return context.mod_name
        return None

    def copy_project_files(self, release_root: Path) -> List[Path]:
        """Copy files matched by the project's glob patterns into the release root

        A pattern matching nothing is not an error. Matches inside the
        project are read through the overlay, matches beside it (``../LICENSE``)
        straight from disk.

        Raises:
            ConfigError: If a pattern is empty or absolute
            IoFailure: If a matched file cannot be copied
        """
        copied = []
        for pattern in self.project.files:
            issue = file_pattern_issue(pattern)
            if issue:
                raise ConfigError(issue)

            try:
                matches = sorted(p for p in self.project_root.glob(pattern) if p.is_file())
            except (ValueError, NotImplementedError) as e:
                raise ConfigError(f"Invalid file pattern '{pattern}': {e}") from e
            if not matches:
                logger.debug("Pattern matched no files: %s", pattern)

            for match in matches:
                relative = self.path_resolver.make_relative(match)
                target = release_root / match.name
                try:
                    if relative.is_absolute():
                        shutil.copyfile(relative, target)
                    else:
                        self.overlay.copy_out(relative.as_posix(), target)
                except (OSError, OverlayError) as e:
                    raise IoFailure(f"Failed to copy {relative} to {target}: {e}", str(target)) from e
                copied.append(target)

        return copied

    def plan_release(self,
                     items: List[WorkItem],
                     context: ReleaseContext,
                     report: Callable[[BuildResult], None]) -> List[ReleaseUnit]:
        """Resolve discovered entries into units with distinct destinations

        Non-file entries, invalid archive names and entries whose
        destination is already claimed are reported straight away and
        never dispatched. ``tst_foo.pbo`` and ``foo.pbo`` both release to
        ``tst_foo.pbo``; the entry already spelled like its destination
        wins, then the first by path.
        """
        prefix = self.project.prefix or None
        candidates = []

        for item in items:
            source = self.project_root / item.path
            if not self.overlay.is_file(item.path):
                logger.debug("Skipping non-file entry %s", item.path)
                report(BuildResult.skipped(source, item.location))
                continue

            try:
                addon = Addon.from_archive(item.name, item.location, prefix)
            except AddonPackError as e:
                report(BuildResult.failed(source, item.location, item.name, BuildStage.NAME, e))
                continue

            standalone = self.standalone_for(item.location, context)
            destination = addon.destination(context.release_root, prefix, standalone)
            candidates.append(ReleaseUnit(item, addon, destination))

        candidates.sort(key=lambda unit: (unit.item.name != unit.destination.name, unit.item.path))

        claimed: Dict[Path, ReleaseUnit] = {}
        for unit in candidates:
            owner = claimed.get(unit.destination)
            if owner is None:
                claimed[unit.destination] = unit
                continue

            error = IoFailure(
                f"{unit.item.path} releases to the same file as {owner.item.path}",
                str(unit.destination),
            )
            report(BuildResult.failed(self.project_root / unit.item.path, unit.item.location,
                                      unit.addon.name, BuildStage.LAYOUT, error))

        return sorted(claimed.values(), key=lambda unit: unit.item.path)

    def _release_unit(self,
                      unit: ReleaseUnit,
                      context: ReleaseContext,
                      layout: ReleaseLayout,
                      key_pair: KeyPair) -> BuildResult:
        item, addon, destination = unit.item, unit.addon, unit.destination
        source = self.project_root / item.path

        stage = BuildStage.LAYOUT
        try:
            layout.ensure_destination(addon, self.standalone_for(item.location, context))

            stage = BuildStage.COPY
            try:
                self.overlay.copy_out(item.path, destination)
            except (OSError, OverlayError) as e:
                raise IoFailure(f"Failed to copy {item.path}: {e}", str(destination)) from e
            logger.debug("Copied %s -> %s", item.path, destination)

            stage = BuildStage.SIGN
            try:
                self.signer.sign(destination, key_pair)
            except SigningFailure:
                raise
            except Exception as e:
                raise SigningFailure(f"Failed to sign {destination}: {e}") from e

        except Exception as e:
            if not isinstance(e, AddonPackError):
                logger.exception("Unexpected error releasing %s", item.path)
            return BuildResult.failed(source, item.location, addon.name, stage, e)

        return BuildResult.signed(source, item.location, addon.name, destination)

    # Packing

    def packable_addons(self) -> List[Addon]:
        """Addons selected for packing, sorted by (location, name)

        Core, compat and custom addons are all packed; optionals only when
        selected in the project. Skipped addons are left out.
        """
        manager = ProjectManager(self.path_resolver)
        selected = []
        for addon in manager.discover_addons(self.project.locations):
            if self.project.is_skipped(addon.name):
                logger.info("Skipping %s", addon)
                continue
            if addon.location == AddonLocation.OPTIONAL and not self.project.wants_optional(addon.name):
                continue
            selected.append(addon)
        return selected

    def pack(self,
             jobs: Optional[int] = None,
             addons: Optional[List[Addon]] = None,
             progress: Optional[ProgressCallback] = None) -> PackReport:
        """Pack addons into archives beside their source folders

        Args:
            jobs: Worker count, CPU count when 0 or None
            addons: Addons to pack, ``packable_addons()`` by default
            progress: Called with each unit result and the unit total as it completes

        Returns:
            PackReport with the packed count and collected failures
        """
        workers = resolve_jobs(jobs)
        report = PackReport()
        if addons is None:
            addons = self.packable_addons()

        accumulator = ResultAccumulator()
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="addonpack-pack") as pool:
            futures = [pool.submit(self._pack_unit, addon) for addon in sorted(addons)]
            for future in as_completed(futures):
                unit_result = future.result()
                accumulator.record(unit_result)
                if progress:
                    progress(unit_result, len(addons))

        report.packed_count = accumulator.success_count
        report.failures = sorted(accumulator.failures, key=lambda f: (f.location, f.addon))
        report.outputs = sorted(accumulator.outputs)
        report.complete()
        return report

    def _pack_unit(self, addon: Addon) -> BuildResult:
        source = self.project_root / addon.source()
        output = self.project_root / addon.location.folder / addon.archive_name(self.project.prefix or None)

        try:
            self.packer.pack(addon, self.overlay, output)
        except PackingFailure as e:
            logger.error("%s", e)
            return BuildResult.failed(source, addon.location, addon.name, BuildStage.PACK, e)
        except Exception as e:
            logger.exception("Unexpected error packing %s", addon)
            error = PackingFailure(f"Failed to pack {addon}: {e}")
            return BuildResult.failed(source, addon.location, addon.name, BuildStage.PACK, error)

        return BuildResult.packed(source, addon.location, addon.name, output)
