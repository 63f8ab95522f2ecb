"""Tests for parallel packing and release orchestration."""

import threading
from pathlib import Path
from typing import Callable, Optional

import pytest

from addonpack.api import prepare_release
from addonpack.api.exceptions import (
    ConfigError,
    IoFailure,
    KeyReadFailure,
    PackingFailure,
    SigningFailure,
)
from addonpack.constants import ENV_JOBS
from addonpack.core import (
    BuildOrchestrator,
    Ed25519Signer,
    KeyPair,
    Packer,
    ResultAccumulator,
    Signer,
    TarPacker,
    resolve_jobs,
)
from addonpack.models import AddonLocation, BuildResult, BuildStage, ProjectConfig


class RecordingSigner(Signer):
    """Signer double that fails for selected archive names."""

    def __init__(self, fail_for: Optional[str] = None, error: Optional[Exception] = None):
        self.fail_for = fail_for
        self.error = error or SigningFailure(f"refusing to sign {fail_for}")
        self.signed = []
        self._lock = threading.Lock()

    def sign(self, archive: Path, key_pair: KeyPair) -> Path:
        if archive.name == self.fail_for:
            raise self.error
        with self._lock:
            self.signed.append(archive.name)
        return archive


class FailingPacker(Packer):
    """Packer double that fails for one addon and delegates the rest."""

    def __init__(self, fail_for: str):
        self.fail_for = fail_for
        self.inner = TarPacker()

    def pack(self, addon, source, output):
        if addon.name == self.fail_for:
            raise PackingFailure(f"cannot pack {addon}")
        return self.inner.pack(addon, source, output)


@pytest.fixture
def archive_project(make_project: Callable[..., Path], write_file) -> Callable[..., Path]:
    """Project holding packed archives only."""

    def _make(descriptor=None, archives=("addons/tst_a.pbo", "addons/tst_b.pbo", "addons/tst_c.pbo")):
        root = make_project(descriptor)
        for archive in archives:
            write_file(root / archive, archive.encode())
        return root

    return _make


def release(root: Path, signer: Optional[Signer] = None, jobs: int = 2, **overrides):
    project = ProjectConfig.from_dict({"name": "Test Mod", "prefix": "tst", "version": "1.0.0", **overrides})
    context = prepare_release(project, project_root=root)
    orchestrator = BuildOrchestrator(project, root, signer=signer)
    return context, orchestrator.run(context, jobs=jobs)


class TestResolveJobs:
    """Worker count selection."""

    def test_explicit(self) -> None:
        assert resolve_jobs(3) == 3

    def test_default_is_cpu_count(self) -> None:
        assert resolve_jobs(None) >= 1
        assert resolve_jobs(0) >= 1

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_JOBS, "5")
        assert resolve_jobs(None) == 5
        assert resolve_jobs(2) == 2

    def test_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        with pytest.raises(ConfigError):
            resolve_jobs(-1)
        monkeypatch.setenv(ENV_JOBS, "many")
        with pytest.raises(ConfigError):
            resolve_jobs(None)


class TestResultAccumulator:
    """Concurrent aggregation."""

    def test_concurrent_records(self, tmp_path: Path) -> None:
        accumulator = ResultAccumulator()

        def report(index: int) -> None:
            source = tmp_path / f"a{index}.pbo"
            if index % 3 == 0:
                result = BuildResult.failed(source, AddonLocation.CORE, f"a{index}",
                                            BuildStage.SIGN, SigningFailure("no"))
            else:
                result = BuildResult.signed(source, AddonLocation.CORE, f"a{index}", source)
            accumulator.record(result)

        threads = [threading.Thread(target=report, args=(i,)) for i in range(60)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert accumulator.success_count == 40
        assert len(accumulator.failures) == 20
        assert len(accumulator.outputs) == 40


class TestRelease:
    """Signing and laying out a release."""

    @pytest.mark.parametrize("jobs", [1, 4])
    def test_one_signing_failure_does_not_abort(self, archive_project, jobs: int) -> None:
        root = archive_project()
        signer = RecordingSigner(fail_for="tst_b.pbo")
        _, result = release(root, signer, jobs=jobs)

        assert result.signed_count == 2
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.addon == "b"
        assert failure.location == AddonLocation.CORE
        assert failure.stage == BuildStage.SIGN
        assert failure.code == "AP005"
        assert sorted(signer.signed) == ["tst_a.pbo", "tst_c.pbo"]
        assert not result.is_success

    def test_unexpected_signer_error_is_wrapped(self, archive_project) -> None:
        root = archive_project()
        signer = RecordingSigner(fail_for="tst_a.pbo", error=RuntimeError("boom"))
        _, result = release(root, signer)

        assert result.signed_count == 2
        assert isinstance(result.failures[0].error, SigningFailure)
        assert "boom" in result.failures[0].message

    def test_default_signer_writes_verifiable_signatures(self, archive_project) -> None:
        root = archive_project()
        context, result = release(root)

        assert result.is_success
        assert result.signed_count == 3
        public = (context.release_root / "keys" / "tst.pubkey").read_bytes()
        assert public == (root / "releases" / "keys" / "tst.pubkey").read_bytes()
        for name in ("tst_a.pbo", "tst_b.pbo", "tst_c.pbo"):
            archive = context.release_root / "addons" / name
            assert Ed25519Signer.verify(archive, archive.with_name(f"{name}.tst.sig"), public)

    def test_release_layout(self, archive_project, write_file) -> None:
        root = archive_project(
            {"files": ["mod.cpp", "*.md"]},
            archives=("addons/tst_main.pbo", "compats/tst_other.pbo", "addons/readme.txt"),
        )
        write_file(root / "mod.cpp")
        write_file(root / "README.md")
        context, result = release(root, RecordingSigner(), files=["mod.cpp", "*.md"])

        release_root = context.release_root
        assert release_root == root.resolve() / "releases" / "1.0.0" / "@tst"
        assert (release_root / "addons" / "tst_main.pbo").read_bytes() == b"addons/tst_main.pbo"
        assert (release_root / "compats" / "tst_other.pbo").is_file()
        assert not (release_root / "optionals").exists()
        assert not (release_root / "addons" / "readme.txt").exists()
        assert (release_root / "mod.cpp").is_file()
        assert (release_root / "README.md").is_file()
        assert sorted(p.name for p in result.copied_files) == ["README.md", "mod.cpp"]

    def test_directories_are_reported_skipped(self, archive_project) -> None:
        root = archive_project()
        (root / "addons" / "main").mkdir()
        (root / "addons" / "odd.pbo").mkdir()
        _, result = release(root, RecordingSigner())

        assert result.signed_count == 3
        assert result.skipped == [root.resolve() / "addons" / "odd.pbo"]
        assert result.failures == []

    def test_skip_list(self, archive_project) -> None:
        root = archive_project()
        signer = RecordingSigner()
        _, result = release(root, signer, skip=["b"])

        assert result.signed_count == 2
        assert "tst_b.pbo" not in signer.signed

    def test_nested_optionals(self, archive_project) -> None:
        root = archive_project(archives=("addons/tst_main.pbo", "optionals/tst_extra.pbo"))
        context, result = release(root, RecordingSigner(), nest_optionals_into_own_mods=True)

        assert result.signed_count == 2
        assert (context.release_root / "optionals" / "@tst_extra" / "addons" / "tst_extra.pbo").is_file()
        assert (context.release_root / "addons" / "tst_main.pbo").is_file()

    def test_custom_location(self, archive_project) -> None:
        root = archive_project(archives=("extras/tst_x.pbo",))
        context, result = release(root, RecordingSigner(), custom_locations=["extras"])

        assert result.signed_count == 1
        assert (context.release_root / "extras" / "tst_x.pbo").is_file()

    def test_invalid_archive_name_is_unit_failure(self, archive_project) -> None:
        root = archive_project(archives=("addons/tst_a.pbo", "addons/tst_bad name.pbo"))
        _, result = release(root, RecordingSigner())

        assert result.signed_count == 1
        assert result.failures[0].stage == BuildStage.NAME
        assert result.failures[0].code == "AP001"

    def test_corrupt_key_aborts_before_dispatch(self, archive_project, write_file) -> None:
        root = archive_project()
        write_file(root / "releases" / "keys" / "tst.privkey", b"corrupt")
        signer = RecordingSigner()

        with pytest.raises(KeyReadFailure):
            release(root, signer, reuse_private_key=True)
        assert signer.signed == []
        assert not (root / "releases" / "1.0.0" / "@tst" / "addons" / "tst_a.pbo").exists()

    def test_layout_failure_is_fatal(self, archive_project) -> None:
        root = archive_project()
        (root / "releases").write_text("in the way")

        with pytest.raises(IoFailure):
            release(root, RecordingSigner())

    def test_reused_key_signs_consecutive_releases(self, archive_project) -> None:
        root = archive_project()
        first, _ = release(root, version="1.0.0", reuse_private_key=True)
        second, _ = release(root, version="1.0.1", reuse_private_key=True)

        assert (first.release_root / "keys" / "tst.pubkey").read_bytes() == (
            second.release_root / "keys" / "tst.pubkey").read_bytes()

    @pytest.mark.parametrize("jobs", [1, 2])
    def test_prefixed_and_bare_archive_claim_one_destination(self, archive_project, jobs: int) -> None:
        root = archive_project(archives=("addons/foo.pbo", "addons/tst_foo.pbo"))
        signer = RecordingSigner()
        context, result = release(root, signer, jobs=jobs)

        destination = context.release_root / "addons" / "tst_foo.pbo"
        assert result.signed_count == 1
        assert signer.signed == ["tst_foo.pbo"]
        assert result.outputs == [destination]
        assert destination.read_bytes() == b"addons/tst_foo.pbo"
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.addon == "foo"
        assert failure.stage == BuildStage.LAYOUT
        assert failure.code == "AP006"
        assert "addons/foo.pbo" in failure.message

    def test_bare_archive_alone_is_released_under_prefix(self, archive_project) -> None:
        root = archive_project(archives=("addons/foo.pbo",))
        context, result = release(root, RecordingSigner())

        assert result.is_success
        assert (context.release_root / "addons" / "tst_foo.pbo").read_bytes() == b"addons/foo.pbo"

    def test_progress_reports_unit_total(self, archive_project) -> None:
        root = archive_project()
        (root / "addons" / "odd.pbo").mkdir()
        project = ProjectConfig.from_dict({"name": "Test Mod", "prefix": "tst", "version": "1.0.0"})
        context = prepare_release(project, project_root=root)
        calls = []

        BuildOrchestrator(project, root, signer=RecordingSigner()).run(
            context, jobs=2, progress=lambda result, total: calls.append((result.status, total)))

        assert len(calls) == 4
        assert {total for _, total in calls} == {4}

    def test_files_beside_project_root(self, archive_project, write_file) -> None:
        root = archive_project()
        write_file(root.parent / "LICENSE", b"license text")
        context, result = release(root, RecordingSigner(), files=["../LICENSE"])

        assert (context.release_root / "LICENSE").read_bytes() == b"license text"
        assert [p.name for p in result.copied_files] == ["LICENSE"]

    @pytest.mark.parametrize("absolute", [True, False])
    def test_unusable_file_pattern_is_config_error(self, archive_project, absolute: bool) -> None:
        root = archive_project()
        project = ProjectConfig.from_dict({"name": "Test Mod", "prefix": "tst", "version": "1.0.0"})
        context = prepare_release(project, project_root=root)
        pattern = str(root.resolve() / "addons" / "tst_a.pbo") if absolute else ""
        broken = ProjectConfig.from_dict({**project.to_dict(), "files": [pattern]})
        signer = RecordingSigner()

        with pytest.raises(ConfigError):
            BuildOrchestrator(broken, root, signer=signer).run(context)
        assert signer.signed == []


class TestPack:
    """Packing addons beside their sources."""

    def test_default_selection(self, project_root: Path, project: ProjectConfig) -> None:
        report = BuildOrchestrator(project, project_root).pack(jobs=2)

        assert report.is_success
        assert report.packed_count == 3
        assert [p.name for p in report.outputs] == ["tst_main.pbo", "tst_ui.pbo", "tst_other_mod.pbo"]
        assert (project_root / "addons" / "tst_main.pbo").is_file()
        assert not (project_root / "optionals" / "tst_extra.pbo").exists()

    def test_all_optionals(self, project_root: Path, project: ProjectConfig) -> None:
        project = project.with_overrides(optionals="all")
        report = BuildOrchestrator(project, project_root).pack()
        assert report.packed_count == 4
        assert (project_root / "optionals" / "tst_extra.pbo").is_file()

    def test_skip(self, project_root: Path, project: ProjectConfig) -> None:
        project = project.with_overrides(skip=["ui"])
        report = BuildOrchestrator(project, project_root).pack()
        assert report.packed_count == 2
        assert not (project_root / "addons" / "tst_ui.pbo").exists()

    def test_packing_failure_is_isolated(self, project_root: Path, project: ProjectConfig) -> None:
        report = BuildOrchestrator(project, project_root, packer=FailingPacker("ui")).pack(jobs=3)

        assert report.packed_count == 2
        assert len(report.failures) == 1
        assert report.failures[0].addon == "ui"
        assert report.failures[0].stage == BuildStage.PACK

    def test_pack_then_release(self, project_root: Path, project: ProjectConfig) -> None:
        orchestrator = BuildOrchestrator(project, project_root)
        orchestrator.pack()
        context = prepare_release(project, project_root=project_root)
        result = orchestrator.run(context)

        assert result.signed_count == 3
        assert result.skipped == []
        assert (context.release_root / "mod.cpp").is_file()
