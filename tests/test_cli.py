"""Tests for the command line interface.

Commands run in-process through click's CliRunner inside a temporary
project directory.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from addonpack.cli.commands.build import split_names
from addonpack.cli.main import cli

runner = CliRunner()


@pytest.fixture
def in_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(project_root)
    return project_root


class TestCLIHelp:
    """Help output and project detection."""

    def test_help_returns_zero(self) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "build" in result.output
        assert "clean" in result.output
        assert "locate" in result.output

    def test_build_outside_project(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "Not in an addonpack project" in result.output

    def test_broken_descriptor(self, in_project: Path) -> None:
        (in_project / "addonpack.yaml").write_text("name: [", encoding="utf-8")
        result = runner.invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "Failed to load project" in result.output


class TestSplitNames:
    """Comma separated option values."""

    def test_split(self) -> None:
        assert split_names("a, b,,c") == ["a", "b", "c"]
        assert split_names(None) is None

    def test_all(self) -> None:
        assert split_names("all", allow_all=True) == "all"
        assert split_names("all") == ["all"]


class TestBuildCommand:
    """Packing and releasing from the command line."""

    def test_pack_only(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["build", "-j", "2"])
        assert result.exit_code == 0, result.output
        assert (in_project / "addons" / "tst_main.pbo").is_file()
        assert not (in_project / "optionals" / "tst_extra.pbo").exists()
        assert not (in_project / "releases").exists()

    def test_opts_and_skip(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["build", "--opts", "all", "--skip", "ui"])
        assert result.exit_code == 0, result.output
        assert (in_project / "optionals" / "tst_extra.pbo").is_file()
        assert not (in_project / "addons" / "tst_ui.pbo").exists()

    def test_release(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["build", "--release"])
        assert result.exit_code == 0, result.output
        release_root = in_project / "releases" / "1.0.0" / "@tst"
        assert (release_root / "addons" / "tst_main.pbo.tst.sig").is_file()
        assert (release_root / "keys" / "tst.pubkey").is_file()
        assert "Finished Test Mod v1.0.0" in result.output

    def test_existing_release_needs_force(self, in_project: Path) -> None:
        assert runner.invoke(cli, ["build", "--release"]).exit_code == 0

        result = runner.invoke(cli, ["build", "--release"])
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = runner.invoke(cli, ["build", "--release", "--force"])
        assert result.exit_code == 0, result.output

    def test_release_version_option(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["build", "--release", "--version", "2.1.0"])
        assert result.exit_code == 0, result.output
        assert (in_project / "releases" / "2.1.0" / "@tst").is_dir()

    def test_invalid_version(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["build", "--release", "--version", "not/valid"])
        assert result.exit_code == 1
        assert not (in_project / "releases").exists()

    def test_corrupt_key_fails(self, in_project: Path) -> None:
        descriptor = in_project / "addonpack.yaml"
        descriptor.write_text(descriptor.read_text(encoding="utf-8") + "reuse_private_key: true\n",
                              encoding="utf-8")
        keys = in_project / "releases" / "keys"
        keys.mkdir(parents=True)
        (keys / "tst.privkey").write_bytes(b"corrupt")

        result = runner.invoke(cli, ["build", "--release"])
        assert result.exit_code == 1
        assert "Release failed" in result.output


class TestCleanCommand:
    """Removing build output."""

    def test_clean_archives(self, in_project: Path) -> None:
        runner.invoke(cli, ["build", "--release"])
        result = runner.invoke(cli, ["clean"])
        assert result.exit_code == 0, result.output
        assert not (in_project / "addons" / "tst_main.pbo").exists()
        assert (in_project / "releases" / "1.0.0").is_dir()

    def test_clean_force(self, in_project: Path) -> None:
        runner.invoke(cli, ["build", "--release"])
        result = runner.invoke(cli, ["clean", "--force"])
        assert result.exit_code == 0, result.output
        assert not (in_project / "releases" / "1.0.0").exists()
        assert (in_project / "releases" / "keys" / "tst.pubkey").is_file()


class TestLocateCommand:
    """Finding addon sources."""

    def test_locate(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["locate", "extra"])
        assert result.exit_code == 0
        assert "optionals/extra" in result.output

    def test_locate_missing(self, in_project: Path) -> None:
        result = runner.invoke(cli, ["locate", "nothing"])
        assert result.exit_code == 1
        assert "Addon not found" in result.output
