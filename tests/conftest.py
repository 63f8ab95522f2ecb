"""Shared fixtures for addonpack tests."""

from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
import yaml

from addonpack.constants import ENV_JOBS, ENV_PROJECT_ROOT, PROJECT_CONFIG_FILE
from addonpack.models import ProjectConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment overrides out of the tests."""
    monkeypatch.delenv(ENV_PROJECT_ROOT, raising=False)
    monkeypatch.delenv(ENV_JOBS, raising=False)


def _write_file(path: Path, content: bytes = b"data") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Write a file, creating its parent folders."""
    return _write_file


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an addonpack.yaml into a fresh project root."""

    def _make(descriptor: Optional[Dict] = None, root: Optional[Path] = None) -> Path:
        root = root or tmp_path / "project"
        root.mkdir(parents=True, exist_ok=True)
        data = {"name": "Test Mod", "prefix": "tst", "version": "1.0.0"}
        data.update(descriptor or {})
        (root / PROJECT_CONFIG_FILE).write_text(yaml.safe_dump(data), encoding="utf-8")
        return root

    return _make


@pytest.fixture
def project_root(make_project: Callable[..., Path]) -> Path:
    """Project with two core addons, one optional and one compat."""
    root = make_project({"files": ["mod.cpp"]})
    _write_file(root / "addons" / "main" / "config.cpp", b"class CfgPatches {};")
    _write_file(root / "addons" / "main" / "functions" / "fn_init.sqf", b"true")
    _write_file(root / "addons" / "ui" / "config.cpp", b"class RscTitles {};")
    _write_file(root / "optionals" / "extra" / "config.cpp", b"extra")
    _write_file(root / "compats" / "other_mod" / "config.cpp", b"compat")
    _write_file(root / "mod.cpp", b'name = "Test Mod";')
    return root


@pytest.fixture
def project(project_root: Path) -> ProjectConfig:
    return ProjectConfig.from_dict(
        yaml.safe_load((project_root / PROJECT_CONFIG_FILE).read_text(encoding="utf-8"))
    )
