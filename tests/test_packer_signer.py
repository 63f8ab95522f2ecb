"""Tests for the default packer and signer."""

import tarfile
from pathlib import Path

import pytest

from addonpack.api.exceptions import PackingFailure, SigningFailure
from addonpack.core import Ed25519Signer, KeyPair, TarPacker, signature_path
from addonpack.models import Addon, AddonLocation
from addonpack.storage import VirtualFileOverlay

MAIN = Addon("main", AddonLocation.CORE)


class TestTarPacker:
    """Deterministic archive output."""

    def test_entries_relative_to_addon(self, project_root: Path) -> None:
        output = project_root / "addons" / "main.pbo"
        TarPacker().pack(MAIN, VirtualFileOverlay.over_project(project_root), output)

        with tarfile.open(output) as archive:
            names = archive.getnames()
            assert names == ["config.cpp", "functions/fn_init.sqf"]
            assert all(member.mtime == 0 for member in archive.getmembers())

    def test_deterministic(self, project_root: Path, tmp_path: Path) -> None:
        overlay = VirtualFileOverlay.over_project(project_root)
        first = TarPacker().pack(MAIN, overlay, tmp_path / "first.pbo")
        (project_root / "addons" / "main" / "config.cpp").touch()
        second = TarPacker().pack(MAIN, overlay, tmp_path / "second.pbo")
        assert first.read_bytes() == second.read_bytes()

    def test_staged_files_are_packed(self, project_root: Path, tmp_path: Path) -> None:
        overlay = VirtualFileOverlay.over_project(project_root)
        overlay.write_bytes("addons/main/generated.hpp", b"#define X 1")
        output = TarPacker().pack(MAIN, overlay, tmp_path / "main.pbo")

        with tarfile.open(output) as archive:
            assert "generated.hpp" in archive.getnames()
        assert not (project_root / "addons" / "main" / "generated.hpp").exists()

    def test_missing_source(self, project_root: Path, tmp_path: Path) -> None:
        with pytest.raises(PackingFailure):
            TarPacker().pack(Addon("ghost", AddonLocation.CORE),
                             VirtualFileOverlay.over_project(project_root),
                             tmp_path / "ghost.pbo")

    def test_empty_source(self, project_root: Path, tmp_path: Path) -> None:
        (project_root / "addons" / "empty").mkdir()
        with pytest.raises(PackingFailure) as exc_info:
            TarPacker().pack(Addon("empty", AddonLocation.CORE),
                             VirtualFileOverlay.over_project(project_root),
                             tmp_path / "empty.pbo")
        assert exc_info.value.error_code == "AP004"
        assert not (tmp_path / "empty.pbo").exists()


class TestEd25519Signer:
    """Detached signatures."""

    def test_sign_and_verify(self, tmp_path: Path) -> None:
        archive = tmp_path / "tst_main.pbo"
        archive.write_bytes(b"archive bytes")
        key_pair = KeyPair.generate("tst")

        signature = Ed25519Signer().sign(archive, key_pair)
        assert signature == tmp_path / "tst_main.pbo.tst.sig"
        assert signature == signature_path(archive, "tst")
        assert len(signature.read_bytes()) == 64
        assert Ed25519Signer.verify(archive, signature, key_pair.public_material)

    def test_verify_rejects_other_key(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.pbo"
        archive.write_bytes(b"archive bytes")
        signature = Ed25519Signer().sign(archive, KeyPair.generate("tst"))
        assert not Ed25519Signer.verify(archive, signature, KeyPair.generate("tst").public_material)

    def test_verify_rejects_tampered_archive(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.pbo"
        archive.write_bytes(b"archive bytes")
        key_pair = KeyPair.generate("tst")
        signature = Ed25519Signer().sign(archive, key_pair)
        archive.write_bytes(b"tampered")
        assert not Ed25519Signer.verify(archive, signature, key_pair.public_material)

    def test_resign_overwrites(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.pbo"
        archive.write_bytes(b"archive bytes")
        key_pair = KeyPair.generate("tst")
        signer = Ed25519Signer()
        signer.sign(archive, key_pair)
        signature = signer.sign(archive, key_pair)
        assert Ed25519Signer.verify(archive, signature, key_pair.public_material)

    def test_missing_archive(self, tmp_path: Path) -> None:
        with pytest.raises(SigningFailure):
            Ed25519Signer().sign(tmp_path / "missing.pbo", KeyPair.generate("tst"))
