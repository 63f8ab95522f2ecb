# addonpack/core/keystore.py
"""Signing keypair lifecycle

Keys are Ed25519. Private keys are stored as unencrypted PKCS#8 PEM and
public keys as SubjectPublicKeyInfo PEM.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ..api.exceptions import IoFailure, KeyReadFailure
from ..constants import MSG_KEYGEN, PRIVATE_KEY_EXTENSION, PUBLIC_KEY_EXTENSION

logger = logging.getLogger(__name__)


def _private_pem(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _public_pem(key: Ed25519PrivateKey) -> bytes:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@dataclass(frozen=True)
class KeyPair:
    """Signing identity shared read-only by every worker"""

    private_material: bytes = field(repr=False)
    public_material: bytes
    key_name: str
    persisted: bool = False

    @classmethod
    def generate(cls, key_name: str, persisted: bool = False) -> 'KeyPair':
        """Generate a fresh keypair in memory"""
        key = Ed25519PrivateKey.generate()
        return cls(_private_pem(key), _public_pem(key), key_name, persisted)

    @classmethod
    def from_private_pem(cls, data: bytes, key_name: str, persisted: bool = True) -> 'KeyPair':
        """Load a keypair from private key PEM, deriving the public half

        Raises:
            ValueError: If the data is not an unencrypted Ed25519 private key
        """
        try:
            key = serialization.load_pem_private_key(data, password=None)
        except (TypeError, UnsupportedAlgorithm) as e:
            raise ValueError(str(e)) from e

        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError(f"Expected an Ed25519 key, got {type(key).__name__}")

        return cls(_private_pem(key), _public_pem(key), key_name, persisted)

    def private_key(self) -> Ed25519PrivateKey:
        """Private key object for signing"""
        return serialization.load_pem_private_key(self.private_material, password=None)


class KeyStore:
    """Obtain keypairs and keep public keys in place

    Args:
        keys_dir: Project-wide keys folder (``releases/keys``)
    """

    def __init__(self, keys_dir: Union[str, Path]):
        self.keys_dir = Path(keys_dir)

    def private_key_path(self, key_name: str) -> Path:
        return self.keys_dir / f"{key_name}.{PRIVATE_KEY_EXTENSION}"

    def public_key_path(self, key_name: str) -> Path:
        return self.keys_dir / f"{key_name}.{PUBLIC_KEY_EXTENSION}"

    def obtain(self,
               key_name: str,
               reuse: bool,
               release_keys_dir: Optional[Union[str, Path]] = None) -> KeyPair:
        """Obtain the signing keypair for a release

        Args:
            key_name: Key name, used for file names
            reuse: Persist the private key and reuse it on later runs
            release_keys_dir: Keys folder of the current release, receives a
                              copy of the public key

        Returns:
            KeyPair

        Raises:
            KeyReadFailure: If a persisted private key exists but is unreadable
            IoFailure: If key files cannot be written
        """
        self._ensure_dir(self.keys_dir)

        if reuse:
            private_path = self.private_key_path(key_name)
            if private_path.exists():
                key_pair = self._read_private(private_path, key_name)
                logger.debug("Reusing private key %s", private_path)
            else:
                logger.info(MSG_KEYGEN.format(key_name=key_name))
                key_pair = KeyPair.generate(key_name, persisted=True)
                self._write_private(private_path, key_pair)
        else:
            key_pair = KeyPair.generate(key_name)

        self.publish(key_pair, release_keys_dir)
        return key_pair

    def publish(self,
                key_pair: KeyPair,
                release_keys_dir: Optional[Union[str, Path]] = None) -> Path:
        """Write the public key to the project-wide keys folder

        The file is overwritten on every call. When ``release_keys_dir`` is
        given the public key is copied there as well.

        Returns:
            Path of the project-wide public key
        """
        self._ensure_dir(self.keys_dir)
        public_path = self.public_key_path(key_pair.key_name)
        self._write_file(public_path, key_pair.public_material)

        if release_keys_dir is not None:
            release_keys_dir = Path(release_keys_dir)
            self._ensure_dir(release_keys_dir)
            target = release_keys_dir / public_path.name
            try:
                shutil.copyfile(public_path, target)
            except OSError as e:
                raise IoFailure(f"Failed to copy public key to {target}: {e}", str(target)) from e

        return public_path

    def _read_private(self, path: Path, key_name: str) -> KeyPair:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise KeyReadFailure(str(path), str(e)) from e

        try:
            return KeyPair.from_private_pem(data, key_name)
        except ValueError as e:
            raise KeyReadFailure(str(path), str(e)) from e

    def _write_private(self, path: Path, key_pair: KeyPair) -> None:
        self._write_file(path, key_pair.private_material)
        if os.name == 'posix':
            os.chmod(path, 0o600)

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        try:
            path.write_bytes(data)
        except OSError as e:
            raise IoFailure(f"Failed to write key file {path}: {e}", str(path)) from e

    @staticmethod
    def _ensure_dir(path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure(f"Failed to create directory {path}: {e}", str(path)) from e
