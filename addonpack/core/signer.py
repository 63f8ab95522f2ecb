# addonpack/core/signer.py
"""Archive signing capability"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .keystore import KeyPair
from ..api.exceptions import SigningFailure
from ..constants import SIGNATURE_EXTENSION


class Signer(ABC):
    """Attach a signature to a packed archive

    Implementations must be safe to call from several threads at once and
    re-signing an archive with the same key must be harmless.
    """

    @abstractmethod
    def sign(self, archive: Path, key_pair: KeyPair) -> Path:
        """
        Sign an archive

        Args:
            archive: Archive to sign
            key_pair: Signing identity

        Returns:
            Path of the signature

        Raises:
            SigningFailure: If the archive cannot be signed
        """
        pass


def signature_path(archive: Union[str, Path], key_name: str) -> Path:
    """``{archive}.{key_name}.sig`` next to the archive"""
    archive = Path(archive)
    return archive.with_name(f"{archive.name}.{key_name}.{SIGNATURE_EXTENSION}")


class Ed25519Signer(Signer):
    """Detached raw Ed25519 signature over the archive bytes"""

    def sign(self, archive: Path, key_pair: KeyPair) -> Path:
        archive = Path(archive)
        target = signature_path(archive, key_pair.key_name)

        try:
            payload = archive.read_bytes()
        except OSError as e:
            raise SigningFailure(f"Failed to read archive {archive}: {e}") from e

        try:
            signature = key_pair.private_key().sign(payload)
        except (TypeError, ValueError) as e:
            raise SigningFailure(f"Failed to sign {archive}: {e}") from e

        try:
            target.write_bytes(signature)
        except OSError as e:
            raise SigningFailure(f"Failed to write signature {target}: {e}") from e

        return target

    @staticmethod
    def verify(archive: Union[str, Path],
               signature: Union[str, Path],
               public_material: bytes) -> bool:
        """Check a detached signature against a PEM public key"""
        public_key = serialization.load_pem_public_key(public_material)
        if not isinstance(public_key, Ed25519PublicKey):
            return False

        try:
            public_key.verify(Path(signature).read_bytes(), Path(archive).read_bytes())
        except InvalidSignature:
            return False
        return True
