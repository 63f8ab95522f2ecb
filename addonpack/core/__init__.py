"""Core functionality for addonpack"""

from .path_resolver import PathResolver
from .project_manager import ProjectManager
from .keystore import KeyPair, KeyStore
from .release_layout import ReleaseLayout
from .packer import Packer, TarPacker
from .signer import Signer, Ed25519Signer, signature_path
from .orchestrator import BuildOrchestrator, ResultAccumulator, resolve_jobs

__all__ = [
    "PathResolver",
    "ProjectManager",
    "KeyPair",
    "KeyStore",
    "ReleaseLayout",
    "Packer",
    "TarPacker",
    "Signer",
    "Ed25519Signer",
    "signature_path",
    "BuildOrchestrator",
    "ResultAccumulator",
    "resolve_jobs",
]
