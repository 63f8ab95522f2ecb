"""Layered virtual file tree

A writable in-memory layer stacked over the read-only project tree. Build
steps can stage modified files without touching the source tree; the memory
layer is either exported to a real directory or discarded.
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Union

from .base import FileLayer, LayerPath, normalize
from .memory import MemoryLayer
from .physical import PhysicalLayer
from ..api.exceptions import OverlayError

logger = logging.getLogger(__name__)


class VirtualFileOverlay(FileLayer):
    """Resolve paths through an ordered stack of layers

    Reads hit the first layer holding the path; writes go to the first
    writable layer; directory listings are the union of all layers.
    """

    def __init__(self, layers: Sequence[FileLayer]):
        if not layers:
            raise OverlayError("Overlay needs at least one layer")
        self.layers: List[FileLayer] = list(layers)

    @classmethod
    def over_project(cls, project_root: Union[str, Path]) -> 'VirtualFileOverlay':
        """Memory layer over the physical project tree"""
        return cls([MemoryLayer(), PhysicalLayer(project_root)])

    @property
    def writable(self) -> bool:
        return self.write_layer is not None

    @property
    def write_layer(self) -> Optional[FileLayer]:
        for layer in self.layers:
            if layer.writable:
                return layer
        return None

    def _owner(self, path: LayerPath) -> Optional[FileLayer]:
        """First layer in which the path exists"""
        for layer in self.layers:
            if layer.exists(path):
                return layer
        return None

    def exists(self, path: LayerPath) -> bool:
        return self._owner(path) is not None

    def is_file(self, path: LayerPath) -> bool:
        owner = self._owner(path)
        return owner is not None and owner.is_file(path)

    def is_dir(self, path: LayerPath) -> bool:
        owner = self._owner(path)
        return owner is not None and owner.is_dir(path)

    def open_read(self, path: LayerPath) -> BinaryIO:
        owner = self._owner(path)
        if owner is None or not owner.is_file(path):
            raise OverlayError(f"Not a file: {normalize(path)}")
        return owner.open_read(path)

    def write_bytes(self, path: LayerPath, data: bytes) -> None:
        layer = self.write_layer
        if layer is None:
            raise OverlayError("Overlay has no writable layer")
        layer.write_bytes(path, data)

    def list_dir(self, path: LayerPath = "") -> List[str]:
        names = set()
        for layer in self.layers:
            if layer.is_dir(path):
                names.update(layer.list_dir(path))
        return sorted(names)

    def is_staged(self, path: LayerPath) -> bool:
        """Whether a file is served from a writable layer"""
        owner = self._owner(path)
        return owner is not None and owner.writable

    def staged_files(self) -> List[str]:
        """Files currently held by the writable layer"""
        layer = self.write_layer
        return layer.files() if layer is not None else []

    def copy_out(self, path: LayerPath, destination: Union[str, Path]) -> Path:
        """Copy a file from the overlay to a real path

        Args:
            path: Overlay path of the file
            destination: Target file path, parent must exist

        Returns:
            Destination path
        """
        destination = Path(destination)
        with self.open_read(path) as src, open(destination, 'wb') as dst:
            shutil.copyfileobj(src, dst)
        return destination

    def export(self, target: Union[str, Path]) -> List[Path]:
        """Write every staged file under a real directory

        Args:
            target: Directory to write into, usually the project root

        Returns:
            Written paths
        """
        target = Path(target)
        written = []

        for staged in self.staged_files():
            destination = target / staged
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(self.write_layer.read_bytes(staged))
            written.append(destination)

        logger.debug("Exported %d staged file(s) to %s", len(written), target)
        return written

    def discard(self) -> None:
        """Forget every staged change"""
        for layer in self.layers:
            if isinstance(layer, MemoryLayer):
                layer.clear()

    def __repr__(self) -> str:
        return f"VirtualFileOverlay({self.layers!r})"
