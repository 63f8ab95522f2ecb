"""Physical filesystem layer"""

from pathlib import Path
from typing import BinaryIO, List, Union

from .base import FileLayer, LayerPath, normalize
from ..api.exceptions import OverlayError


class PhysicalLayer(FileLayer):
    """Read-only view of a directory on disk"""

    writable = False

    def __init__(self, root: Union[str, Path]):
        """
        Initialize physical layer

        Args:
            root: Directory the layer exposes
        """
        self.root = Path(root).resolve()

    def resolve(self, path: LayerPath) -> Path:
        """Map a layer path to a real path under the root"""
        return self.root / normalize(path)

    def exists(self, path: LayerPath) -> bool:
        return self.resolve(path).exists()

    def is_file(self, path: LayerPath) -> bool:
        return self.resolve(path).is_file()

    def is_dir(self, path: LayerPath) -> bool:
        return self.resolve(path).is_dir()

    def open_read(self, path: LayerPath) -> BinaryIO:
        real = self.resolve(path)
        if not real.is_file():
            raise OverlayError(f"Not a file: {real}")
        try:
            return open(real, 'rb')
        except OSError as e:
            raise OverlayError(f"Failed to open {real}: {e}") from e

    def write_bytes(self, path: LayerPath, data: bytes) -> None:
        raise OverlayError(f"Physical layer is read-only: {normalize(path)}")

    def list_dir(self, path: LayerPath = "") -> List[str]:
        real = self.resolve(path)
        if not real.is_dir():
            return []
        return sorted(entry.name for entry in real.iterdir())

    def __repr__(self) -> str:
        return f"PhysicalLayer({str(self.root)!r})"
