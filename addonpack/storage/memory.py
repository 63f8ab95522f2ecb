"""In-memory file layer"""

import io
import threading
from typing import BinaryIO, Dict, List, Set

from .base import FileLayer, LayerPath, normalize
from ..api.exceptions import OverlayError


class MemoryLayer(FileLayer):
    """Volatile writable layer

    Files live in a dict keyed by normalized path. Directories are implied by
    the files below them, or created explicitly with ``make_dir``.
    """

    writable = True

    def __init__(self):
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = set()
        self._lock = threading.Lock()

    def _parents(self, path: str) -> List[str]:
        parts = path.split("/")[:-1]
        return ["/".join(parts[:i]) for i in range(1, len(parts) + 1)]

    def exists(self, path: LayerPath) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def is_file(self, path: LayerPath) -> bool:
        with self._lock:
            return normalize(path) in self._files

    def is_dir(self, path: LayerPath) -> bool:
        key = normalize(path)
        if key == "":
            return True
        with self._lock:
            return key in self._dirs

    def open_read(self, path: LayerPath) -> BinaryIO:
        key = normalize(path)
        with self._lock:
            if key not in self._files:
                raise OverlayError(f"Not a file in memory layer: {key}")
            return io.BytesIO(self._files[key])

    def write_bytes(self, path: LayerPath, data: bytes) -> None:
        key = normalize(path)
        if key == "":
            raise OverlayError("Cannot write to the layer root")

        with self._lock:
            if key in self._dirs:
                raise OverlayError(f"Path is a directory: {key}")
            for parent in self._parents(key):
                if parent in self._files:
                    raise OverlayError(f"Parent path is a file: {parent}")
            self._dirs.update(self._parents(key))
            self._files[key] = bytes(data)

    def make_dir(self, path: LayerPath) -> None:
        """Create a directory and its parents"""
        key = normalize(path)
        if key == "":
            return
        with self._lock:
            for parent in self._parents(key) + [key]:
                if parent in self._files:
                    raise OverlayError(f"Path is a file: {parent}")
            self._dirs.update(self._parents(key))
            self._dirs.add(key)

    def list_dir(self, path: LayerPath = "") -> List[str]:
        top = normalize(path)
        prefix = f"{top}/" if top else ""
        names = set()

        with self._lock:
            for entry in list(self._files) + list(self._dirs):
                if entry.startswith(prefix) and entry != top:
                    names.add(entry[len(prefix):].split("/", 1)[0])

        return sorted(names)

    def clear(self) -> None:
        """Drop every file and directory"""
        with self._lock:
            self._files.clear()
            self._dirs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __repr__(self) -> str:
        return f"MemoryLayer(files={len(self)})"
