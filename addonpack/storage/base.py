# addonpack/storage/base.py
"""File layer abstract base class"""

from abc import ABC, abstractmethod
from pathlib import PurePath, PurePosixPath
from typing import BinaryIO, Iterator, List, Tuple, Union

from ..api.exceptions import OverlayError

LayerPath = Union[str, PurePath]


def normalize(path: LayerPath) -> str:
    """Normalize a layer path to a relative posix string

    The root of a layer is the empty string. Paths may not be absolute and
    may not climb out of the layer with ``..``.

    Args:
        path: Relative path

    Returns:
        Normalized path such as ``addons/main/config.cpp``
    """
    text = str(path).replace("\\", "/")
    pure = PurePosixPath(text)

    if pure.is_absolute():
        raise OverlayError(f"Layer paths must be relative: {path}")

    parts = [part for part in pure.parts if part not in ("", ".")]
    if ".." in parts:
        raise OverlayError(f"Layer paths may not leave the layer root: {path}")

    return "/".join(parts)


def join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


class FileLayer(ABC):
    """Abstract base class for every layer of a virtual file tree"""

    #: Whether writes are accepted by this layer
    writable: bool = False

    @abstractmethod
    def exists(self, path: LayerPath) -> bool:
        """
        Check if a file or directory exists in this layer

        Args:
            path: Relative layer path

        Returns:
            True if exists
        """
        pass

    @abstractmethod
    def is_file(self, path: LayerPath) -> bool:
        pass

    @abstractmethod
    def is_dir(self, path: LayerPath) -> bool:
        pass

    @abstractmethod
    def open_read(self, path: LayerPath) -> BinaryIO:
        """
        Open a file for binary reading

        Args:
            path: Relative layer path

        Returns:
            Readable binary file object, to be closed by the caller

        Raises:
            OverlayError: If the path is not a file in this layer
        """
        pass

    @abstractmethod
    def write_bytes(self, path: LayerPath, data: bytes) -> None:
        """
        Write a file, creating parent directories

        Raises:
            OverlayError: If the layer is read-only
        """
        pass

    @abstractmethod
    def list_dir(self, path: LayerPath = "") -> List[str]:
        """
        List entry names directly under a directory

        Args:
            path: Relative layer path, the root when empty

        Returns:
            Sorted entry names, empty if the directory does not exist
        """
        pass

    def read_bytes(self, path: LayerPath) -> bytes:
        """Read a whole file"""
        with self.open_read(path) as handle:
            return handle.read()

    def walk(self, path: LayerPath = "") -> Iterator[Tuple[str, List[str], List[str]]]:
        """
        Walk a directory tree top-down, like ``os.walk``

        Yields:
            (directory, sub-directory names, file names)
        """
        top = normalize(path)
        dirs, files = [], []
        for name in self.list_dir(top):
            child = join(top, name)
            if self.is_dir(child):
                dirs.append(name)
            else:
                files.append(name)

        yield top, dirs, files

        for name in dirs:
            yield from self.walk(join(top, name))

    def files(self, path: LayerPath = "") -> List[str]:
        """All file paths below ``path``, sorted"""
        found = []
        for directory, _, names in self.walk(path):
            found.extend(join(directory, name) for name in names)
        return sorted(found)
