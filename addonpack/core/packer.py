# addonpack/core/packer.py
"""Archive packing capability"""

import io
import logging
import tarfile
from abc import ABC, abstractmethod
from pathlib import Path

from ..api.exceptions import OverlayError, PackingFailure
from ..models.addon import Addon
from ..storage.base import FileLayer, normalize

logger = logging.getLogger(__name__)


class Packer(ABC):
    """Turn an addon source folder into an archive

    Packing must be deterministic: identical source content gives identical
    archive bytes.
    """

    @abstractmethod
    def pack(self, addon: Addon, source: FileLayer, output: Path) -> Path:
        """
        Pack an addon

        Args:
            addon: Addon to pack
            source: File tree the addon source is read from
            output: Archive path to write

        Returns:
            Path of the written archive

        Raises:
            PackingFailure: If the archive cannot be produced
        """
        pass


class TarPacker(Packer):
    """Deterministic uncompressed tar of the addon folder

    Entries are sorted and carry no timestamps or ownership, so the archive
    only depends on file names and content.
    """

    FILE_MODE = 0o644

    def pack(self, addon: Addon, source: FileLayer, output: Path) -> Path:
        root = normalize(addon.source().as_posix())
        if not source.is_dir(root):
            raise PackingFailure(f"Addon source folder not found: {root}")

        try:
            files = source.files(root)
        except OverlayError as e:
            raise PackingFailure(f"Failed to scan {root}: {e}") from e

        if not files:
            raise PackingFailure(f"Addon has no files to pack: {root}")

        output = Path(output)
        try:
            with tarfile.open(output, 'w', format=tarfile.GNU_FORMAT) as archive:
                for path in files:
                    data = source.read_bytes(path)
                    info = tarfile.TarInfo(path[len(root) + 1:])
                    info.size = len(data)
                    info.mode = self.FILE_MODE
                    info.mtime = 0
                    info.uid = info.gid = 0
                    info.uname = info.gname = ""
                    archive.addfile(info, io.BytesIO(data))
        except (OSError, tarfile.TarError, OverlayError) as e:
            output.unlink(missing_ok=True)
            raise PackingFailure(f"Failed to pack {addon}: {e}") from e

        logger.debug("Packed %s (%d files) -> %s", addon, len(files), output)
        return output
