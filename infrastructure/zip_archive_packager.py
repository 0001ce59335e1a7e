"""
ZIP Archive Packager

zipfile-based implementation of IArchivePackager.
"""

import logging
import os
import zipfile
from pathlib import Path

from domain.bundling.packager import IArchivePackager
from domain.errors import PackError

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


class ZipArchivePackager(IArchivePackager):
    """
    Packs a directory into a ZIP with maximum deflate compression.

    The archive is written next to the destination under a ".partial"
    name and renamed into place only once it is complete.
    """

    def __init__(self, compresslevel: int = 9):
        self.compresslevel = compresslevel

    def pack(self, source_dir: Path, output_file: Path) -> int:
        """
        Pack source_dir into output_file.

        Raises:
            PackError: If the tree cannot be read or the archive cannot be written
        """
        source_dir = Path(source_dir)
        output_file = Path(output_file)
        partial_file = output_file.with_name(output_file.name + PARTIAL_SUFFIX)

        if not source_dir.is_dir():
            raise PackError(f"Source directory does not exist: {source_dir}")

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)

            with zipfile.ZipFile(
                partial_file,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compresslevel,
            ) as archive:
                for file_path in sorted(p for p in source_dir.rglob("*") if p.is_file()):
                    archive.write(file_path, file_path.relative_to(source_dir).as_posix())

            os.replace(partial_file, output_file)
        except (OSError, zipfile.BadZipFile) as e:
            self._discard(partial_file)
            raise PackError(f"Failed to create archive {output_file.name}: {e}", original_error=e)

        size = output_file.stat().st_size
        logger.info(f"ZIP created: {output_file} ({size} bytes)")
        return size

    @staticmethod
    def _discard(partial_file: Path) -> None:
        try:
            partial_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove partial archive {partial_file}: {e}")
