"""
Archive Packager Interface

Abstract interface for packing a directory tree into one archive file.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IArchivePackager(ABC):
    """
    Contract for archive packaging.

    Contract Guarantees:
    - Every file under the source directory is stored with its path
      relative to that directory (no wrapping folder)
    - The output path only ever holds a complete archive; a failed run
      leaves nothing at the output path
    """

    @abstractmethod
    def pack(self, source_dir: Path, output_file: Path) -> int:
        """
        Pack source_dir into output_file.

        Args:
            source_dir: Directory to pack
            output_file: Destination archive path

        Returns:
            Size of the archive in bytes

        Raises:
            PackError: If reading the tree or writing the archive fails
        """
        pass  # pragma: no cover
