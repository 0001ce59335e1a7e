"""
Export Job Value Objects

Immutable value objects for export status and export names.
"""

from dataclasses import dataclass
from enum import Enum

from domain.errors import InvalidExportNameError


class ExportStatus(Enum):
    """Export job status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if status is terminal (completed or failed)."""
        return self in (ExportStatus.COMPLETED, ExportStatus.FAILED)


@dataclass(frozen=True)
class ExportName:
    """
    Value object for an export name.

    The name is both the registry key and the bundle file name, so it
    must be a single path component.
    """
    value: str

    def __post_init__(self):
        """Validate the export name."""
        if not self.value or not self.value.strip():
            raise InvalidExportNameError("Export name is required")
        if self.value in (".", "..") or ".." in self.value:
            raise InvalidExportNameError(f"Invalid export name: {self.value}")
        if "/" in self.value or "\\" in self.value or "\x00" in self.value:
            raise InvalidExportNameError(
                f"Export name must not contain path separators: {self.value}"
            )

    def __str__(self) -> str:
        return self.value
