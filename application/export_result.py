"""
Export Result Value Object

Encapsulates the outcome of a static export run.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.errors import ErrorCategory


@dataclass
class ExportResult:
    """
    Value object representing the result of an export.

    status_persist_error carries the failure to record the publish status
    on the Build; it never turns a successful export into a failure.
    """

    success: bool
    name: str
    file_path: Optional[str] = None
    error: Optional[str] = None
    error_category: Optional[ErrorCategory] = None
    status_persist_error: Optional[str] = None

    @classmethod
    def create_success(cls, name: str, file_path: str) -> 'ExportResult':
        """
        Create a successful export result.

        Args:
            name: Export name
            file_path: Path of the finished bundle

        Returns:
            ExportResult indicating success
        """
        return cls(success=True, name=name, file_path=file_path)

    @classmethod
    def create_failure(
        cls,
        name: str,
        error_category: ErrorCategory,
        error: str
    ) -> 'ExportResult':
        """
        Create a failed export result.

        Args:
            name: Export name
            error_category: Category of error that occurred
            error: Human-readable error message

        Returns:
            ExportResult indicating failure
        """
        return cls(success=False, name=name, error=error, error_category=error_category)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization (Celery task results)."""
        return {
            'status': 'completed' if self.success else 'failed',
            'name': self.name,
            'file_path': self.file_path,
            'error': self.error,
            'error_category': self.error_category.value if self.error_category else None,
            'status_persist_error': self.status_persist_error,
        }
