"""
Export Job Entities

Domain entity for export job tracking.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from .value_objects import ExportStatus

if TYPE_CHECKING:
    from ..events import ExportCompletedEvent, ExportFailedEvent, ExportStartedEvent
else:
    # Import at runtime to avoid circular import
    def _import_events():
        from ..events import ExportCompletedEvent, ExportFailedEvent, ExportStartedEvent
        return ExportStartedEvent, ExportCompletedEvent, ExportFailedEvent


@dataclass
class ExportJob:
    """
    Entity representing one static export job.

    Invariant: file_path is set if and only if status is COMPLETED.
    """

    name: str
    build_id: str
    status: ExportStatus
    created_at: datetime
    updated_at: datetime
    file_path: Optional[str] = None
    error_message: Optional[str] = None
    error_category: Optional[str] = None

    @classmethod
    def pending(cls, name: str, build_id: str) -> "ExportJob":
        """
        Factory method to create a new pending export job.

        Args:
            name: Export name (registry key and bundle file name)
            build_id: Identifier of the build being exported

        Returns:
            New ExportJob instance in PENDING state
        """
        now = datetime.utcnow()
        return cls(
            name=name,
            build_id=build_id,
            status=ExportStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def started_event(self) -> "ExportStartedEvent":
        """Build the event announcing that this job was registered."""
        ExportStartedEvent, _, _ = _import_events()
        return ExportStartedEvent(
            aggregate_id=self.name,
            occurred_at=self.updated_at,
            build_id=self.build_id,
        )

    def complete(self, file_path: str) -> "ExportCompletedEvent":
        """
        Mark job as completed.

        Completion always overwrites the current state and restarts the
        expiry clock.

        Args:
            file_path: Path of the finished bundle

        Returns:
            ExportCompletedEvent for the transition
        """
        if not file_path:
            raise ValueError("A completed export requires a file path")

        now = datetime.utcnow()
        self.status = ExportStatus.COMPLETED
        self.file_path = file_path
        self.error_message = None
        self.error_category = None
        self.created_at = now
        self.updated_at = now

        _, ExportCompletedEvent, _ = _import_events()
        return ExportCompletedEvent(
            aggregate_id=self.name,
            occurred_at=self.updated_at,
            build_id=self.build_id,
            file_path=file_path,
        )

    def fail(self, error_message: str, error_category: Optional[str] = None) -> "ExportFailedEvent":
        """
        Mark job as failed.

        Args:
            error_message: Error description
            error_category: Optional error category for tracking

        Returns:
            ExportFailedEvent for the transition
        """
        now = datetime.utcnow()
        self.status = ExportStatus.FAILED
        self.file_path = None
        self.error_message = error_message
        self.error_category = error_category
        self.created_at = now
        self.updated_at = now

        _, _, ExportFailedEvent = _import_events()
        return ExportFailedEvent(
            aggregate_id=self.name,
            occurred_at=self.updated_at,
            build_id=self.build_id,
            error_message=error_message,
            error_category=error_category or "UNKNOWN",
        )

    def is_terminal(self) -> bool:
        """Check if job is in terminal state (completed or failed)."""
        return self.status.is_terminal()

    def is_expired(self, now: datetime, ttl_seconds: float) -> bool:
        """Check whether the job is older than the given TTL."""
        return (now - self.created_at).total_seconds() > ttl_seconds

    def to_dict(self) -> dict:
        """Convert job to dictionary for serialization."""
        return {
            "name": self.name,
            "build_id": self.build_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "file_path": self.file_path,
            "error_message": self.error_message,
            "error_category": self.error_category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExportJob":
        """Create ExportJob from dictionary."""
        return cls(
            name=data["name"],
            build_id=data["build_id"],
            status=ExportStatus(data["status"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            file_path=data.get("file_path"),
            error_message=data.get("error_message"),
            error_category=data.get("error_category"),
        )
