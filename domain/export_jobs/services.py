"""
Export Job Services

Domain service for the export job registry lifecycle.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

from domain.errors import DomainError, ErrorCategory

from .entities import ExportJob
from .repositories import ExportJobRepository
from .value_objects import ExportStatus

if TYPE_CHECKING:
    from ..events import ExportCompletedEvent, ExportFailedEvent

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_TTL = timedelta(hours=1)


class ExportNotFoundError(DomainError):
    """Raised when an export is not in the registry."""

    category = ErrorCategory.EXPORT_NOT_FOUND


class DuplicateExportError(DomainError):
    """Raised when an export name is submitted while a job with that name is pending."""

    category = ErrorCategory.DUPLICATE_EXPORT


class ExportJobRegistry:
    """
    Domain service tracking export jobs by name.

    State machine: PENDING -> COMPLETED | PENDING -> FAILED. Terminal
    entries leave the registry only through deletion (sweep or explicit
    delete) or when a new submission reuses the name.
    """

    def __init__(self, job_repository: ExportJobRepository):
        """
        Initialize the registry with its storage backend.

        Args:
            job_repository: Repository for job persistence
        """
        self.job_repo = job_repository

    def set_pending(self, name: str, build_id: str) -> ExportJob:
        """
        Register a pending job under the given name.

        Args:
            name: Export name
            build_id: Build being exported

        Returns:
            The stored pending ExportJob

        Raises:
            DuplicateExportError: If a job with this name is still pending
        """
        job = ExportJob.pending(name, build_id)

        if not self.job_repo.save_if_not_pending(job):
            raise DuplicateExportError(f"Export {name} is already in progress")

        return job

    def refresh_pending(self, name: str, build_id: str) -> ExportJob:
        """
        Overwrite the entry for a name with a fresh pending job.

        Used when the caller has already reserved the name with set_pending.

        Args:
            name: Export name
            build_id: Build being exported

        Returns:
            The stored pending ExportJob
        """
        job = ExportJob.pending(name, build_id)
        self._save(job)
        return job

    def set_completed(self, name: str, file_path: str) -> Tuple[ExportJob, "ExportCompletedEvent"]:
        """
        Mark a job as completed.

        Always overwrites; an entry is created if the name is unknown.

        Args:
            name: Export name
            file_path: Path to the finished bundle

        Returns:
            Tuple of (updated job, ExportCompletedEvent)
        """
        job = self._get_or_placeholder(name)
        event = job.complete(file_path)
        self._save(job)
        return job, event

    def set_failed(
        self, name: str, error_message: str, error_category: Optional[str] = None
    ) -> Tuple[ExportJob, "ExportFailedEvent"]:
        """
        Mark a job as failed.

        Args:
            name: Export name
            error_message: Error description
            error_category: Optional error category value

        Returns:
            Tuple of (updated job, ExportFailedEvent)
        """
        job = self._get_or_placeholder(name)
        event = job.fail(error_message, error_category)
        self._save(job)
        return job, event

    def get(self, name: str) -> Optional[ExportJob]:
        """Return the job registered under name, or None."""
        return self.job_repo.get(name)

    def get_job(self, name: str) -> ExportJob:
        """
        Retrieve a job by name.

        Raises:
            ExportNotFoundError: If no job exists under the name
        """
        job = self.job_repo.get(name)

        if job is None:
            raise ExportNotFoundError(f"Export {name} not found")

        return job

    def get_file_path(self, name: str) -> Optional[str]:
        """
        Return the bundle path for a completed export.

        Args:
            name: Export name

        Returns:
            File path when the job is COMPLETED, None otherwise
        """
        job = self.job_repo.get(name)
        if job is not None and job.status == ExportStatus.COMPLETED and job.file_path:
            return job.file_path
        return None

    def delete(self, name: str) -> bool:
        """
        Delete a job and its backing file.

        Args:
            name: Export name

        Returns:
            True if the job was removed from the registry
        """
        job = self.job_repo.get(name)
        if job is None or not self.job_repo.delete(name):
            return False

        if job.file_path:
            remove_file_quietly(job.file_path)
        return True

    def sweep_expired(
        self,
        ttl: timedelta = DEFAULT_EXPORT_TTL,
        now: Optional[datetime] = None,
    ) -> List[ExportJob]:
        """
        Remove every job older than the TTL along with its backing file.

        Pending jobs past the TTL are evicted too, so an export whose worker
        died cannot hold its name forever. A job that changed after the
        snapshot (resubmitted, completed or failed) is skipped, and its
        file is removed only once its entry is gone. File deletion errors
        are logged and never stop the sweep.

        Args:
            ttl: Age after which an entry is evicted
            now: Reference time (defaults to utcnow)

        Returns:
            List of evicted jobs
        """
        now = now or datetime.utcnow()
        ttl_seconds = ttl.total_seconds()
        evicted = []

        for job in self.job_repo.list_all():
            if not job.is_expired(now, ttl_seconds):
                continue

            if not self.job_repo.delete_if_unchanged(job.name, job.created_at):
                logger.debug(f"Export {job.name} changed during sweep, keeping it")
                continue

            if job.file_path:
                remove_file_quietly(job.file_path)
            evicted.append(job)

        return evicted

    def _get_or_placeholder(self, name: str) -> ExportJob:
        job = self.job_repo.get(name)
        if job is None:
            logger.warning(f"Export {name} missing from registry, recreating entry")
            job = ExportJob.pending(name, build_id="")
        return job

    def _save(self, job: ExportJob) -> None:
        if not self.job_repo.save(job):
            raise Exception(f"Failed to save export {job.name}")


def remove_file_quietly(file_path: str) -> bool:
    """
    Best-effort removal of a bundle file.

    Args:
        file_path: Path to delete

    Returns:
        True if the file is gone afterwards
    """
    try:
        Path(file_path).unlink(missing_ok=True)
        return True
    except OSError as e:
        logger.warning(f"Failed to remove export file {file_path}: {e}")
        return False
