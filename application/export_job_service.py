"""
Export Job Application Service

Coordinates export submission, status lookups, deletion and expiry.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from werkzeug.utils import secure_filename

from domain.errors import ApplicationError, ErrorCategory
from domain.events import ExportExpiredEvent
from domain.export_jobs import (
    DEFAULT_EXPORT_TTL,
    ExportJob,
    ExportJobRegistry,
    ExportName,
    ExportNotFoundError,
    ExportStatus,
)

from .event_publisher import EventPublisher
from .export_runner import IExportRunner

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = ".zip"


def derive_export_name(requested: Optional[str], build_id: str) -> ExportName:
    """
    Turn a requested export name into a safe archive file name.

    Args:
        requested: Name supplied by the client, may be empty
        build_id: Build identifier used when no name is supplied

    Returns:
        ExportName ending in .zip

    Raises:
        InvalidExportNameError: If nothing usable is left after sanitizing
    """
    raw = (requested or "").strip() or f"site-export-{build_id}"
    name = secure_filename(raw)
    if name and not name.lower().endswith(ARCHIVE_EXTENSION):
        name = f"{name}{ARCHIVE_EXTENSION}"
    return ExportName(name)


class ExportJobService:
    """
    Application service for export job operations.

    Reserves export names, hands exports to the configured runner and
    answers status and download lookups for the API layer.
    """

    def __init__(
        self,
        registry: ExportJobRegistry,
        event_publisher: EventPublisher,
        runner: Optional[IExportRunner] = None,
        ttl: timedelta = DEFAULT_EXPORT_TTL,
    ):
        """
        Initialize ExportJobService.

        Args:
            registry: Export job registry
            event_publisher: Publisher for expiry events
            runner: Background runner; None disables submission
            ttl: Age after which exports expire
        """
        self.registry = registry
        self.event_publisher = event_publisher
        self.runner = runner
        self.ttl = ttl

    def submit_export(self, build_id: str, requested_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Reserve an export name and dispatch the export.

        Args:
            build_id: Build to export
            requested_name: Optional archive name

        Returns:
            Dictionary with export name and status

        Raises:
            InvalidExportNameError: If the name is unusable
            DuplicateExportError: If the name is held by a pending export
            ApplicationError: If no runner is configured or dispatch fails
        """
        if self.runner is None:
            raise ApplicationError(ErrorCategory.SYSTEM_ERROR, "Export runner not configured")

        name = str(derive_export_name(requested_name, build_id))
        self.registry.set_pending(name, build_id)
        logger.info(f"Reserved export {name} for build {build_id}")

        try:
            self.runner.submit(build_id, name)
        except Exception as e:
            logger.error(f"Failed to dispatch export {name}: {e}", exc_info=True)
            self.registry.set_failed(name, f"Failed to dispatch export: {e}", ErrorCategory.SYSTEM_ERROR.value)
            raise ApplicationError(ErrorCategory.SYSTEM_ERROR, f"Failed to dispatch export: {e}")

        return {
            "name": name,
            "build_id": build_id,
            "status": ExportStatus.PENDING.value,
            "message": "Export started",
        }

    def get_export(self, name: str) -> ExportJob:
        """
        Retrieve a live export.

        Exports past their TTL count as gone even before the sweep runs.

        Raises:
            ExportNotFoundError: If the export is unknown or expired
        """
        job = self.registry.get_job(name)
        if job.is_expired(datetime.utcnow(), self.ttl.total_seconds()):
            raise ExportNotFoundError(f"Export {name} has expired")
        return job

    def get_export_status(self, name: str) -> Dict[str, Any]:
        """
        Get export status information.

        Raises:
            ExportNotFoundError: If the export is unknown or expired
        """
        job = self.get_export(name)

        return {
            "name": job.name,
            "build_id": job.build_id,
            "status": job.status.value,
            "error": job.error_message,
            "error_category": job.error_category,
            "created_at": job.created_at.isoformat(),
            "updated_at": job.updated_at.isoformat(),
            "expires_at": (job.created_at + self.ttl).isoformat(),
        }

    def get_export_file_path(self, name: str) -> Optional[str]:
        """Return the bundle path of a completed, unexpired export."""
        try:
            self.get_export(name)
        except ExportNotFoundError:
            return None
        return self.registry.get_file_path(name)

    def delete_export(self, name: str) -> bool:
        """
        Delete an export and its bundle.

        Raises:
            ExportNotFoundError: If the export is unknown
            ApplicationError: If the export is still pending
        """
        job = self.registry.get_job(name)
        if job.status == ExportStatus.PENDING:
            raise ApplicationError(ErrorCategory.EXPORT_PENDING, f"Export {name} is still in progress")

        deleted = self.registry.delete(name)
        if deleted:
            logger.info(f"Deleted export {name}")
        return deleted

    def cleanup_expired_exports(self) -> int:
        """
        Evict every export older than the TTL and delete its bundle.

        Returns:
            Number of exports evicted
        """
        evicted = self.registry.sweep_expired(self.ttl)

        for job in evicted:
            self.event_publisher.publish(ExportExpiredEvent(
                aggregate_id=job.name,
                occurred_at=datetime.utcnow(),
                status=job.status.value,
            ))

        if evicted:
            logger.info(f"Swept {len(evicted)} expired exports")
        return len(evicted)
