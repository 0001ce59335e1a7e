"""
Static Export Service

Application service that orchestrates one static export: register the
job, load the build, render it into a scratch directory, pack the
archive, clean up and record the outcome.
"""

import logging
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from domain.bundling.packager import IArchivePackager
from domain.errors import ErrorCategory, StatusPersistError, categorize_error
from domain.events import BuildStatusPersistFailedEvent, SiteRenderedEvent
from domain.export_jobs import DuplicateExportError, ExportJobRegistry, remove_file_quietly
from domain.site_build.renderer import ISiteRenderer
from domain.site_build.repositories import BuildDataRepository
from domain.site_build.value_objects import PublishStatus

from .event_publisher import EventPublisher
from .export_result import ExportResult

logger = logging.getLogger(__name__)

SCRATCH_DIR_NAME = "scratch"


class StaticExportService:
    """
    Application service for orchestrating static export workflows.

    Coordinates the ExportJobRegistry, BuildDataRepository, ISiteRenderer and
    IArchivePackager. start_export never raises: every failure ends as a
    failed registry entry and a failed ExportResult.
    """

    def __init__(
        self,
        registry: ExportJobRegistry,
        build_repository: BuildDataRepository,
        renderer: ISiteRenderer,
        packager: IArchivePackager,
        event_publisher: EventPublisher,
        export_dir: Path,
    ):
        """
        Initialize Static Export Service with dependencies.

        Args:
            registry: Export job registry
            build_repository: Data store for builds and publish status
            renderer: Site renderer writing the bundle tree
            packager: Archive packager producing the ZIP
            event_publisher: Application service for event publishing
            export_dir: Directory holding finished bundles and scratch dirs
        """
        self.registry = registry
        self.build_repository = build_repository
        self.renderer = renderer
        self.packager = packager
        self.event_publisher = event_publisher
        self.export_dir = Path(export_dir)

    def start_export(self, build_id: str, output_name: str, reserved: bool = False) -> ExportResult:
        """
        Execute complete static export workflow.

        Workflow:
        1. Register the job as pending (or refresh a reservation)
        2. Load build data
        3. Render into a fresh scratch directory
        4. Pack the scratch directory into <export_dir>/<output_name>
        5. Remove the scratch directory
        6. Record PUBLISHED on the build and complete the job
        7. On error: record FAILED on the build and fail the job

        Args:
            build_id: Build to export
            output_name: Export name and archive file name
            reserved: True when the caller already registered the pending job

        Returns:
            ExportResult with success/failure information
        """
        try:
            self._register(build_id, output_name, reserved)
        except DuplicateExportError as e:
            logger.warning(f"Export {output_name} rejected: {e}")
            return ExportResult.create_failure(output_name, ErrorCategory.DUPLICATE_EXPORT, str(e))

        scratch_dir: Optional[Path] = None
        try:
            build_data = self.build_repository.load_build_data(build_id)
            logger.info(f"Export {output_name}: build data loaded, pages: {len(build_data.pages)}")

            scratch_dir = self._create_scratch_dir()
            summary = self.renderer.render(build_data, scratch_dir)
            self.event_publisher.publish(SiteRenderedEvent(
                aggregate_id=output_name,
                occurred_at=datetime.utcnow(),
                build_id=build_id,
                rendered_pages=len(summary.pages),
                skipped_routes=list(summary.skipped_routes),
            ))

            bundle_path = self.export_dir / output_name
            self.packager.pack(scratch_dir, bundle_path)
        except Exception as e:
            return self._handle_error(build_id, output_name, e)
        finally:
            if scratch_dir is not None:
                self._remove_scratch_dir(scratch_dir)

        try:
            return self._complete(build_id, output_name, str(bundle_path))
        except Exception as e:
            return self._handle_error(build_id, output_name, e)

    def _register(self, build_id: str, output_name: str, reserved: bool) -> None:
        if reserved:
            job = self.registry.refresh_pending(output_name, build_id)
        else:
            job = self.registry.set_pending(output_name, build_id)
        self.event_publisher.publish(job.started_event())

    def _create_scratch_dir(self) -> Path:
        scratch_root = self.export_dir / SCRATCH_DIR_NAME
        scratch_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="site-", dir=scratch_root))

    @staticmethod
    def _remove_scratch_dir(scratch_dir: Path) -> None:
        try:
            shutil.rmtree(scratch_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove scratch directory {scratch_dir}: {e}")

    def _complete(self, build_id: str, output_name: str, bundle_path: str) -> ExportResult:
        persist_error = self._persist_publish_status(output_name, build_id, PublishStatus.PUBLISHED)

        _, event = self.registry.set_completed(output_name, bundle_path)
        self.event_publisher.publish(event)

        result = ExportResult.create_success(output_name, bundle_path)
        result.status_persist_error = persist_error
        return result

    def _handle_error(self, build_id: str, output_name: str, error: Exception) -> ExportResult:
        """
        Record a failed export.

        Args:
            build_id: Build that was being exported
            output_name: Export name
            error: Exception that ended the export

        Returns:
            Failed ExportResult
        """
        category = categorize_error(error)
        message = str(error) or error.__class__.__name__

        if category == ErrorCategory.SYSTEM_ERROR:
            logger.error(f"Export {output_name} failed unexpectedly: {message}", exc_info=True)
        else:
            logger.error(f"Export {output_name} failed: {message}")

        persist_error = self._persist_publish_status(output_name, build_id, PublishStatus.FAILED)

        # failed entries carry no file_path, so an earlier bundle at this name must go
        remove_file_quietly(str(self.export_dir / output_name))

        try:
            _, event = self.registry.set_failed(output_name, message, category.value)
            self.event_publisher.publish(event)
        except Exception as e:
            logger.error(f"Could not record failure of export {output_name}: {e}", exc_info=True)

        result = ExportResult.create_failure(output_name, category, message)
        result.status_persist_error = persist_error
        return result

    def _persist_publish_status(
        self, output_name: str, build_id: str, status: PublishStatus
    ) -> Optional[str]:
        """Write the publish status on the build; failures are reported, never raised."""
        try:
            self.build_repository.update_publish_status(build_id, status)
            logger.info(f"Build {build_id} status set to {status.value}")
            return None
        except StatusPersistError as e:
            message = str(e)
        except Exception as e:
            message = f"Unexpected error updating build status: {e}"

        self.event_publisher.publish(BuildStatusPersistFailedEvent(
            aggregate_id=output_name,
            occurred_at=datetime.utcnow(),
            build_id=build_id,
            publish_status=status.value,
            error_message=message,
        ))
        return message
