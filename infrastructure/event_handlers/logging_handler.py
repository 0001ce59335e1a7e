"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from domain.events import (
    BuildStatusPersistFailedEvent,
    DomainEvent,
    ExportCompletedEvent,
    ExportExpiredEvent,
    ExportFailedEvent,
    ExportStartedEvent,
    SiteRenderedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging export lifecycle events.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, ExportStartedEvent):
                self._handle_export_started(event)
            elif isinstance(event, SiteRenderedEvent):
                self._handle_site_rendered(event)
            elif isinstance(event, ExportCompletedEvent):
                self._handle_export_completed(event)
            elif isinstance(event, ExportFailedEvent):
                self._handle_export_failed(event)
            elif isinstance(event, BuildStatusPersistFailedEvent):
                self._handle_status_persist_failed(event)
            elif isinstance(event, ExportExpiredEvent):
                self._handle_export_expired(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_export_started(self, event: ExportStartedEvent) -> None:
        self.logger.info(
            f"Export started: name={event.aggregate_id}, build_id={event.build_id}"
        )

    def _handle_site_rendered(self, event: SiteRenderedEvent) -> None:
        self.logger.info(
            f"Site rendered: name={event.aggregate_id}, pages={event.rendered_pages}, "
            f"skipped_routes={len(event.skipped_routes)}"
        )

    def _handle_export_completed(self, event: ExportCompletedEvent) -> None:
        self.logger.info(
            f"Export completed: name={event.aggregate_id}, "
            f"build_id={event.build_id}, file_path={event.file_path}"
        )

    def _handle_export_failed(self, event: ExportFailedEvent) -> None:
        self.logger.warning(
            f"Export failed: name={event.aggregate_id}, build_id={event.build_id}, "
            f"error={event.error_message}, category={event.error_category}"
        )

    def _handle_status_persist_failed(self, event: BuildStatusPersistFailedEvent) -> None:
        self.logger.error(
            f"Could not record publish status {event.publish_status} for build "
            f"{event.build_id}: {event.error_message}"
        )

    def _handle_export_expired(self, event: ExportExpiredEvent) -> None:
        self.logger.info(f"Export expired: name={event.aggregate_id}, status={event.status}")
