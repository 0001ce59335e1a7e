"""
Export Runners

Background execution backends for static exports: a thread pool for the
single-process deployment and Celery for worker deployments.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from application.export_runner import IExportRunner

logger = logging.getLogger(__name__)

EXPORT_TASK_NAME = "tasks.generate_static_export"


class ThreadExportRunner(IExportRunner):
    """Runs exports on an in-process thread pool."""

    name = "thread"

    def __init__(self, export_service, max_workers: int = 4):
        """
        Args:
            export_service: StaticExportService instance
            max_workers: Number of concurrent exports
        """
        self.export_service = export_service
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="site-export"
        )

    def submit(self, build_id: str, export_name: str) -> Future:
        future = self._executor.submit(
            self.export_service.start_export, build_id, export_name, True
        )
        future.add_done_callback(self._log_crash)
        logger.debug(f"Export {export_name} submitted to thread pool")
        return future

    @staticmethod
    def _log_crash(future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error(f"Export thread crashed: {error}", exc_info=error)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class CeleryExportRunner(IExportRunner):
    """Sends exports to Celery workers by task name."""

    name = "celery"

    def __init__(self, celery):
        self.celery = celery

    def submit(self, build_id: str, export_name: str) -> None:
        self.celery.send_task(EXPORT_TASK_NAME, args=(build_id, export_name))
        logger.debug(f"Export {export_name} queued as {EXPORT_TASK_NAME}")
