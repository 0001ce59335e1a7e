"""
Registry Sweeper

Daemon thread that evicts expired exports at a fixed interval when the
service runs without Celery beat.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class RegistrySweeper:
    """
    Periodically calls ExportJobService.cleanup_expired_exports.

    Errors in a sweep are logged and the next sweep still runs.
    """

    def __init__(self, export_job_service, interval_seconds: float = 60.0):
        self.export_job_service = export_job_service
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="export-registry-sweeper", daemon=True
        )
        self._thread.start()
        logger.info(f"Registry sweeper started (interval {self.interval_seconds}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def sweep_once(self) -> int:
        try:
            return self.export_job_service.cleanup_expired_exports()
        except Exception as e:
            logger.error(f"Export sweep failed: {e}", exc_info=True)
            return 0

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.sweep_once()
