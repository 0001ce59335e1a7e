"""
Unit tests for export runners, the registry sweeper and the logging
event handler.
"""

import logging
import threading
from datetime import datetime
from unittest.mock import Mock

import pytest

from domain.events import (
    BuildStatusPersistFailedEvent,
    ExportExpiredEvent,
    ExportFailedEvent,
    ExportStartedEvent,
)
from infrastructure.event_handlers import LoggingEventHandler
from infrastructure.export_runners import (
    EXPORT_TASK_NAME,
    CeleryExportRunner,
    ThreadExportRunner,
)
from infrastructure.registry_sweeper import RegistrySweeper


class TestThreadExportRunner:
    """Test the thread pool runner."""

    def test_submit_runs_reserved_export(self):
        service = Mock()
        runner = ThreadExportRunner(service, max_workers=1)

        future = runner.submit("build-1", "site.zip")
        future.result(timeout=5)
        runner.shutdown()

        service.start_export.assert_called_once_with("build-1", "site.zip", True)
        assert runner.name == "thread"

    def test_crash_is_logged_not_raised(self, caplog):
        service = Mock()
        service.start_export.side_effect = RuntimeError("boom")
        runner = ThreadExportRunner(service, max_workers=1)

        with caplog.at_level(logging.ERROR, logger="infrastructure.export_runners"):
            future = runner.submit("build-1", "site.zip")
            runner.shutdown(wait=True)

        assert isinstance(future.exception(), RuntimeError)
        assert "Export thread crashed: boom" in caplog.text


class TestCeleryExportRunner:
    """Test the Celery runner."""

    def test_sends_task_by_name(self):
        celery = Mock()
        runner = CeleryExportRunner(celery)

        runner.submit("build-1", "site.zip")

        celery.send_task.assert_called_once_with(EXPORT_TASK_NAME, args=("build-1", "site.zip"))
        assert runner.name == "celery"

    def test_broker_failure_propagates(self):
        celery = Mock()
        celery.send_task.side_effect = ConnectionError("broker down")

        with pytest.raises(ConnectionError):
            CeleryExportRunner(celery).submit("build-1", "site.zip")


class TestRegistrySweeper:
    """Test the background sweeper thread."""

    def test_sweep_once_returns_count(self):
        service = Mock()
        service.cleanup_expired_exports.return_value = 3

        assert RegistrySweeper(service).sweep_once() == 3

    def test_sweep_once_swallows_errors(self):
        service = Mock()
        service.cleanup_expired_exports.side_effect = RuntimeError("redis down")

        assert RegistrySweeper(service).sweep_once() == 0

    def test_thread_sweeps_until_stopped(self):
        swept = threading.Event()
        service = Mock()
        service.cleanup_expired_exports.side_effect = lambda: swept.set() or 0
        sweeper = RegistrySweeper(service, interval_seconds=0.01)

        sweeper.start()
        try:
            assert swept.wait(timeout=5)
            assert sweeper.is_running
        finally:
            sweeper.stop()

        assert not sweeper.is_running

    def test_start_is_idempotent(self):
        sweeper = RegistrySweeper(Mock(), interval_seconds=10)

        sweeper.start()
        first = sweeper._thread
        sweeper.start()

        assert sweeper._thread is first
        sweeper.stop()


class TestLoggingEventHandler:
    """Test event logging."""

    def _now(self):
        return datetime(2024, 1, 15, 12, 0, 0)

    def test_logs_started_and_expired(self):
        logger = Mock()
        handler = LoggingEventHandler(logger)

        handler.handle(ExportStartedEvent("site.zip", self._now(), build_id="build-1"))
        handler.handle(ExportExpiredEvent("site.zip", self._now(), status="completed"))

        messages = [call.args[0] for call in logger.info.call_args_list]
        assert "Export started: name=site.zip, build_id=build-1" in messages
        assert "Export expired: name=site.zip, status=completed" in messages

    def test_failures_log_at_warning_and_error(self):
        logger = Mock()
        handler = LoggingEventHandler(logger)

        handler.handle(ExportFailedEvent("site.zip", self._now(), "build-1", "boom", "pack_failed"))
        handler.handle(BuildStatusPersistFailedEvent("site.zip", self._now(), "build-1", "FAILED", "down"))

        assert "category=pack_failed" in logger.warning.call_args.args[0]
        assert "FAILED" in logger.error.call_args.args[0]

    def test_handler_errors_are_contained(self):
        logger = Mock()
        logger.info.side_effect = [RuntimeError("log sink down"), None]
        handler = LoggingEventHandler(logger)

        handler.handle(ExportStartedEvent("site.zip", self._now(), build_id="build-1"))

        logger.error.assert_called_once()
