"""
Unit tests for the ExportJob entity and export value objects.
"""

from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from domain.errors import InvalidExportNameError
from domain.events import ExportCompletedEvent, ExportFailedEvent, ExportStartedEvent
from domain.export_jobs import ExportJob, ExportName, ExportStatus
from tests.fixtures.domain_fixtures import create_export_job
from tests.property.strategies import export_names


class TestExportJobTransitions:
    """Test state transitions and their events."""

    def test_pending_factory(self):
        job = ExportJob.pending("site.zip", "build-1")

        assert job.status == ExportStatus.PENDING
        assert job.file_path is None
        assert job.created_at == job.updated_at
        assert not job.is_terminal()

    def test_started_event(self):
        job = ExportJob.pending("site.zip", "build-1")

        event = job.started_event()

        assert isinstance(event, ExportStartedEvent)
        assert event.aggregate_id == "site.zip"
        assert event.build_id == "build-1"

    def test_complete_sets_file_and_restarts_clock(self):
        # Arrange
        old = datetime.utcnow() - timedelta(minutes=30)
        job = create_export_job(created_at=old)

        # Act
        event = job.complete("/tmp/exports/site.zip")

        # Assert
        assert job.status == ExportStatus.COMPLETED
        assert job.file_path == "/tmp/exports/site.zip"
        assert job.created_at > old
        assert isinstance(event, ExportCompletedEvent)
        assert event.file_path == "/tmp/exports/site.zip"

    def test_complete_requires_file_path(self):
        job = create_export_job()

        with pytest.raises(ValueError):
            job.complete("")

    def test_fail_clears_file_path(self):
        job = create_export_job(status=ExportStatus.COMPLETED, file_path="/tmp/x.zip")

        event = job.fail("Build not found", "data_load_failed")

        assert job.status == ExportStatus.FAILED
        assert job.file_path is None
        assert job.error_message == "Build not found"
        assert isinstance(event, ExportFailedEvent)
        assert event.error_category == "data_load_failed"

    def test_fail_without_category_reports_unknown(self):
        job = create_export_job()

        event = job.fail("boom")

        assert job.error_category is None
        assert event.error_category == "UNKNOWN"

    def test_complete_after_fail_clears_error(self):
        job = create_export_job()
        job.fail("boom", "system_error")

        job.complete("/tmp/site.zip")

        assert job.error_message is None
        assert job.error_category is None


class TestExportJobExpiry:
    """Test TTL checks."""

    def test_is_expired_after_ttl(self, fixed_datetime):
        job = create_export_job(created_at=fixed_datetime)

        assert not job.is_expired(fixed_datetime + timedelta(minutes=59), 3600)
        assert job.is_expired(fixed_datetime + timedelta(minutes=61), 3600)


class TestExportJobSerialization:
    """Test dictionary round trip used by the Redis backend."""

    def test_from_dict_restores_every_field(self, fixed_datetime):
        job = create_export_job(
            status=ExportStatus.FAILED,
            created_at=fixed_datetime,
            error_message="boom",
            error_category="pack_failed",
        )

        restored = ExportJob.from_dict(job.to_dict())

        assert restored == job

    def test_to_dict_uses_plain_values(self, fixed_datetime):
        job = create_export_job(created_at=fixed_datetime)

        data = job.to_dict()

        assert data["status"] == "pending"
        assert data["created_at"] == "2024-01-15T12:00:00"


class TestExportName:
    """Test export name validation."""

    @pytest.mark.parametrize("value", ["site.zip", "my-site_v2.zip", "export"])
    def test_valid_names(self, value):
        assert str(ExportName(value)) == value

    @pytest.mark.parametrize(
        "value", ["", "   ", ".", "..", "../site.zip", "a/b.zip", "a\\b.zip", "bad\x00.zip"]
    )
    def test_invalid_names(self, value):
        with pytest.raises(InvalidExportNameError):
            ExportName(value)

    @given(name=export_names())
    def test_generated_archive_names_are_accepted(self, name):
        assert ExportName(name).value == name

    @given(name=export_names(), separator=st.sampled_from(["/", "\\"]))
    def test_names_with_separators_are_rejected(self, name, separator):
        with pytest.raises(InvalidExportNameError):
            ExportName(f"dir{separator}{name}")
