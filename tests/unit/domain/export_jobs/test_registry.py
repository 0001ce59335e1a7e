"""
Unit tests for ExportJobRegistry.

Covers the pending/completed/failed lifecycle, duplicate submissions,
deletion and the TTL sweep.
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from domain.export_jobs import (
    DuplicateExportError,
    ExportJobRegistry,
    ExportNotFoundError,
    ExportStatus,
)
from domain.export_jobs.services import remove_file_quietly
from infrastructure.in_memory_export_job_repository import InMemoryExportJobRepository
from tests.fixtures.assertion_helpers import assert_export_status
from tests.fixtures.domain_fixtures import create_export_job


class TestRegistryLifecycle:
    """Test state transitions through the registry."""

    def test_set_pending_registers_job(self, registry):
        registry.set_pending("site.zip", "build-1")

        job = registry.get("site.zip")
        assert_export_status(job, ExportStatus.PENDING)
        assert job.build_id == "build-1"

    def test_set_pending_rejects_pending_duplicate(self, registry):
        registry.set_pending("site.zip", "build-1")

        with pytest.raises(DuplicateExportError):
            registry.set_pending("site.zip", "build-2")

        assert registry.get("site.zip").build_id == "build-1"

    def test_set_pending_overwrites_terminal_job(self, registry, tmp_path):
        registry.set_pending("site.zip", "build-1")
        registry.set_completed("site.zip", str(tmp_path / "site.zip"))

        registry.set_pending("site.zip", "build-2")

        job = registry.get("site.zip")
        assert_export_status(job, ExportStatus.PENDING)
        assert job.build_id == "build-2"

    def test_refresh_pending_overwrites_reservation(self, registry):
        registry.set_pending("site.zip", "build-1")

        registry.refresh_pending("site.zip", "build-1")

        assert_export_status(registry.get("site.zip"), ExportStatus.PENDING)

    def test_set_completed_exposes_file_path(self, registry, tmp_path):
        bundle = tmp_path / "site.zip"
        bundle.write_bytes(b"zip")
        registry.set_pending("site.zip", "build-1")

        job, event = registry.set_completed("site.zip", str(bundle))

        assert_export_status(job, ExportStatus.COMPLETED)
        assert registry.get_file_path("site.zip") == str(bundle)
        assert event.build_id == "build-1"

    def test_set_failed_hides_file_path(self, registry):
        registry.set_pending("site.zip", "build-1")

        job, event = registry.set_failed("site.zip", "Build not found", "data_load_failed")

        assert_export_status(job, ExportStatus.FAILED)
        assert job.error_message == "Build not found"
        assert registry.get_file_path("site.zip") is None
        assert event.error_message == "Build not found"

    def test_set_completed_for_unknown_name_creates_entry(self, registry):
        registry.set_completed("ghost.zip", "/tmp/ghost.zip")

        assert_export_status(registry.get("ghost.zip"), ExportStatus.COMPLETED)

    def test_get_file_path_is_none_while_pending(self, registry):
        registry.set_pending("site.zip", "build-1")

        assert registry.get_file_path("site.zip") is None
        assert registry.get_file_path("missing.zip") is None

    def test_get_job_raises_for_unknown_name(self, registry):
        with pytest.raises(ExportNotFoundError):
            registry.get_job("missing.zip")

    def test_save_failure_raises(self):
        repo = Mock()
        repo.get.return_value = create_export_job()
        repo.save.return_value = False
        registry = ExportJobRegistry(repo)

        with pytest.raises(Exception, match="Failed to save export"):
            registry.set_failed("site.zip", "boom")


class TestRegistryDeletion:
    """Test explicit deletion."""

    def test_delete_removes_entry_and_file(self, registry, tmp_path):
        bundle = tmp_path / "site.zip"
        bundle.write_bytes(b"zip")
        registry.set_pending("site.zip", "build-1")
        registry.set_completed("site.zip", str(bundle))

        assert registry.delete("site.zip") is True

        assert registry.get("site.zip") is None
        assert not bundle.exists()

    def test_delete_unknown_returns_false(self, registry):
        assert registry.delete("missing.zip") is False


class TestRegistrySweep:
    """Test TTL eviction."""

    def test_sweep_removes_only_expired_entries(self, job_repository, registry, tmp_path):
        # Arrange
        now = datetime.utcnow()
        old_bundle = tmp_path / "old.zip"
        old_bundle.write_bytes(b"zip")
        job_repository.save(create_export_job(
            name="old.zip",
            status=ExportStatus.COMPLETED,
            file_path=str(old_bundle),
            created_at=now - timedelta(hours=2),
        ))
        job_repository.save(create_export_job(name="fresh.zip", created_at=now))

        # Act
        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        # Assert
        assert [job.name for job in evicted] == ["old.zip"]
        assert registry.get("old.zip") is None
        assert not old_bundle.exists()
        assert registry.get("fresh.zip") is not None

    def test_sweep_evicts_stale_pending_and_failed_jobs(self, job_repository, registry):
        now = datetime.utcnow()
        job_repository.save(create_export_job(name="stuck.zip", created_at=now - timedelta(hours=3)))
        job_repository.save(create_export_job(
            name="failed.zip",
            status=ExportStatus.FAILED,
            error_message="boom",
            created_at=now - timedelta(hours=3),
        ))

        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        assert sorted(job.name for job in evicted) == ["failed.zip", "stuck.zip"]
        assert len(job_repository) == 0

    def test_sweep_tolerates_missing_files(self, job_repository, registry, tmp_path):
        now = datetime.utcnow()
        job_repository.save(create_export_job(
            name="gone.zip",
            status=ExportStatus.COMPLETED,
            file_path=str(tmp_path / "never-written.zip"),
            created_at=now - timedelta(hours=2),
        ))

        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        assert len(evicted) == 1
        assert registry.get("gone.zip") is None

    def test_sweep_continues_when_file_removal_fails(self, job_repository, registry, tmp_path):
        """A directory at the bundle path cannot be unlinked; the entry still goes."""
        now = datetime.utcnow()
        blocker = tmp_path / "blocker.zip"
        blocker.mkdir()
        job_repository.save(create_export_job(
            name="blocker.zip",
            status=ExportStatus.COMPLETED,
            file_path=str(blocker),
            created_at=now - timedelta(hours=2),
        ))

        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        assert len(evicted) == 1
        assert registry.get("blocker.zip") is None

    def test_sweep_keeps_entry_resubmitted_after_snapshot(self, tmp_path):
        # Arrange: a resubmission lands between the sweep's snapshot and its delete
        now = datetime.utcnow()
        bundle = tmp_path / "site.zip"
        bundle.write_bytes(b"zip")
        repo = ResubmittingRepository()
        registry = ExportJobRegistry(repo)
        repo.save(create_export_job(
            name="site.zip",
            status=ExportStatus.COMPLETED,
            file_path=str(bundle),
            created_at=now - timedelta(hours=2),
        ))
        repo.on_snapshot = lambda: registry.set_pending("site.zip", "build-2")

        # Act
        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        # Assert
        assert evicted == []
        job = registry.get("site.zip")
        assert_export_status(job, ExportStatus.PENDING)
        assert job.build_id == "build-2"
        assert bundle.exists()

    def test_sweep_skips_job_completed_after_snapshot(self, tmp_path):
        now = datetime.utcnow()
        bundle = tmp_path / "site.zip"
        bundle.write_bytes(b"zip")
        repo = ResubmittingRepository()
        registry = ExportJobRegistry(repo)
        repo.save(create_export_job(name="site.zip", created_at=now - timedelta(hours=2)))
        repo.on_snapshot = lambda: registry.set_completed("site.zip", str(bundle))

        evicted = registry.sweep_expired(timedelta(hours=1), now=now)

        assert evicted == []
        assert registry.get_file_path("site.zip") == str(bundle)
        assert bundle.exists()


class ResubmittingRepository(InMemoryExportJobRepository):
    """In-memory repository that runs a hook right after list_all snapshots."""

    def __init__(self):
        super().__init__()
        self.on_snapshot = None

    def list_all(self):
        jobs = super().list_all()
        if self.on_snapshot is not None:
            hook, self.on_snapshot = self.on_snapshot, None
            hook()
        return jobs


class TestRemoveFileQuietly:
    """Test best-effort file removal."""

    def test_removes_existing_file(self, tmp_path):
        target = tmp_path / "a.zip"
        target.write_bytes(b"x")

        assert remove_file_quietly(str(target)) is True
        assert not target.exists()

    def test_missing_file_is_fine(self, tmp_path):
        assert remove_file_quietly(str(tmp_path / "missing.zip")) is True

    def test_directory_reports_failure(self, tmp_path):
        assert remove_file_quietly(str(tmp_path)) is False
