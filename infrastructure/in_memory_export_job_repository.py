"""
In-Memory Export Job Repository

Process-local implementation of ExportJobRepository.
Shared by request threads, export runner threads and the sweeper thread.
"""

import copy
import threading
from datetime import datetime
from typing import Dict, List, Optional

from domain.export_jobs.entities import ExportJob
from domain.export_jobs.repositories import ExportJobRepository
from domain.export_jobs.value_objects import ExportStatus


class InMemoryExportJobRepository(ExportJobRepository):
    """
    Lock-guarded dictionary of export jobs keyed by name.

    Jobs are copied on the way in and out so callers never share mutable
    state with the registry.
    """

    def __init__(self):
        self._jobs: Dict[str, ExportJob] = {}
        self._lock = threading.Lock()

    def save(self, job: ExportJob) -> bool:
        """Insert or overwrite a job."""
        with self._lock:
            self._jobs[job.name] = copy.copy(job)
        return True

    def save_if_not_pending(self, job: ExportJob) -> bool:
        """Insert a job unless a pending job already holds the name."""
        with self._lock:
            existing = self._jobs.get(job.name)
            if existing is not None and existing.status == ExportStatus.PENDING:
                return False
            self._jobs[job.name] = copy.copy(job)
        return True

    def get(self, name: str) -> Optional[ExportJob]:
        """Retrieve a job by name."""
        with self._lock:
            job = self._jobs.get(name)
            return copy.copy(job) if job is not None else None

    def delete(self, name: str) -> bool:
        """Delete a job."""
        with self._lock:
            return self._jobs.pop(name, None) is not None

    def delete_if_unchanged(self, name: str, created_at: datetime) -> bool:
        """Delete a job unless it was restamped since it was read."""
        with self._lock:
            job = self._jobs.get(name)
            if job is None or job.created_at != created_at:
                return False
            del self._jobs[name]
        return True

    def list_all(self) -> List[ExportJob]:
        """Snapshot of all jobs."""
        with self._lock:
            return [copy.copy(job) for job in self._jobs.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
