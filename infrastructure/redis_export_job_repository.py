"""
Redis Export Job Repository

Redis-based implementation of ExportJobRepository for deployments where
exports run in Celery workers and the registry must be shared across
processes.
"""

import logging
from datetime import datetime
from typing import List, Optional

from redis.exceptions import LockError

from domain.export_jobs.entities import ExportJob
from domain.export_jobs.repositories import ExportJobRepository
from domain.export_jobs.value_objects import ExportStatus

logger = logging.getLogger(__name__)


class RedisExportJobRepository(ExportJobRepository):
    """
    Stores each export job as a JSON document under "export:<name>".

    Keys also carry a Redis TTL as a safety net; the registry sweep is
    still responsible for deleting bundle files.
    """

    def __init__(self, redis_repository, key_ttl_seconds: int = 7200):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance
            key_ttl_seconds: Redis expiry applied to every job key
        """
        self.redis_repo = redis_repository
        self.key_prefix = "export"
        self.ttl = key_ttl_seconds

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}:{name}"

    def save(self, job: ExportJob) -> bool:
        """Save or update a job in Redis."""
        return self.redis_repo.set_json(self._key(job.name), job.to_dict(), ttl=self.ttl)

    def save_if_not_pending(self, job: ExportJob) -> bool:
        """Insert a job unless a pending job holds the name, under a Redis lock."""
        try:
            with self.redis_repo.distributed_lock(f"{self.key_prefix}:{job.name}"):
                existing = self.get(job.name)
                if existing is not None and existing.status == ExportStatus.PENDING:
                    return False
                return self.save(job)
        except LockError as e:
            logger.warning(f"Could not lock export {job.name}: {e}")
            return False

    def get(self, name: str) -> Optional[ExportJob]:
        """Retrieve a job from Redis."""
        data = self.redis_repo.get_json(self._key(name))

        if data is None:
            return None

        try:
            return ExportJob.from_dict(data)
        except (KeyError, ValueError) as e:
            logger.error(f"Error deserializing export {name}: {e}")
            return None

    def delete(self, name: str) -> bool:
        """Delete a job from Redis."""
        return self.redis_repo.delete(self._key(name))

    def delete_if_unchanged(self, name: str, created_at: datetime) -> bool:
        """Delete a job unless it was restamped since it was read, under the same lock as reservations."""
        try:
            with self.redis_repo.distributed_lock(f"{self.key_prefix}:{name}"):
                current = self.get(name)
                if current is None or current.created_at != created_at:
                    return False
                return self.redis_repo.delete(self._key(name))
        except LockError as e:
            logger.warning(f"Could not lock export {name} for eviction: {e}")
            return False

    def list_all(self) -> List[ExportJob]:
        """Load every export job currently stored."""
        jobs = []
        for key in self.redis_repo.get_keys_by_pattern(f"{self.key_prefix}:*"):
            job = self.get(key[len(self.key_prefix) + 1:])
            if job is not None:
                jobs.append(job)
        return jobs
