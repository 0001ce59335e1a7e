"""Infrastructure layer for Redis, the build data store and file output."""

from .redis_repository import RedisRepository, RedisConnectionManager
from .in_memory_export_job_repository import InMemoryExportJobRepository
from .redis_export_job_repository import RedisExportJobRepository

__all__ = [
    'RedisRepository',
    'RedisConnectionManager',
    'InMemoryExportJobRepository',
    'RedisExportJobRepository',
]
