"""
Redis Configuration

Connection settings for the Redis-backed export registry and the
process-wide connection manager created by ``init_redis``.
"""

import os
from typing import Optional

import redis

from infrastructure.redis_repository import RedisConnectionManager, RedisRepository

DEFAULT_KEY_PREFIX = "site-export"


class RedisConfig:
    """
    Redis settings read from the environment.

    ``REDIS_URL`` (``redis://[:password@]host:port/db``) wins over the
    individual ``REDIS_*`` variables when set.
    """

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD") or None
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))
        self.key_prefix = os.getenv("REDIS_KEY_PREFIX", DEFAULT_KEY_PREFIX)

        self.url = os.getenv("REDIS_URL")
        if self.url:
            self._apply_url(self.url)

    def _apply_url(self, url: str) -> None:
        parsed = redis.connection.parse_url(url)
        self.host = parsed.get("host", self.host)
        self.port = parsed.get("port", self.port)
        self.db = parsed.get("db", self.db)
        self.password = parsed.get("password", self.password)


_manager: Optional[RedisConnectionManager] = None


def init_redis(config: Optional[RedisConfig] = None) -> RedisConnectionManager:
    """Create (or replace) the shared connection manager."""
    global _manager

    config = config or RedisConfig()
    _manager = RedisConnectionManager(
        host=config.host,
        port=config.port,
        db=config.db,
        max_connections=config.max_connections,
        password=config.password,
    )
    return _manager


def is_redis_initialized() -> bool:
    return _manager is not None


def get_redis_client() -> redis.Redis:
    if _manager is None:
        raise RuntimeError("init_redis() must run before Redis is used")
    return _manager.client


def get_redis_repository(key_prefix: str = DEFAULT_KEY_PREFIX) -> RedisRepository:
    return RedisRepository(get_redis_client(), key_prefix)


def redis_health_check() -> bool:
    """False when Redis was never initialized or does not answer PING."""
    return _manager is not None and _manager.health_check()
