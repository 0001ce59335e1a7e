"""
Redis Repository

Thin JSON document store over redis-py, shared by the web process and
Celery workers. Every key is namespaced under a prefix so several
deployments can share one Redis database.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import redis
from redis.exceptions import LockError, RedisError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Namespaced JSON documents and named locks in Redis."""

    SCAN_BATCH = 100

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def qualify(self, key: str) -> str:
        """Return the key as stored in Redis, prefix included."""
        if not self.key_prefix:
            return key
        return f"{self.key_prefix}:{key}"

    def unqualify(self, stored_key) -> str:
        if isinstance(stored_key, bytes):
            stored_key = stored_key.decode("utf-8")
        if self.key_prefix and stored_key.startswith(self.key_prefix + ":"):
            return stored_key[len(self.key_prefix) + 1:]
        return stored_key

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        """
        Store a document, replacing any previous value.

        A positive ``ttl`` (seconds) makes Redis expire the key on its own.
        Connection problems are logged and reported as ``False``.
        """
        try:
            payload = json.dumps(data)
        except TypeError as e:
            logger.error(f"Document for {key} is not JSON serializable: {e}")
            return False

        try:
            stored = self.redis.set(self.qualify(key), payload, ex=ttl or None)
        except RedisError as e:
            logger.error(f"Redis write failed for {key}: {e}")
            return False
        return bool(stored)

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """Load a document, or None when it is absent or unreadable."""
        try:
            raw = self.redis.get(self.qualify(key))
        except RedisError as e:
            logger.error(f"Redis read failed for {key}: {e}")
            return None

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error(f"Corrupt document under {key}: {e}")
            return None

    def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(self.qualify(key)))
        except RedisError as e:
            logger.error(f"Redis delete failed for {key}: {e}")
            return False

    def get_keys_by_pattern(self, pattern: str) -> List[str]:
        """
        Collect keys matching a glob pattern with SCAN (never KEYS).

        The pattern and the returned keys are both relative to the prefix.
        """
        try:
            return [
                self.unqualify(stored)
                for stored in self.redis.scan_iter(match=self.qualify(pattern), count=self.SCAN_BATCH)
            ]
        except RedisError as e:
            logger.error(f"Redis scan failed for {pattern}: {e}")
            return []

    @contextmanager
    def distributed_lock(self, lock_name: str, timeout: int = 10, blocking_timeout: int = 5) -> Iterator[Any]:
        """
        Hold a Redis lock for the duration of the ``with`` block.

        Raises LockError when the lock is not obtained within
        ``blocking_timeout`` seconds. The lock auto-expires after
        ``timeout`` seconds so a crashed holder cannot wedge other processes.
        """
        lock = self.redis.lock(
            self.qualify(f"lock:{lock_name}"),
            timeout=timeout,
            blocking_timeout=blocking_timeout,
        )
        if not lock.acquire():
            raise LockError(f"Timed out waiting for lock {lock_name}")

        try:
            yield lock
        finally:
            try:
                lock.release()
            except LockError:
                logger.warning(f"Lock {lock_name} expired before release")


class RedisConnectionManager:
    """Owns the connection pool and hands out a shared client."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 max_connections: int = 20, password: Optional[str] = None):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            retry_on_timeout=True,
            socket_keepalive=True,
        )
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """PING the server; any Redis failure counts as unhealthy."""
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def close(self):
        self.connection_pool.disconnect()
