"""Optional Redis cache; every operation degrades to a miss when Redis is gone."""

import json
from typing import Any

import redis
from redis.exceptions import RedisError
from bjjlib.config import settings
from bjjlib.logger import redis_logger

KEY_PREFIX = "bjjlib:"


class RedisClient:
    """
    JSON cache on top of redis-py.

    Keys are namespaced with ``bjjlib:`` so the app can share a Redis
    database. With no URL configured, or a server that doesn't answer at
    startup, the client stays disabled and callers simply recompute.
    """

    def __init__(self, url: str | None = None):
        self._url = settings.redis_url if url is None else url
        self._client = None
        if self._url:
            self._connect()
        else:
            redis_logger.info("REDIS_URL is empty, caching disabled")

    def _connect(self):
        try:
            client = redis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            client.ping()
        except RedisError as e:
            redis_logger.error(f"Redis connection failed: {e}")
            redis_logger.warning("Continuing without the thumbnail cache")
            return

        self._client = client
        redis_logger.info(f"Redis connected ({settings.environment})")

    @property
    def client(self):
        """Underlying redis-py client, or None while caching is disabled."""
        return self._client

    def status(self) -> str:
        """Health summary: connected, disabled or the error text."""
        if not self._client:
            return "disabled"
        try:
            self._client.ping()
        except RedisError as e:
            return f"error: {e}"
        return "connected"

    def get_json(self, key: str) -> Any | None:
        """Cached value for ``key``; None on a miss, a bad payload or an error."""
        if not self._client:
            return None

        try:
            raw = self._client.get(KEY_PREFIX + key)
        except RedisError as e:
            redis_logger.debug(f"Redis GET {key} failed: {e}")
            return None

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            redis_logger.warning(f"Dropping unreadable cache entry {key}")
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        """
        Cache a JSON-serializable value.

        Args:
            key: Cache key (namespaced automatically)
            value: JSON-serializable value
            ttl_seconds: Time to live; entries always expire

        Returns:
            True if Redis accepted the write
        """
        if not self._client:
            return False

        try:
            return bool(self._client.setex(KEY_PREFIX + key, ttl_seconds, json.dumps(value)))
        except RedisError as e:
            redis_logger.debug(f"Redis SETEX {key} failed: {e}")
            return False

    def close(self):
        if self._client:
            self._client.close()


# Global Redis client instance
redis_client = RedisClient()


def get_redis():
    """Dependency for getting Redis client."""
    return redis_client
