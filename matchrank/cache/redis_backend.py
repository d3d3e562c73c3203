"""Redis cache backend."""

from urllib.parse import urlparse

import redis
import structlog

from matchrank.errors import CacheUnavailableError


logger = structlog.get_logger()

_SCAN_BATCH_SIZE = 100


def sanitize_url(url: str) -> str:
    """Remove credentials from a Redis URL for safe logging."""
    parsed = urlparse(url)
    if parsed.password:
        netloc = f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
        return parsed._replace(netloc=netloc).geturl()
    return url


class RedisCacheBackend:
    """Cache backend on a redis-py client.

    Values are written with SETEX; pattern deletes walk the keyspace with
    SCAN so the server is never blocked by KEYS.
    """

    def __init__(self, client: redis.Redis) -> None:
        """Initialize the backend.

        Args:
            client: A redis-py client created with ``decode_responses=True``.
        """
        self._client = client
        self._log = logger.bind(component="cache", subcomponent="redis")

    @classmethod
    def from_url(cls, url: str, timeout_seconds: float = 5.0) -> "RedisCacheBackend":
        """Build a backend from a Redis URL.

        Args:
            url: Redis connection URL.
            timeout_seconds: Connect and socket timeout.

        Returns:
            The backend. No connection is made until first use.
        """
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=timeout_seconds,
            socket_timeout=timeout_seconds,
        )
        logger.info("redis_backend_configured", url=sanitize_url(url))
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis GET failed for {key}: {e}") from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.setex(key, ttl_seconds, value)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis SETEX failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis DELETE failed for {key}: {e}") from e

    def delete_pattern(self, pattern: str) -> int:
        deleted = 0
        cursor = 0
        try:
            while True:
                cursor, keys = self._client.scan(
                    cursor=cursor, match=pattern, count=_SCAN_BATCH_SIZE
                )
                if keys:
                    deleted += int(self._client.delete(*keys))
                if cursor == 0:
                    break
        except redis.RedisError as e:
            raise CacheUnavailableError(f"Redis SCAN/DELETE failed for {pattern}: {e}") from e

        self._log.debug("redis_pattern_deleted", pattern=pattern, deleted=deleted)
        return deleted

    def ping(self) -> bool:
        """Check connectivity."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
