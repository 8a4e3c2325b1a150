import logging

import redis

from .config import REDIS_HOST, REDIS_PASSWORD, REDIS_PORT, REDIS_USER

logger = logging.getLogger(__name__)


def _default_client() -> redis.Redis:
    return redis.Redis(
        host=REDIS_HOST,
        port=REDIS_PORT,
        username=REDIS_USER,
        password=REDIS_PASSWORD,
    )


class CacheService:
    """Holds the application's redis client for the lifetime of the app.

    The client is opened at startup and closed at shutdown; see the
    lifespan in ``taskboard.main``.
    """

    def __init__(self, client_factory=_default_client):
        self._client_factory = client_factory
        self.client = None

    def open(self) -> None:
        if self.client is None:
            self.client = self._client_factory()
            logger.info("Cache client opened (%s:%s)", REDIS_HOST, REDIS_PORT)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Cache client closed")

    def ping(self) -> bool:
        """True when the cache answers; never raises."""
        if self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except redis.RedisError as exc:
            logger.warning("Cache ping failed: %s", exc)
            return False


cache = CacheService()
