"""
Redis-backed status collection store.
"""

from typing import Callable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import StoreError
from ..lifecycle.defaults import STORAGE_KEY, default_statuses
from ..lifecycle.models import AppointmentStatus
from .store import EntityStore


def create_client(redis_url: str) -> redis.Redis:
    """Client with its own connection pool; connects lazily."""
    return redis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30
    )


class RedisEntityStore(EntityStore):
    """Keeps the collection document in a single Redis string.

    A ``client`` passed in is shared with other stores and is left open by
    ``stop``; its owner closes it.
    """

    def __init__(
        self,
        redis_url: str,
        key: str = STORAGE_KEY,
        seed: Callable[[], List[AppointmentStatus]] = default_statuses,
        client: Optional[redis.Redis] = None,
    ):
        super().__init__(key, seed)
        self.redis_url = redis_url
        self.redis: Optional[redis.Redis] = client
        self._owns_client = client is None

    async def start(self):
        """Connect to Redis."""
        if self.redis is not None:
            return
        try:
            self.redis = create_client(self.redis_url)
            await self.redis.ping()
            self.logger.info("Redis store started", key=self.key)
        except Exception as e:
            self.logger.error("Failed to start Redis store", error=str(e))
            raise StoreError("Failed to connect to Redis", {"error": str(e)})

    async def stop(self):
        """Close the Redis connection if this store opened it."""
        if self.redis and self._owns_client:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis store stopped", key=self.key)

    async def health_check(self) -> bool:
        try:
            await self.redis.ping()
            return True
        except Exception:
            return False

    async def _read(self) -> Optional[str]:
        if self.redis is None:
            await self.start()
        try:
            return await self.redis.get(self.key)
        except RedisError as e:
            self.logger.error("Redis read failed", key=self.key, error=str(e))
            raise StoreError("Failed to read status collection", {"error": str(e)})

    async def _write(self, payload: str):
        if self.redis is None:
            await self.start()
        try:
            await self.redis.set(self.key, payload)
        except RedisError as e:
            self.logger.error("Redis write failed", key=self.key, error=str(e))
            raise StoreError("Failed to write status collection", {"error": str(e)})
