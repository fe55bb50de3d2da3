from redis.asyncio import Redis, ConnectionPool
from typing import Optional

from config import REDIS_DEBUG_MODE
from mergeverse.logger import logger


class RedisPool:
    """Один пул на процесс: локи задач и служебные ключи."""

    _instance: Optional['RedisPool'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._pool = None
            cls._instance._redis = None
        return cls._instance

    def __init__(self, url: str = 'redis://localhost/0'):
        self.url = url

    async def init_pool(self):
        if self._pool is None:
            self._pool = ConnectionPool.from_url(self.url, decode_responses=REDIS_DEBUG_MODE)
            self._redis = Redis(connection_pool=self._pool)
            logger.info(f"Redis pool ready: {self.url.rsplit('@', 1)[-1]}")

    async def client(self) -> Redis:
        if self._redis is None:
            await self.init_pool()
        return self._redis

    async def acquire_lock(self, key: str, ttl: int) -> bool:
        """SET NX EX: True только для первого, кто взял ключ."""
        redis = await self.client()
        return bool(await redis.set(f'lock:{key}', '1', ex=ttl, nx=True))

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None
