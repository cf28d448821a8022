"""
Redis Stats Store.

Implementación de IStatsStore sobre redis.asyncio.

Cada lote se ejecuta como MULTI/EXEC en un solo round-trip; los
resultados llegan en el orden en que se encolaron. Con
decode_responses=True todos los valores llegan como str.
"""

from __future__ import annotations

from typing import Any, List

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError

from poolpulse.application.ports.stats_store import IReadBatch, IStatsStore
from poolpulse.domain.exceptions.domain_errors import SourceUnavailableError
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("redis_store")


class RedisReadBatch(IReadBatch):
    """Envuelve un Pipeline de redis-py exponiendo solo lecturas."""

    def __init__(self, pipeline: Pipeline) -> None:
        self._pipe = pipeline
        self._size = 0

    def _queued(self) -> "RedisReadBatch":
        self._size += 1
        return self

    def keys(self, pattern):
        self._pipe.keys(pattern)
        return self._queued()

    def get(self, key):
        self._pipe.get(key)
        return self._queued()

    def hget(self, key, field):
        self._pipe.hget(key, field)
        return self._queued()

    def hgetall(self, key):
        self._pipe.hgetall(key)
        return self._queued()

    def hmget(self, key, fields):
        self._pipe.hmget(key, fields)
        return self._queued()

    def zcard(self, key):
        self._pipe.zcard(key)
        return self._queued()

    def zrange(self, key, start, end, withscores=False):
        self._pipe.zrange(key, start, end, withscores=withscores)
        return self._queued()

    def zrevrange(self, key, start, end, withscores=False):
        self._pipe.zrevrange(key, start, end, withscores=withscores)
        return self._queued()

    def zrangebyscore(self, key, min, max, withscores=False):
        self._pipe.zrangebyscore(key, min, max, withscores=withscores)
        return self._queued()

    def zrevrangebyscore(self, key, max, min, start=None, num=None, withscores=False):
        self._pipe.zrevrangebyscore(key, max, min, start=start, num=num, withscores=withscores)
        return self._queued()

    def sismember(self, key, member):
        self._pipe.sismember(key, member)
        return self._queued()

    def exists(self, key):
        self._pipe.exists(key)
        return self._queued()

    async def execute(self) -> List[Any]:
        if not self._size:
            return []
        try:
            async with self._pipe as pipe:
                return await pipe.execute()
        except (RedisError, OSError) as e:
            logger.error("Lote de %d comandos falló: %s", self._size, e)
            raise SourceUnavailableError(f"Redis no disponible: {e}", source="store") from e


class RedisStatsStore(IStatsStore):
    """Store de solo lectura respaldado por Redis."""

    def __init__(self, redis_url: str) -> None:
        self._url = redis_url
        self._client: Redis = Redis.from_url(redis_url, decode_responses=True)

    def batch(self) -> RedisReadBatch:
        return RedisReadBatch(self._client.pipeline(transaction=True))

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Conexión Redis cerrada")
