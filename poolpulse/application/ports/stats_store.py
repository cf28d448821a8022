"""
PoolPulse – Application Port: Stats Store
==========================================
Interfaz de lectura sobre el store clave-valor del pool.

El core NO escribe: solo encola lecturas en un lote (IReadBatch) que se
ejecuta en UN round-trip y devuelve los resultados en el mismo orden.

CONVENCIONES DE RESULTADO (compatibles con redis-py, decode_responses=True):
- keys / zrange / zrevrange / zrangebyscore / zrevrangebyscore → list[str]
- con withscores=True → list[tuple[str, float]]
- hgetall → dict[str, str] ({} si la clave no existe)
- get / hget → str | None
- hmget → list[str | None]
- zcard → int
- exists → int, sismember → bool/int

IMPLEMENTACIONES POSIBLES:
- RedisStatsStore (producción, redis.asyncio)
- InMemoryStatsStore (tests)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List


class IReadBatch(ABC):
    """Lote ordenado de comandos de lectura independientes."""

    @abstractmethod
    def keys(self, pattern: str) -> "IReadBatch":
        pass

    @abstractmethod
    def get(self, key: str) -> "IReadBatch":
        pass

    @abstractmethod
    def hget(self, key: str, field: str) -> "IReadBatch":
        pass

    @abstractmethod
    def hgetall(self, key: str) -> "IReadBatch":
        pass

    @abstractmethod
    def hmget(self, key: str, fields: List[str]) -> "IReadBatch":
        pass

    @abstractmethod
    def zcard(self, key: str) -> "IReadBatch":
        pass

    @abstractmethod
    def zrange(self, key: str, start: int, end: int, withscores: bool = False) -> "IReadBatch":
        pass

    @abstractmethod
    def zrevrange(self, key: str, start: int, end: int, withscores: bool = False) -> "IReadBatch":
        pass

    @abstractmethod
    def zrangebyscore(
        self,
        key: str,
        min: str | float,
        max: str | float,
        withscores: bool = False,
    ) -> "IReadBatch":
        pass

    @abstractmethod
    def zrevrangebyscore(
        self,
        key: str,
        max: str | float,
        min: str | float,
        start: int | None = None,
        num: int | None = None,
        withscores: bool = False,
    ) -> "IReadBatch":
        pass

    @abstractmethod
    def sismember(self, key: str, member: str) -> "IReadBatch":
        pass

    @abstractmethod
    def exists(self, key: str) -> "IReadBatch":
        pass

    @abstractmethod
    async def execute(self) -> List[Any]:
        """
        Ejecuta el lote en un round-trip.

        Raises:
            SourceUnavailableError: si el store no responde o rechaza el lote.
        """
        pass


class IStatsStore(ABC):
    """Acceso de solo lectura al store del pool."""

    @abstractmethod
    def batch(self) -> IReadBatch:
        """Crea un lote vacío."""
        pass

    async def exists(self, key: str) -> bool:
        """Atajo: ¿existe la clave?"""
        results = await self.batch().exists(key).execute()
        return bool(results[0])

    @abstractmethod
    async def close(self) -> None:
        pass
