"""Store adapters."""
from poolpulse.infrastructure.store.redis_store import RedisStatsStore, RedisReadBatch

__all__ = ["RedisStatsStore", "RedisReadBatch"]
