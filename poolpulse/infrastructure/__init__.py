"""
PoolPulse – Infrastructure Layer
=================================
Implementaciones concretas de los puertos de application/.

- store/: RedisStatsStore (redis.asyncio)
- external/: DaemonRpcClient (aiohttp), PsutilHostMetrics (psutil)
"""
