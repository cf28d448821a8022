"""Application use cases - Business logic orchestration."""

from poolpulse.application.use_cases.miner_detail_usecase import (
    MinerDetailUseCase,
    BaseRecords,
)
from poolpulse.application.use_cases.broadcast_usecase import (
    BroadcastDispatcher,
    BroadcastReport,
)
from poolpulse.application.use_cases.collect_stats_usecase import (
    StatsCollector,
    CollectStatsResult,
    CollectorState,
)
from poolpulse.application.use_cases.history_query_usecase import HistoryQueryUseCase

__all__ = [
    "MinerDetailUseCase",
    "BaseRecords",
    "BroadcastDispatcher",
    "BroadcastReport",
    "StatsCollector",
    "CollectStatsResult",
    "CollectorState",
    "HistoryQueryUseCase",
]
