"""Domain entities."""
from poolpulse.domain.entities.snapshot import (
    Snapshot,
    PoolTotals,
    ParticipantAggregate,
    NetworkState,
    LastBlock,
    HostLoad,
)
from poolpulse.domain.entities.detail_view import (
    DetailView,
    DetailResult,
    WorkerDetail,
    NOT_FOUND_PAYLOAD,
)

__all__ = [
    "Snapshot",
    "PoolTotals",
    "ParticipantAggregate",
    "NetworkState",
    "LastBlock",
    "HostLoad",
    "DetailView",
    "DetailResult",
    "WorkerDetail",
    "NOT_FOUND_PAYLOAD",
]
