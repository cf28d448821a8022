"""Application ports - Interfaces to infrastructure."""
from poolpulse.application.ports.stats_store import IStatsStore, IReadBatch
from poolpulse.application.ports.store_keys import StoreKeys
from poolpulse.application.ports.daemon_rpc import IDaemonRpc, RpcOutcome
from poolpulse.application.ports.host_metrics import IHostMetrics

__all__ = [
    "IStatsStore",
    "IReadBatch",
    "StoreKeys",
    "IDaemonRpc",
    "RpcOutcome",
    "IHostMetrics",
]
