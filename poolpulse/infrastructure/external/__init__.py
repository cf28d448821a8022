"""External service adapters."""
from poolpulse.infrastructure.external.daemon_rpc_client import DaemonRpcClient
from poolpulse.infrastructure.external.host_metrics import PsutilHostMetrics

__all__ = ["DaemonRpcClient", "PsutilHostMetrics"]
