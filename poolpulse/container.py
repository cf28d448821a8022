"""
PoolPulse – Dependency Injection Container
===========================================
Único lugar donde se construyen los adaptadores concretos (Redis,
daemon RPC, psutil) y se cablean con los casos de uso.

Todo es perezoso: nada abre conexiones hasta el primer acceso, y los
tests reemplazan adaptadores con override() antes de usarlos.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Application Ports
from poolpulse.application.ports.daemon_rpc import IDaemonRpc
from poolpulse.application.ports.host_metrics import IHostMetrics
from poolpulse.application.ports.stats_store import IStatsStore
from poolpulse.application.ports.store_keys import StoreKeys

# Application Services
from poolpulse.application.services.network_probe import NetworkProbe
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.application.services.subscriber_registry import SubscriberRegistry

# Use Cases
from poolpulse.application.use_cases.broadcast_usecase import BroadcastDispatcher
from poolpulse.application.use_cases.collect_stats_usecase import StatsCollector
from poolpulse.application.use_cases.history_query_usecase import HistoryQueryUseCase
from poolpulse.application.use_cases.miner_detail_usecase import MinerDetailUseCase

# Shared
from poolpulse.shared.config.settings import Settings


@dataclass
class Container:
    """
    Grafo de objetos de PoolPulse.

    Los dos registros de long-poll, el SnapshotHolder y el collector son
    únicos por contenedor: el collector publica en el mismo holder que
    leen las rutas.
    """

    settings: Settings = field(default_factory=Settings)

    # Ports (implementaciones concretas)
    _store: Optional[IStatsStore] = None
    _daemon_rpc: Optional[IDaemonRpc] = None
    _host_metrics: Optional[IHostMetrics] = None
    _store_keys: Optional[StoreKeys] = None

    # Estado compartido
    _snapshot_holder: Optional[SnapshotHolder] = None
    _live_registry: Optional[SubscriberRegistry] = None
    _detail_registry: Optional[SubscriberRegistry] = None
    _network_probe: Optional[NetworkProbe] = None

    # Casos de uso
    _detail_use_case: Optional[MinerDetailUseCase] = None
    _history_use_case: Optional[HistoryQueryUseCase] = None
    _dispatcher: Optional[BroadcastDispatcher] = None
    _collector: Optional[StatsCollector] = None

    # ==================== Ports ====================

    @property
    def store(self) -> IStatsStore:
        """Obtiene el store Redis."""
        if self._store is None:
            from poolpulse.infrastructure.store.redis_store import RedisStatsStore
            self._store = RedisStatsStore(self.settings.redis_url)
        return self._store

    @property
    def daemon_rpc(self) -> IDaemonRpc:
        """Obtiene el cliente JSON-RPC del daemon."""
        if self._daemon_rpc is None:
            from poolpulse.infrastructure.external.daemon_rpc_client import DaemonRpcClient
            self._daemon_rpc = DaemonRpcClient(
                host=self.settings.daemon_host,
                port=self.settings.daemon_port,
                path=self.settings.daemon_rpc_path,
                timeout_seconds=self.settings.rpc_timeout_seconds,
            )
        return self._daemon_rpc

    @property
    def host_metrics(self) -> IHostMetrics:
        if self._host_metrics is None:
            from poolpulse.infrastructure.external.host_metrics import PsutilHostMetrics
            self._host_metrics = PsutilHostMetrics()
        return self._host_metrics

    @property
    def store_keys(self) -> StoreKeys:
        if self._store_keys is None:
            self._store_keys = StoreKeys(self.settings.coin)
        return self._store_keys

    # ==================== Estado compartido ====================

    @property
    def snapshot_holder(self) -> SnapshotHolder:
        if self._snapshot_holder is None:
            self._snapshot_holder = SnapshotHolder(config=self.settings.public_config())
        return self._snapshot_holder

    @property
    def live_registry(self) -> SubscriberRegistry:
        if self._live_registry is None:
            self._live_registry = SubscriberRegistry("live")
        return self._live_registry

    @property
    def detail_registry(self) -> SubscriberRegistry:
        if self._detail_registry is None:
            self._detail_registry = SubscriberRegistry("detail")
        return self._detail_registry

    @property
    def network_probe(self) -> NetworkProbe:
        if self._network_probe is None:
            self._network_probe = NetworkProbe(
                self.daemon_rpc, use_first_vout=self.settings.use_first_vout
            )
        return self._network_probe

    # ==================== Use Cases ====================

    @property
    def detail_use_case(self) -> MinerDetailUseCase:
        if self._detail_use_case is None:
            self._detail_use_case = MinerDetailUseCase(
                store=self.store,
                keys=self.store_keys,
                snapshots=self.snapshot_holder,
                payments_limit=self.settings.api_payments,
                worker_blocks_limit=self.settings.api_worker_blocks,
            )
        return self._detail_use_case

    @property
    def history_use_case(self) -> HistoryQueryUseCase:
        if self._history_use_case is None:
            self._history_use_case = HistoryQueryUseCase(
                store=self.store,
                keys=self.store_keys,
                snapshots=self.snapshot_holder,
                payments_limit=self.settings.api_payments,
                blocks_limit=self.settings.api_blocks,
                worker_blocks_limit=self.settings.api_worker_blocks,
                top_miners_limit=self.settings.top_miners_limit,
            )
        return self._history_use_case

    @property
    def dispatcher(self) -> BroadcastDispatcher:
        if self._dispatcher is None:
            self._dispatcher = BroadcastDispatcher(
                live_registry=self.live_registry,
                detail_registry=self.detail_registry,
                detail_use_case=self.detail_use_case,
            )
        return self._dispatcher

    @property
    def collector(self) -> StatsCollector:
        if self._collector is None:
            s = self.settings
            self._collector = StatsCollector(
                store=self.store,
                keys=self.store_keys,
                network=self.network_probe,
                host_metrics=self.host_metrics,
                holder=self.snapshot_holder,
                dispatcher=self.dispatcher,
                config=s.public_config(),
                hashrate_window=s.hashrate_window,
                update_interval=s.update_interval,
                blocks_limit=s.api_blocks,
                payments_limit=s.api_payments,
                pool_charts=s.pool_charts,
                blocks_chart_days=s.charts_blocks_days if s.charts_blocks_enabled else None,
            )
        return self._collector

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Cierra las conexiones de los adaptadores ya creados."""
        if self._store is not None:
            await self._store.close()
        if self._daemon_rpc is not None:
            await self._daemon_rpc.close()

    def reset(self) -> None:
        """Olvida todas las instancias; el próximo acceso las recrea."""
        for name in list(vars(self)):
            if name.startswith("_"):
                setattr(self, name, None)

    def override(self, name: str, instance: Any) -> None:
        """
        Sustituye una dependencia por nombre (ej: "store", "daemon_rpc").

        Raises:
            ValueError: si el contenedor no gestiona esa dependencia
        """
        slot = f"_{name}"
        if not hasattr(self, slot):
            raise ValueError(f"Unknown dependency: {name}")
        setattr(self, slot, instance)


# ==================== Contenedor del proceso ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """Contenedor del proceso; se crea con Settings por defecto si no existe."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Descarta el contenedor del proceso y sus instancias."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Crea el contenedor del proceso con los settings dados (main.py).

    Un contenedor previo se reemplaza sin cerrar sus adaptadores.
    """
    global _container
    _container = Container(settings=settings or Settings())
    return _container
