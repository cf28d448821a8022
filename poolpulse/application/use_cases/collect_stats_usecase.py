"""
Collect Stats Use Case.

Un ciclo de agregación del pool: lee todas las fuentes en paralelo,
construye un Snapshot inmutable, lo publica y dispara el broadcast.

MÁQUINA DE ESTADOS:
  IDLE ──(timer)──▸ COLLECTING ──(fin, éxito o fallo)──▸ IDLE ──▸ sleep(resto)

  El siguiente ciclo se agenda SIEMPRE al terminar el anterior, a
  `interval` segundos del inicio del ciclo previo. Un ciclo que excede
  el intervalo encadena el siguiente de inmediato: nunca se solapan
  ni se encolan.

FUENTES POR CICLO (asyncio.gather):
  store     → un lote de lecturas, todo-o-nada
  network   → NetworkProbe (get_info / getlastblockheader)
  lastblock → NetworkProbe.fetch_last_block()
  system    → IHostMetrics
  charts    → series del pool + chart de bloques

  Solo el fallo del store aborta el ciclo (se conserva el Snapshot
  anterior). Los demás fallos dejan su campo en None.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from poolpulse.application.ports.host_metrics import IHostMetrics
from poolpulse.application.ports.stats_store import IStatsStore
from poolpulse.application.ports.store_keys import StoreKeys
from poolpulse.application.services.network_probe import NetworkProbe
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.application.use_cases.broadcast_usecase import BroadcastDispatcher
from poolpulse.application.use_cases.miner_detail_usecase import flatten_scored
from poolpulse.domain.entities.snapshot import (
    HostLoad,
    ParticipantAggregate,
    PoolTotals,
    Snapshot,
)
from poolpulse.domain.exceptions.domain_errors import MalformedRecordError, SourceUnavailableError
from poolpulse.domain.services.block_stats import count_blocks_per_period, summarize_blocks
from poolpulse.domain.services.rate_calculator import RateCalculator
from poolpulse.domain.value_objects.chart_sample import parse_chart_series
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("collector")


class CollectorState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


@dataclass
class CollectStatsResult:
    """Resultado de un ciclo."""
    snapshot: Optional[Snapshot] = None
    published: bool = False
    store_ms: float = 0.0
    daemon_ms: float = 0.0
    error: Optional[str] = None


def _numeric_table(raw: Optional[Mapping[str, str]], cast) -> Dict[str, Any]:
    """Hash {id: valor} con valores convertidos; los ilegibles se descartan."""
    table: Dict[str, Any] = {}
    for participant_id, value in (raw or {}).items():
        try:
            table[participant_id] = cast(value)
        except (TypeError, ValueError):
            logger.debug("Valor de ronda descartado: %s=%r", participant_id, value)
    return table


class StatsCollector:
    """
    Caso de uso: recolección periódica de estadísticas del pool.

    DEPENDE SOLO DE:
    - Puertos (IStatsStore, IHostMetrics) y NetworkProbe
    - Domain services puros (RateCalculator, block_stats)
    - SnapshotHolder + BroadcastDispatcher para publicar
    """

    def __init__(
        self,
        store: IStatsStore,
        keys: StoreKeys,
        network: NetworkProbe,
        host_metrics: IHostMetrics,
        holder: SnapshotHolder,
        dispatcher: BroadcastDispatcher,
        config: Optional[Mapping[str, Any]] = None,
        hashrate_window: int = 600,
        update_interval: float = 5.0,
        blocks_limit: int = 30,
        payments_limit: int = 30,
        pool_charts: Sequence[str] = (),
        blocks_chart_days: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._keys = keys
        self._network = network
        self._host = host_metrics
        self._holder = holder
        self._dispatcher = dispatcher
        self._config = dict(config or {})
        self._window = hashrate_window
        self._calculator = RateCalculator(hashrate_window)
        self._interval = update_interval
        self._blocks_limit = blocks_limit
        self._payments_limit = payments_limit
        self._pool_charts = list(pool_charts)
        self._blocks_chart_days = blocks_chart_days
        self._clock = clock

        self._state = CollectorState.IDLE
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    # ─── Ciclo ──────────────────────────────────────────────────────────

    async def collect(self) -> CollectStatsResult:
        """Ejecuta UN ciclo completo (usado por el timer o bajo demanda)."""
        if self._state is CollectorState.COLLECTING:
            logger.debug("Ciclo en curso, se ignora la petición")
            return CollectStatsResult(error="busy")

        self._state = CollectorState.COLLECTING
        try:
            return await self._collect_once()
        finally:
            self._state = CollectorState.IDLE

    async def _collect_once(self) -> CollectStatsResult:
        started = time.monotonic()
        now = self._clock()
        timings = {"store": started, "daemon": started}

        async def timed(source: str, coro):
            try:
                return await coro
            finally:
                timings[source] = time.monotonic()

        store, network, lastblock, system, charts = await asyncio.gather(
            timed("store", self._read_store(now)),
            timed("daemon", self._network.fetch_network()),
            timed("daemon", self._network.fetch_last_block()),
            self._read_host(),
            self._read_charts(now),
            return_exceptions=True,
        )

        result = CollectStatsResult(
            store_ms=(timings["store"] - started) * 1000,
            daemon_ms=(timings["daemon"] - started) * 1000,
        )
        logger.info(
            "Recolección terminada: %.0f ms store, %.0f ms daemon",
            result.store_ms, result.daemon_ms,
        )

        if isinstance(store, BaseException):
            message = store.message if isinstance(store, SourceUnavailableError) else repr(store)
            logger.error("Error recolectando estadísticas, se conserva el snapshot anterior: %s", message)
            result.error = message
            return result

        snapshot = self._build_snapshot(
            store,
            now,
            network=self._optional("network", network),
            lastblock=self._optional("lastblock", lastblock),
            system=self._optional("system", system),
            charts=self._optional("charts", charts),
        )
        self._holder.replace(snapshot)
        result.snapshot = snapshot
        result.published = True

        try:
            await self._dispatcher.broadcast(snapshot)
        except Exception:
            logger.exception("Error en broadcast del ciclo")
        return result

    @staticmethod
    def _optional(source: str, value: Any) -> Any:
        if isinstance(value, BaseException):
            logger.error("Fuente %s falló: %r", source, value)
            return None
        return value

    # ─── Fuentes ────────────────────────────────────────────────────────

    async def _read_store(self, now: float) -> list:
        """
        Lote principal del pool.

        Raises:
            SourceUnavailableError: si el lote falla (aborta el ciclo).
        """
        keys = self._keys
        # Solo lectura: la ventana se aplica como cota inferior exclusiva
        window_start = f"({int(now - self._window)}"
        batch = (
            self._store.batch()
            .zrangebyscore(keys.hashrate(), window_start, "+inf")
            .hgetall(keys.pool_stats())
            .zrange(keys.candidates(), 0, -1, withscores=True)
            .zrevrange(keys.matured(), 0, self._blocks_limit - 1, withscores=True)
            .hgetall(keys.round_scores())
            .zcard(keys.matured())
            .zrevrange(keys.payments(), 0, self._payments_limit - 1, withscores=True)
            .zcard(keys.payments())
            .keys(keys.payments_pattern())
            .hgetall(keys.round_hashes())
        )
        return await batch.execute()

    async def _read_host(self) -> Optional[HostLoad]:
        try:
            return self._host.read()
        except SourceUnavailableError as e:
            logger.warning("Métricas del host no disponibles: %s", e.message)
            return None

    async def _read_charts(self, now: float) -> Optional[Dict[str, Any]]:
        """Series del pool + chart de bloques por día. Fallo → None."""
        if not self._pool_charts and not self._blocks_chart_days:
            return None

        batch = self._store.batch()
        for name in self._pool_charts:
            batch.get(self._keys.chart(name))
        if self._blocks_chart_days:
            batch.zrevrange(self._keys.matured(), 0, -1)
        try:
            replies = await batch.execute()
        except SourceUnavailableError as e:
            logger.warning("Charts del pool no disponibles: %s", e.message)
            return None

        charts: Dict[str, Any] = {}
        for name, raw in zip(self._pool_charts, replies):
            try:
                charts[name] = [s.to_list() for s in parse_chart_series(raw)]
            except MalformedRecordError as e:
                logger.debug("Chart %s ignorado: %s", name, e.message)
                charts[name] = []
        if self._blocks_chart_days:
            matured = replies[len(self._pool_charts)] or []
            charts["blocks"] = count_blocks_per_period(matured, now, self._blocks_chart_days)
        return charts

    # ─── Construcción del Snapshot ──────────────────────────────────────

    def _build_snapshot(self, replies: list, now: float, **sources: Any) -> Snapshot:
        (
            counters,
            stats,
            candidates,
            matured,
            round_scores,
            matured_count,
            payments,
            payments_count,
            payment_keys,
            round_hashes,
        ) = replies

        rates = self._calculator.compute(counters or [])
        scores = _numeric_table(round_scores, float)
        hashes = _numeric_table(round_hashes, int)

        # Mapa reconstruido entero: solo ids con contadores en la ventana.
        # Las tablas de ronda completas siguen sumando en los totales del pool.
        participants = {
            pid: ParticipantAggregate(
                hashrate=rate,
                round_score=scores.get(pid, 0.0),
                round_hashes=hashes.get(pid, 0),
            )
            for pid, rate in rates.rates.items()
        }

        candidates = list(candidates or [])
        matured = list(matured or [])
        blocks = flatten_scored(candidates) + flatten_scored(matured)
        total_diff, total_shares = summarize_blocks(
            [member for member, _ in candidates] + [member for member, _ in matured]
        )
        stats = dict(stats or {})

        pool = PoolTotals(
            miners=rates.miners,
            workers=rates.workers,
            hashrate=rates.hashrate,
            round_score=sum(scores.values()),
            round_hashes=sum(hashes.values()),
            stats=stats,
            blocks=tuple(blocks),
            total_blocks=int(matured_count or 0) + len(candidates),
            total_diff=total_diff,
            total_shares=total_shares,
            payments=tuple(flatten_scored(payments)),
            total_payments=int(payments_count or 0),
            total_miners_paid=max(len(payment_keys or []) - 1, 0),
            last_block_found=stats.get("lastBlockFound"),
        )

        return Snapshot(
            pool=pool,
            participants=participants,
            config=self._config,
            candidates=tuple((member, int(height)) for member, height in candidates),
            generated_at=now,
            **sources,
        )

    # ─── Timer ──────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Lanza el loop periódico como task independiente."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="stats-collector")
        logger.info("StatsCollector iniciado (intervalo %.1fs, ventana %ds)", self._interval, self._window)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("StatsCollector detenido")

    async def _run_loop(self) -> None:
        while self._running:
            started = time.monotonic()
            try:
                await self.collect()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Error inesperado en el ciclo de recolección")
            # Un ciclo que excede el intervalo encadena el siguiente sin espera
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(self._interval - elapsed, 0.0))
