"""
Miner Detail Use Case.

Compone bajo demanda la vista detallada de UN participante.

PIPELINE (etapas explícitas, cada una con su tipo intermedio):
  1. _fetch_base()      → BaseRecords
       hash base, pagos, claves de sub-workers, serie de hashrate,
       rondas completadas (un solo lote)
       └─ sin hash base → NotFound, sin más lecturas
  2. _worker_names()    → [nombre, ...]
       sufijo tras "~" de cada clave de sub-worker
  3. _fetch_workers()   → [WorkerDetail, ...]
       un lote por sub-worker, todos en paralelo (asyncio.gather)
  +  _filter_candidates() si el llamador pasa la lista de candidatos

Solo la etapa 1 puede producir NotFound. Cualquier otro fallo degrada
el campo afectado a cero/vacío.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from poolpulse.application.ports.stats_store import IStatsStore
from poolpulse.application.ports.store_keys import StoreKeys
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.domain.entities.detail_view import DetailResult, DetailView, WorkerDetail
from poolpulse.domain.entities.snapshot import Snapshot
from poolpulse.domain.exceptions.domain_errors import (
    MalformedRecordError,
    ParticipantNotFoundError,
    SourceUnavailableError,
)
from poolpulse.domain.services.hashrate_window import average_windows
from poolpulse.domain.value_objects.chart_sample import parse_chart_series
from poolpulse.domain.value_objects.counter_entry import WORKER_DELIMITER, worker_name_of
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("miner_detail")


def flatten_scored(pairs) -> list:
    """[(member, score), ...] → [member, int(score), ...] (formato de la API)."""
    flat: list = []
    for member, score in pairs or []:
        flat.append(member)
        flat.append(int(score))
    return flat


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class BaseRecords:
    """Salida de la etapa 1."""
    stats: dict
    payments: list = field(default_factory=list)
    payment_pairs: list = field(default_factory=list)
    worker_keys: List[str] = field(default_factory=list)
    hashrate_chart: Optional[str] = None
    blocks: list = field(default_factory=list)


class MinerDetailUseCase:
    """
    Caso de uso: detalle de un participante.

    DEPENDE SOLO DE:
    - IStatsStore (lecturas por lotes)
    - SnapshotHolder (rates del último ciclo)
    - average_windows (dominio puro)
    """

    def __init__(
        self,
        store: IStatsStore,
        keys: StoreKeys,
        snapshots: SnapshotHolder,
        payments_limit: int = 30,
        worker_blocks_limit: int = 30,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._keys = keys
        self._snapshots = snapshots
        self._payments_limit = payments_limit
        self._worker_blocks_limit = worker_blocks_limit
        self._clock = clock

    async def participant_exists(self, participant_id: str) -> bool:
        """¿Tiene el participante un registro base? (requisito del long-poll)"""
        if not participant_id:
            return False
        return await self._store.exists(self._keys.worker(participant_id))

    async def get_detail(
        self,
        participant_id: str,
        candidates: Optional[Sequence[Tuple[str, int]]] = None,
        snapshot: Optional[Snapshot] = None,
    ) -> DetailResult:
        """
        Construye el detalle del participante.

        Args:
            participant_id: Id del participante
            candidates: Lista (miembro, altura) de bloques candidatos; si se
                pasa, se incluyen solo los que tienen trabajo de este participante
            snapshot: Snapshot a usar para los rates (por defecto el vigente)

        Returns:
            DetailResult con la vista, o NotFound
        """
        if not participant_id:
            return DetailResult.missing(participant_id)
        snapshot = snapshot or self._snapshots.get()
        now = self._clock()

        # Etapa 1
        try:
            base = await self._fetch_base(participant_id)
        except ParticipantNotFoundError as e:
            logger.debug(e.message)
            return DetailResult.missing(participant_id)

        # Etapa 2
        names = self._worker_names(base.worker_keys)

        # Etapa 3 (+ candidatos, independientes entre sí)
        fetches = [self._fetch_workers(participant_id, names, snapshot, now)]
        if candidates is not None:
            fetches.append(self._filter_candidates(participant_id, candidates))
        results = await asyncio.gather(*fetches)
        workers = results[0]
        filtered = results[1] if candidates is not None else None

        stats = dict(base.stats)
        aggregate = snapshot.participant(participant_id)
        stats["hashrate"] = aggregate.hashrate if aggregate else 0
        stats["roundScore"] = aggregate.round_score if aggregate else 0
        stats["roundHashes"] = aggregate.round_hashes if aggregate else 0
        samples = self._samples(base.hashrate_chart)
        stats.update(average_windows(samples, now).to_dict("hashrate"))

        view = DetailView(
            participant_id=participant_id,
            stats=stats,
            payments=base.payments,
            blocks=base.blocks,
            workers=workers,
            charts={
                "hashrate": [s.to_list() for s in samples],
                "payments": self._payments_chart(base.payment_pairs),
            },
            candidates=filtered,
        )
        return DetailResult(participant_id=participant_id, view=view)

    # ─── Etapa 1 ────────────────────────────────────────────────────────

    async def _fetch_base(self, participant_id: str) -> BaseRecords:
        """
        Raises:
            ParticipantNotFoundError: sin hash base, o el lote no se pudo leer
        """
        keys = self._keys
        batch = (
            self._store.batch()
            .hgetall(keys.worker(participant_id))
            .zrevrange(keys.payments(participant_id), 0, self._payments_limit - 1, withscores=True)
            .keys(keys.unique_workers_pattern(participant_id))
            .get(keys.participant_chart(participant_id))
            .zrevrange(keys.block_stats(participant_id), 0, self._worker_blocks_limit - 1, withscores=True)
        )
        try:
            stats, payments, worker_keys, chart, blocks = await batch.execute()
        except SourceUnavailableError as e:
            logger.warning("Detalle de %s no disponible: %s", participant_id, e.message)
            raise ParticipantNotFoundError(participant_id) from e

        if not stats:
            raise ParticipantNotFoundError(participant_id)

        return BaseRecords(
            stats=dict(stats),
            payments=flatten_scored(payments),
            payment_pairs=list(payments or []),
            worker_keys=list(worker_keys or []),
            hashrate_chart=chart,
            blocks=flatten_scored(blocks),
        )

    # ─── Etapa 2 ────────────────────────────────────────────────────────

    def _worker_names(self, worker_keys: Sequence[str]) -> List[str]:
        names = []
        for key in sorted(worker_keys):
            worker_id = self._keys.id_of("unique_workers", key)
            name = worker_name_of(worker_id) if worker_id else None
            if name:
                names.append(name)
        return names

    # ─── Etapa 3 ────────────────────────────────────────────────────────

    async def _fetch_workers(
        self,
        participant_id: str,
        names: Sequence[str],
        snapshot: Snapshot,
        now: float,
    ) -> List[WorkerDetail]:
        if not names:
            return []
        return list(await asyncio.gather(
            *(self._fetch_worker(participant_id, name, snapshot, now) for name in names)
        ))

    async def _fetch_worker(
        self,
        participant_id: str,
        name: str,
        snapshot: Snapshot,
        now: float,
    ) -> WorkerDetail:
        aggregate = snapshot.participant(f"{participant_id}{WORKER_DELIMITER}{name}")
        worker = WorkerDetail(name=name, hashrate=aggregate.hashrate if aggregate else 0)

        batch = (
            self._store.batch()
            .hgetall(self._keys.unique_worker(participant_id, name))
            .get(self._keys.worker_chart(participant_id, name))
        )
        try:
            record, chart = await batch.execute()
        except SourceUnavailableError as e:
            logger.warning("Worker %s~%s sin datos: %s", participant_id, name, e.message)
            return worker

        record = record or {}
        worker.last_share = _to_int(record.get("lastShare"))
        worker.hashes = _to_int(record.get("hashes"))
        worker.averages = average_windows(self._samples(chart), now)
        return worker

    # ─── Candidatos ─────────────────────────────────────────────────────

    async def _filter_candidates(
        self,
        participant_id: str,
        candidates: Sequence[Tuple[str, int]],
    ) -> list:
        """
        Candidatos con trabajo registrado del participante en esa ronda.

        Formato plano: ["timestamp:shares:trabajo", altura, ...]
        """
        if not candidates:
            return []
        batch = self._store.batch()
        for _, height in candidates:
            batch.hget(self._keys.round_scores(height), participant_id)
        try:
            replies = await batch.execute()
        except SourceUnavailableError as e:
            logger.warning("Candidatos de %s no disponibles: %s", participant_id, e.message)
            return []

        parsed: list = []
        for (member, height), work in zip(candidates, replies):
            if not work:
                continue
            parts = str(member).split(":")
            if len(parts) < 4:
                logger.debug("Candidato descartado: %r", member)
                continue
            parsed.append(f"{parts[1]}:{parts[3]}:{work}")
            parsed.append(height)
        return parsed

    # ─── Helpers ────────────────────────────────────────────────────────

    @staticmethod
    def _samples(chart):
        try:
            return parse_chart_series(chart)
        except MalformedRecordError as e:
            logger.debug("Serie ignorada: %s", e.message)
            return []

    @staticmethod
    def _payments_chart(payment_pairs) -> list:
        """[[timestamp, monto], ...] desde miembros "hash:monto:fee:mixin"."""
        chart = []
        for member, score in payment_pairs:
            parts = str(member).split(":")
            if len(parts) < 2:
                continue
            chart.append([int(score), _to_int(parts[1])])
        return chart
