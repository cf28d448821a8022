"""
History Query Use Case.

Consultas paginadas de solo lectura sobre el historial del pool:
pagos, bloques madurados, rondas de un participante y ranking de mineros.

La paginación usa el score como cursor: cada página devuelve los
registros con score estrictamente menor que el cursor, del más
reciente al más antiguo.
"""

from __future__ import annotations

from typing import List, Optional

from poolpulse.application.dto.history_dto import TopMinerDTO, shorten_address
from poolpulse.application.ports.stats_store import IStatsStore
from poolpulse.application.ports.store_keys import StoreKeys
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.application.use_cases.miner_detail_usecase import flatten_scored


def _cursor(value: Optional[float]) -> str:
    """Cota superior exclusiva; sin cursor → desde el registro más reciente."""
    if value is None:
        return "+inf"
    return f"({value}"


class HistoryQueryUseCase:
    """
    Caso de uso: historial paginado.

    Los errores del store se propagan como SourceUnavailableError; la capa
    de presentación decide cómo reportarlos.
    """

    def __init__(
        self,
        store: IStatsStore,
        keys: StoreKeys,
        snapshots: SnapshotHolder,
        payments_limit: int = 30,
        blocks_limit: int = 30,
        worker_blocks_limit: int = 30,
        top_miners_limit: int = 25,
    ):
        self._store = store
        self._keys = keys
        self._snapshots = snapshots
        self._payments_limit = payments_limit
        self._blocks_limit = blocks_limit
        self._worker_blocks_limit = worker_blocks_limit
        self._top_miners_limit = top_miners_limit

    async def _page(self, key: str, before: Optional[float], limit: int) -> list:
        replies = await (
            self._store.batch()
            .zrevrangebyscore(key, _cursor(before), "-inf", start=0, num=limit, withscores=True)
            .execute()
        )
        return flatten_scored(replies[0])

    async def get_payments(self, address: Optional[str] = None, before_time: Optional[int] = None) -> list:
        """Pagos del pool (o de una dirección) anteriores a before_time."""
        return await self._page(self._keys.payments(address), before_time, self._payments_limit)

    async def get_blocks(self, before_height: Optional[int] = None) -> list:
        """Bloques madurados por debajo de before_height."""
        return await self._page(self._keys.matured(), before_height, self._blocks_limit)

    async def get_user_blocks(self, address: str, before_height: Optional[int] = None) -> list:
        """Rondas completadas del participante por debajo de before_height."""
        return await self._page(self._keys.block_stats(address), before_height, self._worker_blocks_limit)

    async def get_top_miners(self) -> List[TopMinerDTO]:
        """
        Ranking por hashrate actual (desc), truncado a top_miners_limit.

        Cada fila lleva los bloques encontrados por el participante.
        """
        worker_keys = (await self._store.batch().keys(self._keys.workers_pattern()).execute())[0] or []
        if not worker_keys:
            return []

        batch = self._store.batch()
        for key in worker_keys:
            batch.hmget(key, ["blocksFound"])
        replies = await batch.execute()

        snapshot = self._snapshots.get()
        miners: List[TopMinerDTO] = []
        for key, fields in zip(worker_keys, replies):
            address = self._keys.id_of("workers", key)
            if not address:
                continue
            aggregate = snapshot.participant(address)
            found = (fields or [None])[0]
            miners.append(TopMinerDTO(
                miner=shorten_address(address),
                hashrate=aggregate.hashrate if aggregate else 0,
                totalblocks=int(found) if found and str(found).isdigit() else 0,
            ))

        miners.sort(key=lambda m: m.hashrate, reverse=True)
        return miners[: self._top_miners_limit]
