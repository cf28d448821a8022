"""
PoolPulse – Broadcast Dispatcher
=================================
Reparte cada Snapshot nuevo a las conexiones en espera.

FLUJO POR CICLO:
  StatsCollector ──(snapshot)──▸ BroadcastDispatcher.broadcast()
       │
       ├─ live registry   → drain agrupado → snapshot + "miner" del grupo
       └─ detail registry → drain agrupado → MinerDetailUseCase por grupo
                                              (grupos en paralelo)

Cada handle recibe exactamente una entrega y luego se cierra.
Un grupo que falla no afecta a los demás.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Iterable

from poolpulse.application.services.subscriber_registry import SubscriberRegistry, Subscription
from poolpulse.application.use_cases.miner_detail_usecase import MinerDetailUseCase
from poolpulse.domain.entities.detail_view import NOT_FOUND_PAYLOAD
from poolpulse.domain.entities.snapshot import Snapshot
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("broadcast")


@dataclass
class BroadcastReport:
    """Conteo de entregas de un broadcast."""
    live_groups: int = 0
    live_delivered: int = 0
    detail_groups: int = 0
    detail_delivered: int = 0


class BroadcastDispatcher:

    def __init__(
        self,
        live_registry: SubscriberRegistry,
        detail_registry: SubscriberRegistry,
        detail_use_case: MinerDetailUseCase,
    ) -> None:
        self._live = live_registry
        self._detail = detail_registry
        self._detail_use_case = detail_use_case

    async def broadcast(self, snapshot: Snapshot) -> BroadcastReport:
        live_groups = self._live.drain_grouped_by_participant()
        detail_groups = self._detail.drain_grouped_by_participant()
        report = BroadcastReport(live_groups=len(live_groups), detail_groups=len(detail_groups))

        logger.info(
            "Broadcast a %d visitantes y %d consultas de dirección",
            sum(len(h) for h in live_groups.values()),
            sum(len(h) for h in detail_groups.values()),
        )

        for participant_id, handles in live_groups.items():
            payload = snapshot.to_dict(participant_id or None, include_miner=True)
            report.live_delivered += self._deliver(payload, handles)

        if detail_groups:
            delivered = await asyncio.gather(*(
                self._broadcast_detail(participant_id, handles, snapshot)
                for participant_id, handles in detail_groups.items()
            ))
            report.detail_delivered = sum(delivered)

        return report

    async def _broadcast_detail(
        self,
        participant_id: str,
        handles: list[Subscription],
        snapshot: Snapshot,
    ) -> int:
        try:
            result = await self._detail_use_case.get_detail(participant_id, snapshot=snapshot)
            payload = result.to_dict()
        except Exception:
            logger.exception("Error armando detalle de %s", participant_id)
            payload = dict(NOT_FOUND_PAYLOAD)
        return self._deliver(payload, handles)

    @staticmethod
    def _deliver(payload: Any, handles: Iterable[Subscription]) -> int:
        delivered = 0
        for handle in handles:
            if handle.deliver(payload):
                delivered += 1
            handle.close()
        return delivered
