"""
PoolPulse – Subscriber Registry (long-poll one-shot)
=====================================================
Registro de conexiones en espera, clave "<participantId>:<subscriptionId>".
La agrupación usa el participantId guardado en cada Subscription, no la
clave, así que ids con ":" no se parten.

Existen DOS instancias independientes (feed en vivo del pool y detalle por
participante) con las mismas reglas y espacios de claves disjuntos.

ENTREGA ÚNICA:
  Cada Subscription envuelve un asyncio.Future de un solo uso. El
  dispatcher llama deliver() y luego close(); el handler HTTP espera con
  wait(timeout) y siempre hace unregister() al terminar.

ATOMICIDAD:
  Ningún método del registro hace await. En el event loop cooperativo
  register / unregister / drain no se pueden intercalar: drain()
  intercambia el dict completo, así que un registro concurrente cae en
  este drain o en el siguiente, nunca en ambos ni en ninguno.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Dict, List, Optional

from poolpulse.shared.logging.logger import get_logger

logger = get_logger("subscriber_registry")

KEY_SEPARATOR = ":"


class Subscription:
    """Handle de una conexión en espera: se entrega como mucho una vez."""

    __slots__ = ("key", "participant_id", "_future")

    def __init__(self, key: str, participant_id: str) -> None:
        self.key = key
        self.participant_id = participant_id
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def deliver(self, payload: Any) -> bool:
        """Entrega el payload. False si ya estaba entregada o cerrada."""
        if self._future.done():
            return False
        self._future.set_result(payload)
        return True

    def close(self) -> None:
        """Cierra sin payload (el que espera recibe None)."""
        if not self._future.done():
            self._future.set_result(None)

    async def wait(self, timeout: Optional[float] = None) -> Any:
        """
        Espera la entrega.

        Returns:
            El payload entregado, o None si vence el timeout o se cerró vacía.
        """
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except asyncio.TimeoutError:
            return None


class SubscriberRegistry:
    """Conjunto de Subscriptions pendientes, agrupables por participante."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: Dict[str, Subscription] = {}

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def subscribe(self, participant_id: Optional[str]) -> Subscription:
        """Crea y registra una Subscription con un subscriptionId único."""
        participant_id = participant_id or ""
        key = f"{participant_id}{KEY_SEPARATOR}{uuid.uuid4().hex}"
        handle = Subscription(key, participant_id)
        self.register(key, handle)
        return handle

    def register(self, key: str, handle: Subscription) -> None:
        self._entries[key] = handle
        logger.debug("[%s] registrada %s. Total: %d", self._name, key, len(self._entries))

    def unregister(self, key: str) -> None:
        """Idempotente: no falla si la clave ya no está."""
        self._entries.pop(key, None)

    def drain_grouped_by_participant(self) -> Dict[str, List[Subscription]]:
        """Vacía el registro y devuelve {participantId: [handles]}."""
        entries, self._entries = self._entries, {}
        groups: Dict[str, List[Subscription]] = {}
        for handle in entries.values():
            groups.setdefault(handle.participant_id, []).append(handle)
        return groups

    def close_all(self) -> int:
        """Cierra todas las pendientes sin payload (shutdown)."""
        closed = 0
        for handles in self.drain_grouped_by_participant().values():
            for handle in handles:
                handle.close()
                closed += 1
        if closed:
            logger.info("[%s] %d conexiones cerradas", self._name, closed)
        return closed
