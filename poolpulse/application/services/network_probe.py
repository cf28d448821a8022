"""
PoolPulse – Network Probe (RPC adaptativo)
===========================================
Obtiene el estado de la red y el último bloque desde el daemon.

DEGRADACIÓN ADAPTATIVA:
  modo "get_info"            → llama get_info (forma rica con conexiones)
      └─ error → getlastblockheader en el mismo ciclo
                 └─ ok → modo pasa a "getlastblockheader"
  modo "getlastblockheader"  → llama directo al fallback
      └─ error → se reintenta get_info en el mismo ciclo
                 └─ ok → modo vuelve a "get_info"

El método preferido nunca se abandona para siempre. Ninguna llamada lanza:
cualquier fallo se reporta como None y el campo queda ausente.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from poolpulse.application.ports.daemon_rpc import IDaemonRpc, RpcOutcome
from poolpulse.domain.entities.snapshot import LastBlock, NetworkState
from poolpulse.shared.logging.logger import get_logger

logger = get_logger("network_probe")

PREFERRED_METHOD = "get_info"
FALLBACK_METHOD = "getlastblockheader"


def _state_from_info(result: Dict[str, Any]) -> NetworkState:
    return NetworkState(
        difficulty=int(result["difficulty"]),
        height=int(result["height"]),
        method=PREFERRED_METHOD,
        rpc_connections=result.get("rpc_connections_count"),
        in_connections=result.get("incoming_connections_count"),
        out_connections=result.get("outgoing_connections_count"),
        start_time=result.get("start_time"),
        status=result.get("status"),
    )


def _state_from_header(result: Dict[str, Any]) -> NetworkState:
    header = result["block_header"]
    # El header es del último bloque: la red ya trabaja en el siguiente
    return NetworkState(
        difficulty=int(header["difficulty"]),
        height=int(header["height"]) + 1,
        method=FALLBACK_METHOD,
    )


class NetworkProbe:
    """Lecturas de red con degradación get_info → getlastblockheader."""

    def __init__(self, rpc: IDaemonRpc, use_first_vout: bool = False) -> None:
        self._rpc = rpc
        self._use_first_vout = use_first_vout
        self._mode = PREFERRED_METHOD

    @property
    def mode(self) -> str:
        return self._mode

    async def fetch_network(self) -> Optional[NetworkState]:
        if self._mode == PREFERRED_METHOD:
            state = await self._try_preferred()
            if state is not None:
                return state
            return await self._try_fallback()

        state = await self._try_fallback()
        if state is not None:
            return state
        logger.info("Reintentando %s tras fallo de %s", PREFERRED_METHOD, FALLBACK_METHOD)
        return await self._try_preferred()

    async def _try_preferred(self) -> Optional[NetworkState]:
        outcome = await self._rpc.call(PREFERRED_METHOD, {})
        state = self._parse(outcome, _state_from_info, PREFERRED_METHOD)
        if state is None:
            return None
        if self._mode != PREFERRED_METHOD:
            logger.info("RPC de red restaurado a %s", PREFERRED_METHOD)
        self._mode = PREFERRED_METHOD
        return state

    async def _try_fallback(self) -> Optional[NetworkState]:
        outcome = await self._rpc.call(FALLBACK_METHOD, {})
        state = self._parse(outcome, _state_from_header, FALLBACK_METHOD)
        if state is None:
            logger.error("Error obteniendo datos de red: %s", outcome.error or "respuesta inválida")
            return None
        if self._mode != FALLBACK_METHOD:
            logger.warning("%s no disponible, usando %s", PREFERRED_METHOD, FALLBACK_METHOD)
        self._mode = FALLBACK_METHOD
        return state

    @staticmethod
    def _parse(outcome: RpcOutcome, parser, method: str) -> Optional[NetworkState]:
        if not outcome.ok:
            logger.debug("%s falló: %s", method, outcome.error)
            return None
        try:
            return parser(outcome.result or {})
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("%s devolvió una respuesta mal formada: %s", method, e)
            return None

    async def fetch_last_block(self) -> Optional[LastBlock]:
        """
        Último bloque de la red.

        Con use_first_vout la recompensa se lee del primer vout de la
        coinbase (getblock por altura) en vez del header.
        """
        outcome = await self._rpc.call(FALLBACK_METHOD, {})
        if not outcome.ok:
            logger.error("Error obteniendo el último bloque: %s", outcome.error)
            return None
        try:
            header = outcome.result["block_header"]
            height = int(header["height"])
            reward = header.get("reward", 0)
            if self._use_first_vout:
                reward = await self._first_vout_reward(height)
                if reward is None:
                    return None
            return LastBlock(
                difficulty=int(header["difficulty"]),
                height=height,
                timestamp=int(header["timestamp"]),
                reward=int(reward),
                hash=str(header["hash"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Header de último bloque mal formado: %s", e)
            return None

    async def _first_vout_reward(self, height: int) -> Optional[int]:
        outcome = await self._rpc.call("getblock", {"height": height})
        if not outcome.ok:
            logger.error("Error obteniendo detalles del último bloque: %s", outcome.error)
            return None
        try:
            vout = json.loads(outcome.result["json"])["miner_tx"]["vout"]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Bloque %d sin coinbase legible: %s", height, e)
            return None
        if not vout:
            logger.error("La tx en altura %d no tiene vouts", height)
            return None
        return int(vout[0]["amount"])
