"""
PoolPulse – Domain Entity: Snapshot
====================================
Resultado inmutable de UN ciclo de agregación.

POR QUÉ FROZEN:
  El snapshot es una foto instantánea del pool. Una vez publicado no se
  modifica: el siguiente ciclo construye un Snapshot NUEVO y lo reemplaza
  entero. Un lector nunca observa un snapshot a medio actualizar.

  El mapa de participantes se expone como MappingProxyType (solo lectura)
  y se reconstruye por completo en cada ciclo: un participante que ya no
  aparece en los datos crudos simplemente no está en el mapa.

FORMATO DE SALIDA (to_dict):
  {
    "pool":      {...totales del pool...},
    "lastblock": {...} | None,
    "network":   {...} | None,
    "system":    {"machine": ..., "load": [...]} | None,
    "config":    {...eco estático...},
    "charts":    {...} | None,
    "miner":     {...}    # solo con participant_id
  }
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class ParticipantAggregate:
    """Valores derivados por participante (o sub-worker) en el ciclo actual."""

    hashrate: int = 0
    round_score: float = 0.0
    round_hashes: int = 0

    def to_dict(self) -> dict:
        return {
            "hashrate": self.hashrate,
            "roundScore": self.round_score,
            "roundHashes": self.round_hashes,
        }


@dataclass(frozen=True, slots=True)
class PoolTotals:
    """Totales del pool y resúmenes de bloques/pagos recientes."""

    miners: int = 0
    workers: int = 0
    hashrate: int = 0
    round_score: float = 0.0
    round_hashes: int = 0
    stats: Mapping[str, str] = field(default_factory=dict)
    blocks: tuple = ()
    total_blocks: int = 0
    total_diff: int = 0
    total_shares: int = 0
    payments: tuple = ()
    total_payments: int = 0
    total_miners_paid: int = 0
    last_block_found: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "stats": dict(self.stats),
            "blocks": list(self.blocks),
            "totalBlocks": self.total_blocks,
            "totalDiff": self.total_diff,
            "totalShares": self.total_shares,
            "payments": list(self.payments),
            "totalPayments": self.total_payments,
            "totalMinersPaid": self.total_miners_paid,
            "miners": self.miners,
            "workers": self.workers,
            "hashrate": self.hashrate,
            "roundScore": self.round_score,
            "roundHashes": self.round_hashes,
        }
        if self.last_block_found is not None:
            data["lastBlockFound"] = self.last_block_found
        return data


@dataclass(frozen=True, slots=True)
class NetworkState:
    """
    Estado de la red upstream.

    `method` indica qué llamada RPC lo produjo: "get_info" (forma rica,
    con contadores de conexiones) o "getlastblockheader" (solo
    dificultad y altura).
    """

    difficulty: int
    height: int
    method: str = "get_info"
    rpc_connections: Optional[int] = None
    in_connections: Optional[int] = None
    out_connections: Optional[int] = None
    start_time: Optional[int] = None
    status: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"difficulty": self.difficulty, "height": self.height}
        optional = {
            "rpcConnections": self.rpc_connections,
            "inConnections": self.in_connections,
            "outConnections": self.out_connections,
            "startTime": self.start_time,
            "status": self.status,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True, slots=True)
class LastBlock:
    difficulty: int
    height: int
    timestamp: int
    reward: int
    hash: str

    def to_dict(self) -> dict:
        return {
            "difficulty": self.difficulty,
            "height": self.height,
            "timestamp": self.timestamp,
            "reward": self.reward,
            "hash": self.hash,
        }


@dataclass(frozen=True, slots=True)
class HostLoad:
    machine: str
    load: tuple[float, float, float]

    def to_dict(self) -> dict:
        return {"machine": self.machine, "load": list(self.load)}


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Foto completa del pool publicada por ciclo."""

    pool: PoolTotals
    participants: Mapping[str, ParticipantAggregate]
    config: Mapping[str, Any] = field(default_factory=dict)
    candidates: tuple[tuple[str, int], ...] = ()
    network: Optional[NetworkState] = None
    lastblock: Optional[LastBlock] = None
    system: Optional[HostLoad] = None
    charts: Optional[Mapping[str, Any]] = None
    generated_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        # Congelar el mapa: los lectores no pueden mutarlo
        if not isinstance(self.participants, MappingProxyType):
            object.__setattr__(self, "participants", MappingProxyType(dict(self.participants)))

    def participant(self, participant_id: str | None) -> Optional[ParticipantAggregate]:
        if not participant_id:
            return None
        return self.participants.get(participant_id)

    def to_dict(self, participant_id: str | None = None, include_miner: bool = False) -> dict:
        """
        Serialización para API / broadcast.

        Con participant_id (o include_miner=True) se añade la clave "miner"
        con el agregado del participante, o {} si no tiene datos este ciclo.
        """
        data = {
            "pool": self.pool.to_dict(),
            "lastblock": self.lastblock.to_dict() if self.lastblock else None,
            "network": self.network.to_dict() if self.network else None,
            "system": self.system.to_dict() if self.system else None,
            "config": dict(self.config),
            "charts": dict(self.charts) if self.charts is not None else None,
        }
        if participant_id is not None or include_miner:
            aggregate = self.participant(participant_id)
            data["miner"] = aggregate.to_dict() if aggregate else {}
        return data
