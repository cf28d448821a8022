"""
PoolPulse – Application DTO: History
=====================================
Data Transfer Objects para consultas de historial.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

ADDRESS_PREVIEW_LENGTH = 25


def shorten_address(address: str) -> str:
    """Dirección truncada para listados públicos."""
    return address[:ADDRESS_PREVIEW_LENGTH] + "???"


@dataclass
class TopMinerDTO:
    """Fila del ranking de mineros."""

    miner: str
    hashrate: int
    totalblocks: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "miner": self.miner,
            "hashrate": self.hashrate,
            "totalblocks": self.totalblocks,
        }
