"""
PoolPulse – Domain Value Object: BlockRecord
=============================================
Registro de bloque candidato / madurado guardado como miembro de sorted-set:

    "hash:timestamp:difficulty:shares[:orphaned:reward]"

score = altura del bloque.

Un bloque con campo `reward` presente (no vacío) está desbloqueado.
"""

from __future__ import annotations

from dataclasses import dataclass

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError


def _to_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True, slots=True)
class BlockRecord:
    hash: str
    timestamp: int
    difficulty: int
    shares: int
    orphaned: str | None = None
    reward: str | None = None

    @property
    def is_unlocked(self) -> bool:
        return bool(self.reward)

    @classmethod
    def parse(cls, raw: str) -> "BlockRecord":
        """
        Raises:
            MalformedRecordError: si el registro tiene menos de 4 campos.
        """
        parts = str(raw).split(":")
        if len(parts) < 4:
            raise MalformedRecordError("Registro de bloque incompleto", raw=raw)
        return cls(
            hash=parts[0],
            timestamp=_to_int(parts[1]),
            difficulty=_to_int(parts[2]),
            shares=_to_int(parts[3]),
            orphaned=parts[4] if len(parts) > 4 else None,
            reward=parts[5] if len(parts) > 5 else None,
        )
