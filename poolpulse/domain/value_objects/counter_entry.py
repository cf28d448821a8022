"""
PoolPulse – Domain Value Object: RawCounterEntry
=================================================
Contador crudo de actividad tal como lo escribe el pool en el sorted-set
de hashrate: "<valor>:<participantId>".

SUB-WORKERS:
- Un participantId que contiene WORKER_DELIMITER ("~") identifica a un
  sub-worker: "<participante>~<nombre_worker>".
- Sin delimitador → actividad del participante de primer nivel.
"""

from __future__ import annotations

from dataclasses import dataclass

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError

WORKER_DELIMITER = "~"


def is_worker_id(participant_id: str) -> bool:
    """¿El id corresponde a un sub-worker?"""
    return WORKER_DELIMITER in participant_id


def owner_of(participant_id: str) -> str:
    """Participante dueño de un id (el propio id si no es sub-worker)."""
    return participant_id.split(WORKER_DELIMITER, 1)[0]


def worker_name_of(participant_id: str) -> str | None:
    """Nombre del sub-worker (sufijo tras el delimitador) o None."""
    if not is_worker_id(participant_id):
        return None
    return participant_id.split(WORKER_DELIMITER, 1)[1]


@dataclass(frozen=True, slots=True)
class RawCounterEntry:
    """Un registro "<valor>:<participantId>" ya parseado."""

    value: int
    participant_id: str

    @property
    def is_worker(self) -> bool:
        return is_worker_id(self.participant_id)

    @property
    def owner(self) -> str:
        return owner_of(self.participant_id)

    @classmethod
    def parse(cls, raw: str) -> "RawCounterEntry":
        """
        Parsea un miembro del sorted-set de contadores.

        Raises:
            MalformedRecordError: si falta el separador, el id está vacío
                o el valor no es entero.
        """
        # Campos extra tras el id se ignoran: "<valor>:<id>[:...]"
        fields = str(raw).split(":")
        if len(fields) < 2 or not fields[1]:
            raise MalformedRecordError("Contador sin participantId", raw=raw)
        try:
            return cls(value=int(fields[0]), participant_id=fields[1])
        except ValueError as e:
            raise MalformedRecordError(f"Valor de contador inválido: {fields[0]!r}", raw=raw) from e
