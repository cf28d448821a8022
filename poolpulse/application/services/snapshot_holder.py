"""
PoolPulse – Current Snapshot Holder
====================================
Dueño único del Snapshot vigente.

El collector llama replace() con un Snapshot nuevo y completo; los
lectores llaman get(). La referencia se intercambia de una vez, así que
nadie observa un snapshot a medio construir.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from poolpulse.domain.entities.snapshot import Snapshot, PoolTotals


class SnapshotHolder:

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        # Snapshot vacío hasta el primer ciclo exitoso
        self._current = Snapshot(pool=PoolTotals(), participants={}, config=config or {})
        self._cycles = 0

    @property
    def cycles(self) -> int:
        """Snapshots publicados desde el arranque."""
        return self._cycles

    def get(self) -> Snapshot:
        return self._current

    def replace(self, snapshot: Snapshot) -> None:
        self._current = snapshot
        self._cycles += 1

    def for_participant(self, participant_id: Optional[str]) -> dict:
        """Snapshot serializado con la clave "miner" del participante."""
        return self._current.to_dict(participant_id, include_miner=True)
