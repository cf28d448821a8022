"""
PoolPulse – Domain Entity: DetailView
======================================
Vista detallada de UN participante, compuesta bajo demanda.

Se construye fresca en cada petición (o en cada broadcast del registro
de detalle) y nunca se cachea más allá de esa petición.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from poolpulse.domain.value_objects.window_averages import WindowAverages, ZERO_AVERAGES

NOT_FOUND_PAYLOAD = {"error": "Not found"}


@dataclass(slots=True)
class WorkerDetail:
    """Desglose de un sub-worker del participante."""

    name: str
    hashrate: int = 0
    last_share: int = 0
    hashes: int = 0
    averages: WindowAverages = ZERO_AVERAGES

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "hashrate": self.hashrate,
            "lastShare": self.last_share,
            "hashes": self.hashes,
        }
        data.update(self.averages.to_dict("hashrate"))
        return data


@dataclass(slots=True)
class DetailView:
    """Detalle completo: contadores base, pagos, rondas, workers y charts."""

    participant_id: str
    stats: dict[str, Any]
    payments: list = field(default_factory=list)
    blocks: list = field(default_factory=list)
    workers: list[WorkerDetail] = field(default_factory=list)
    charts: dict[str, Any] = field(default_factory=dict)
    candidates: Optional[list] = None

    def to_dict(self) -> dict:
        data = {
            "stats": dict(self.stats),
            "payments": list(self.payments),
            "charts": dict(self.charts),
            "workers": [w.to_dict() for w in self.workers],
            "blocks": list(self.blocks),
        }
        if self.candidates is not None:
            data["candidates"] = list(self.candidates)
        return data


@dataclass(frozen=True, slots=True)
class DetailResult:
    """
    Resultado explícito de DetailAssembler: vista encontrada o NotFound.

    NotFound NUNCA se lanza como excepción hacia el llamador.
    """

    participant_id: str
    view: Optional[DetailView] = None

    @property
    def not_found(self) -> bool:
        return self.view is None

    @classmethod
    def missing(cls, participant_id: str) -> "DetailResult":
        return cls(participant_id=participant_id, view=None)

    def to_dict(self) -> dict:
        if self.view is None:
            return dict(NOT_FOUND_PAYLOAD)
        return self.view.to_dict()
