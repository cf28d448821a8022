"""
PoolPulse – Domain Service: Rate Calculator
============================================
Deriva hashrate por participante y totales del pool a partir de los
contadores crudos "<valor>:<participantId>" dentro de la ventana.

REGLAS:
  1. Los contadores del mismo id se SUMAN antes de normalizar.
  2. rate[id] = round(suma[id] / ventana_seg)   (redondeo half-up)
  3. Un id con "~" es sub-worker:
       - incrementa workers (una vez por id distinto)
       - NO cuenta en miners
       - su suma NO entra en el hashrate agregado del pool
       - conserva su propia entrada en el mapa de rates, que el detalle
         del participante dueño usa para el desglose por worker
  4. Un id sin "~" es participante de primer nivel:
       - incrementa miners, su suma entra en el hashrate del pool.
  5. ventana <= 0 o suma 0 → rate 0 (nunca NaN ni división por cero).

Registros mal formados se descartan (MalformedRecord → ausente).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError
from poolpulse.domain.value_objects.counter_entry import RawCounterEntry, is_worker_id

logger = logging.getLogger("poolpulse.rate_calculator")


def round_half_up(value: float) -> int:
    """Redondeo aritmético (2.5 → 3), no el bancario de round()."""
    return int(math.floor(value + 0.5))


def normalize_rate(total: float, window_seconds: float) -> int:
    if window_seconds <= 0 or not total:
        return 0
    return round_half_up(total / window_seconds)


@dataclass(frozen=True, slots=True)
class PoolRates:
    """Salida del cálculo: totales del pool + rate por id."""

    miners: int = 0
    workers: int = 0
    hashrate: int = 0
    rates: dict[str, int] = field(default_factory=dict)


class RateCalculator:
    """
    Calculadora de hashrate por ventana.

    Sin estado ni dependencias externas: compute() es una función pura
    sobre la lista de contadores del ciclo.
    """

    def __init__(self, window_seconds: float) -> None:
        self._window = window_seconds

    @property
    def window_seconds(self) -> float:
        return self._window

    @staticmethod
    def sum_counters(raw_entries: Iterable[str]) -> dict[str, int]:
        """Acumula por id (orden de primera aparición preservado)."""
        sums: dict[str, int] = {}
        for raw in raw_entries:
            try:
                entry = RawCounterEntry.parse(raw)
            except MalformedRecordError as e:
                logger.debug("Contador descartado: %s (%r)", e.message, raw)
                continue
            sums[entry.participant_id] = sums.get(entry.participant_id, 0) + entry.value
        return sums

    def compute(self, raw_entries: Iterable[str]) -> PoolRates:
        sums = self.sum_counters(raw_entries)

        miners = 0
        workers = 0
        top_level_total = 0
        rates: dict[str, int] = {}

        for participant_id, total in sums.items():
            if is_worker_id(participant_id):
                workers += 1
            else:
                miners += 1
                top_level_total += total
            rates[participant_id] = normalize_rate(total, self._window)

        return PoolRates(
            miners=miners,
            workers=workers,
            hashrate=normalize_rate(top_level_total, self._window),
            rates=rates,
        )
