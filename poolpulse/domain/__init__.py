"""
PoolPulse – Domain Layer
=========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Snapshot, ParticipantAggregate, DetailView
- value_objects/: Objetos inmutables (RawCounterEntry, ChartSample, BlockRecord)
- services/: Cálculos puros (RateCalculator, promedios por ventana, bloques)
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (redis, aiohttp, FastAPI, etc.)
"""

from poolpulse.domain.entities.snapshot import Snapshot, ParticipantAggregate, PoolTotals
from poolpulse.domain.entities.detail_view import DetailView, DetailResult
from poolpulse.domain.value_objects.chart_sample import ChartSample
from poolpulse.domain.value_objects.counter_entry import RawCounterEntry

__all__ = [
    "Snapshot",
    "ParticipantAggregate",
    "PoolTotals",
    "DetailView",
    "DetailResult",
    "ChartSample",
    "RawCounterEntry",
]
