"""
PoolPulse – Domain Service: Hashrate Window Averager
=====================================================
Promedios móviles 1h / 6h / 24h sobre una serie de charts.

ALGORITMO (una pasada O(n)):
  Para cada muestra, edad = now - timestamp.
  Se suma a cada ventana cuyo look-back >= edad:
      sum[w] += valor_promedio_de_la_muestra
      count[w] += 1
  promedio[w] = sum[w] / count[w]   (count 0 → 0, NUNCA división por cero)

PONDERACIÓN:
  Cada muestra pesa 1, no su sampleCount. La serie upstream ya guarda
  valores parcialmente promediados y este cálculo debe producir los
  mismos números que los consumidores existentes esperan.

Función pura: no depende de reloj global (recibe `now`), ni de I/O.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError
from poolpulse.domain.value_objects.chart_sample import ChartSample, parse_chart_series
from poolpulse.domain.value_objects.window_averages import WindowAverages, ZERO_AVERAGES

logger = logging.getLogger("poolpulse.hashrate_window")

# Look-back de cada ventana en segundos: 1h, 6h, 24h
LOOKBACK_WINDOWS: tuple[int, int, int] = (1 * 60 * 60, 6 * 60 * 60, 24 * 60 * 60)


def average_windows(samples: Iterable[ChartSample], now: float) -> WindowAverages:
    """Promedios 1h/6h/24h de muestras ya parseadas."""
    sums = [0.0, 0.0, 0.0]
    counts = [0, 0, 0]

    for sample in samples:
        age = now - sample.timestamp
        for i, lookback in enumerate(LOOKBACK_WINDOWS):
            if age <= lookback:
                sums[i] += sample.value
                counts[i] += 1

    averages = [s / c if c else 0.0 for s, c in zip(sums, counts)]
    return WindowAverages(*averages)


def extract_average_hashrates(
    chart_data: str | bytes | list | None,
    now: float | None = None,
) -> WindowAverages:
    """
    Promedios 1h/6h/24h de una serie almacenada (JSON o lista).

    Entrada ausente o imposible de parsear → los tres promedios en 0.
    """
    if now is None:
        now = int(time.time())
    try:
        samples = parse_chart_series(chart_data)
    except MalformedRecordError as e:
        logger.debug("Serie de chart ignorada: %s", e.message)
        return ZERO_AVERAGES
    if not samples:
        return ZERO_AVERAGES
    return average_windows(samples, now)
