"""
PoolPulse – Domain Value Object: ChartSample
=============================================
Una muestra de una serie de charts: (timestamp, valor_promedio, n_muestras).

Las series se guardan en el store como JSON:
    [[timestamp, averageValue, sampleCount], ...]

El productor solo hace append; aquí solo se leen y se pliegan.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, Sequence

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError


@dataclass(frozen=True, slots=True)
class ChartSample:
    """Muestra inmutable de una serie temporal."""

    timestamp: int
    value: float
    count: int = 1

    def to_list(self) -> list:
        """Formato de serialización del store: [ts, valor, n]."""
        return [self.timestamp, self.value, self.count]


def _coerce(item: object) -> ChartSample | None:
    if not isinstance(item, Sequence) or isinstance(item, (str, bytes)) or len(item) < 2:
        return None
    try:
        count = int(item[2]) if len(item) > 2 and item[2] is not None else 1
        return ChartSample(timestamp=int(item[0]), value=float(item[1]), count=count)
    except (TypeError, ValueError):
        return None


def parse_chart_series(raw: str | bytes | Iterable | None) -> list[ChartSample]:
    """
    Convierte una serie almacenada en lista de ChartSample.

    - None / "" → lista vacía.
    - Muestras individuales mal formadas se descartan.

    Raises:
        MalformedRecordError: si el JSON no se puede decodificar o no es una lista.
    """
    if raw is None or raw == "" or raw == b"":
        return []
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedRecordError("Serie de chart no es JSON válido", raw=raw) from e
    else:
        data = raw
    if not isinstance(data, list):
        raise MalformedRecordError("Serie de chart no es una lista", raw=raw)

    samples = []
    for item in data:
        sample = _coerce(item)
        if sample is not None:
            samples.append(sample)
    return samples
