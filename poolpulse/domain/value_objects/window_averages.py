"""
PoolPulse – Domain Value Object: WindowAverages
================================================
Promedios móviles 1h / 6h / 24h de una serie de charts.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WindowAverages:
    h1: float = 0.0
    h6: float = 0.0
    h24: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.h1, self.h6, self.h24)

    def to_dict(self, prefix: str = "hashrate") -> dict:
        return {
            f"{prefix}_1h": self.h1,
            f"{prefix}_6h": self.h6,
            f"{prefix}_24h": self.h24,
        }


ZERO_AVERAGES = WindowAverages()
