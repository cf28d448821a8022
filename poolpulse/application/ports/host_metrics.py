"""
PoolPulse – Application Port: Host Metrics
===========================================
Identificador de plataforma y load averages del host (síncrono).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from poolpulse.domain.entities.snapshot import HostLoad


class IHostMetrics(ABC):

    @abstractmethod
    def read(self) -> HostLoad:
        """
        Lee plataforma y load averages (1, 5, 15 min).

        Raises:
            SourceUnavailableError: si la plataforma no expone load averages.
        """
        pass
