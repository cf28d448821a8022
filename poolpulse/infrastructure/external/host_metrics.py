"""
Host Metrics (psutil).

Implementación de IHostMetrics: plataforma y load averages 1/5/15 min.
"""

from __future__ import annotations

import sys

import psutil

from poolpulse.application.ports.host_metrics import IHostMetrics
from poolpulse.domain.entities.snapshot import HostLoad
from poolpulse.domain.exceptions.domain_errors import SourceUnavailableError


class PsutilHostMetrics(IHostMetrics):

    def read(self) -> HostLoad:
        try:
            load = psutil.getloadavg()
        except (AttributeError, OSError) as e:
            raise SourceUnavailableError(f"Load average no disponible: {e}", source="host") from e
        return HostLoad(machine=sys.platform, load=tuple(float(x) for x in load))
