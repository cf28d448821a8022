"""
PoolPulse – Logging
====================
Un único handler a stdout con formato "fecha | nivel | logger | mensaje".
Cada componente obtiene su logger con get_logger("<componente>"), que
queda bajo el namespace "poolpulse." y hereda el nivel configurado.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Clientes que loguean cada request / conexión
QUIET_LOGGERS = ("uvicorn.access", "aiohttp.access", "aiohttp.client", "redis")


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configura el root logger al arranque; llamadas repetidas solo cambian el nivel."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"poolpulse.{name}")
