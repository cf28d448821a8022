"""
PoolPulse – Domain Service: Block Stats
========================================
Resúmenes derivados de los registros de bloques.

- summarize_blocks(): totalDiff / totalShares sobre bloques desbloqueados.
- count_blocks_per_period(): chart de bloques encontrados por día
  (o por hora si la ventana es de un solo día).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from poolpulse.domain.exceptions.domain_errors import MalformedRecordError
from poolpulse.domain.value_objects.block_record import BlockRecord

logger = logging.getLogger("poolpulse.block_stats")

DAY_FORMAT = "%Y-%m-%d"
HOUR_FORMAT = "%Y-%m-%d %H:00"


def parse_blocks(members: Iterable[str]) -> list[BlockRecord]:
    """Parsea miembros de bloques descartando los mal formados."""
    records = []
    for raw in members:
        try:
            records.append(BlockRecord.parse(raw))
        except MalformedRecordError as e:
            logger.debug("Bloque descartado: %s (%r)", e.message, raw)
    return records


def summarize_blocks(members: Iterable[str]) -> tuple[int, int]:
    """(total_diff, total_shares) de los bloques con recompensa registrada."""
    total_diff = 0
    total_shares = 0
    for block in parse_blocks(members):
        if block.is_unlocked:
            total_diff += block.difficulty
            total_shares += block.shares
    return total_diff, total_shares


def count_blocks_per_period(
    matured_members: Iterable[str],
    now: float,
    days: int,
) -> dict[str, int]:
    """
    Cuenta bloques desbloqueados por periodo desde now - days.

    - days == 1 → buckets por hora ("YYYY-MM-DD HH:00"), 25 buckets.
    - days > 1  → buckets por día ("YYYY-MM-DD") alineados a medianoche local.
    Los buckets sin bloques aparecen con 0.
    """
    if days <= 0:
        return {}

    begin = datetime.fromtimestamp(now) - timedelta(days=days)
    counts: dict[str, int] = {}

    if days == 1:
        fmt = HOUR_FORMAT
        for h in range(25):
            counts[(begin + timedelta(hours=h)).strftime(fmt)] = 0
    else:
        fmt = DAY_FORMAT
        begin = begin.replace(hour=0, minute=0, second=0, microsecond=0)
        for d in range(days + 1):
            counts[(begin + timedelta(days=d)).strftime(fmt)] = 0

    begin_ts = begin.timestamp()
    for block in parse_blocks(matured_members):
        if not block.is_unlocked or block.timestamp < begin_ts:
            continue
        bucket = datetime.fromtimestamp(block.timestamp).strftime(fmt)
        counts[bucket] = counts.get(bucket, 0) + 1
    return counts
