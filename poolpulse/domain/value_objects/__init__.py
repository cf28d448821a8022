"""Domain value objects."""
from poolpulse.domain.value_objects.counter_entry import (
    RawCounterEntry,
    WORKER_DELIMITER,
    is_worker_id,
    owner_of,
    worker_name_of,
)
from poolpulse.domain.value_objects.chart_sample import ChartSample, parse_chart_series
from poolpulse.domain.value_objects.window_averages import WindowAverages, ZERO_AVERAGES
from poolpulse.domain.value_objects.block_record import BlockRecord

__all__ = [
    "RawCounterEntry",
    "WORKER_DELIMITER",
    "is_worker_id",
    "owner_of",
    "worker_name_of",
    "ChartSample",
    "parse_chart_series",
    "WindowAverages",
    "ZERO_AVERAGES",
    "BlockRecord",
]
