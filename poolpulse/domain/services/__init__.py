"""Domain services - Pure business logic with no external dependencies."""
from poolpulse.domain.services.hashrate_window import (
    LOOKBACK_WINDOWS,
    average_windows,
    extract_average_hashrates,
)
from poolpulse.domain.services.rate_calculator import (
    PoolRates,
    RateCalculator,
    normalize_rate,
    round_half_up,
)
from poolpulse.domain.services.block_stats import (
    count_blocks_per_period,
    parse_blocks,
    summarize_blocks,
)

__all__ = [
    "LOOKBACK_WINDOWS",
    "average_windows",
    "extract_average_hashrates",
    "PoolRates",
    "RateCalculator",
    "normalize_rate",
    "round_half_up",
    "count_blocks_per_period",
    "parse_blocks",
    "summarize_blocks",
]
