"""
Unit tests for the pure domain services.

- extract_average_hashrates / average_windows: 1h / 6h / 24h moving averages
- RateCalculator: counter accumulation, sub-worker classification, rounding
- block_stats: unlocked totals and blocks-per-period chart
"""

import json

import pytest

from poolpulse.domain.services.block_stats import count_blocks_per_period, summarize_blocks
from poolpulse.domain.services.hashrate_window import (
    average_windows,
    extract_average_hashrates,
)
from poolpulse.domain.services.rate_calculator import RateCalculator, normalize_rate, round_half_up
from poolpulse.domain.value_objects.chart_sample import ChartSample
from poolpulse.domain.value_objects.window_averages import ZERO_AVERAGES

NOW = 1_700_000_000


class TestWindowAverages:

    def test_mixed_ages_fall_into_expected_windows(self):
        """A 25h-old sample is excluded from every window."""
        series = json.dumps([[NOW - 1800, 10, 1], [NOW - 7200, 20, 1], [NOW - 90000, 999, 1]])

        averages = extract_average_hashrates(series, now=NOW)

        assert averages.as_tuple() == (10, 15, 15)

    @pytest.mark.parametrize("raw", [None, "", "[]", "not json", '{"a": 1}'])
    def test_absent_or_unparseable_series_yields_zero(self, raw):
        assert extract_average_hashrates(raw, now=NOW) == ZERO_AVERAGES

    def test_single_sample_equals_its_value(self):
        averages = extract_average_hashrates([[NOW - 5, 42, 1]], now=NOW)

        assert averages.as_tuple() == (42, 42, 42)

    def test_window_boundary_is_inclusive(self):
        averages = extract_average_hashrates([[NOW - 3600, 8, 1]], now=NOW)

        assert averages.h1 == 8

    def test_each_sample_weighs_one_regardless_of_sample_count(self):
        samples = [ChartSample(NOW - 10, 10, 5), ChartSample(NOW - 20, 20, 1)]

        assert average_windows(samples, NOW).h1 == 15

    def test_window_without_samples_is_zero_not_nan(self):
        averages = extract_average_hashrates([[NOW - 7200, 30, 1]], now=NOW)

        assert averages.h1 == 0
        assert averages.h6 == 30

    def test_malformed_items_are_skipped(self):
        averages = extract_average_hashrates([[NOW - 10, "x", 1], ["bad"], [NOW - 10, 6, 1]], now=NOW)

        assert averages.h1 == 6

    def test_serializes_with_prefix(self):
        data = extract_average_hashrates([[NOW, 4, 1]], now=NOW).to_dict("hashrate")

        assert data == {"hashrate_1h": 4, "hashrate_6h": 4, "hashrate_24h": 4}


class TestRateCalculator:

    def test_sub_worker_is_attributed_but_not_double_counted(self):
        rates = RateCalculator(60).compute(["100:alice", "50:alice~rig1"])

        assert rates.miners == 1
        assert rates.workers == 1
        assert rates.rates["alice"] == 2
        assert rates.hashrate == 2
        assert rates.rates["alice~rig1"] == 1

    def test_entries_for_same_id_are_summed_before_normalizing(self):
        rates = RateCalculator(60).compute(["30:bob", "30:bob"])

        assert rates.rates == {"bob": 1}
        assert rates.miners == 1

    def test_worker_counted_once_per_distinct_id(self):
        rates = RateCalculator(60).compute(["10:a~x", "10:a~x", "10:a~y"])

        assert rates.workers == 2
        assert rates.miners == 0
        assert rates.hashrate == 0

    def test_zero_window_never_divides(self):
        rates = RateCalculator(0).compute(["100:alice"])

        assert rates.rates["alice"] == 0
        assert rates.hashrate == 0

    def test_malformed_entries_are_dropped(self):
        rates = RateCalculator(60).compute(["abc:bob", "nocolon", "10:", "60:carol"])

        assert rates.rates == {"carol": 1}

    def test_rounds_half_up(self):
        assert RateCalculator(60).compute(["90:x"]).rates["x"] == 2
        assert round_half_up(2.5) == 3
        assert normalize_rate(0, 60) == 0

    def test_pool_rate_matches_top_level_counter_sum(self):
        entries = ["600:a", "1200:b", "300:b~r", "1800:c"]
        rates = RateCalculator(600).compute(entries)

        assert rates.hashrate * 600 == 600 + 1200 + 1800
        assert (rates.miners, rates.workers) == (3, 1)
        assert rates.rates["b~r"] == 1


class TestBlockStats:

    def test_only_blocks_with_reward_are_summarized(self):
        members = [
            "h1:100:7000:6000:0:500",
            "h2:100:3000:2000:0:",
            "h3:100:1000:900",
            "broken",
        ]

        assert summarize_blocks(members) == (7000, 6000)

    def test_blocks_per_day_counts_recent_unlocked_blocks(self):
        members = [
            f"h1:{NOW - 3600}:1:1:0:10",
            f"h2:{NOW - 3600}:1:1:0:",
            f"h3:{NOW - 10 * 86400}:1:1:0:10",
        ]

        counts = count_blocks_per_period(members, NOW, days=2)

        assert len(counts) == 3
        assert sum(counts.values()) == 1

    def test_single_day_uses_hour_buckets(self):
        counts = count_blocks_per_period([], NOW, days=1)

        assert len(counts) == 25
        assert all(key.endswith(":00") for key in counts)

    def test_non_positive_days_disables_chart(self):
        assert count_blocks_per_period([], NOW, days=0) == {}
