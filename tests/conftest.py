"""Shared fixtures: in-memory collaborators wired into the real use cases."""

from __future__ import annotations

import pytest

from poolpulse.application.ports.store_keys import StoreKeys
from poolpulse.application.services.network_probe import NetworkProbe
from poolpulse.application.services.snapshot_holder import SnapshotHolder
from poolpulse.application.services.subscriber_registry import SubscriberRegistry
from poolpulse.application.use_cases.broadcast_usecase import BroadcastDispatcher
from poolpulse.application.use_cases.collect_stats_usecase import StatsCollector
from poolpulse.application.use_cases.history_query_usecase import HistoryQueryUseCase
from poolpulse.application.use_cases.miner_detail_usecase import MinerDetailUseCase

from tests.fakes import FakeDaemonRpc, FakeHostMetrics, InMemoryStatsStore

NOW = 1_700_000_000
WINDOW = 600

INFO_RESULT = {
    "difficulty": 250_000,
    "height": 1200,
    "rpc_connections_count": 2,
    "incoming_connections_count": 8,
    "outgoing_connections_count": 12,
    "start_time": NOW - 86400,
    "status": "OK",
}

HEADER_RESULT = {
    "block_header": {
        "difficulty": 240_000,
        "height": 1199,
        "timestamp": NOW - 30,
        "reward": 600_000_000_000,
        "hash": "abc123",
    }
}


def clock() -> float:
    return NOW


@pytest.fixture
def keys() -> StoreKeys:
    return StoreKeys("pool")


@pytest.fixture
def store() -> InMemoryStatsStore:
    return InMemoryStatsStore()


@pytest.fixture
def rpc() -> FakeDaemonRpc:
    fake = FakeDaemonRpc()
    fake.respond("get_info", INFO_RESULT)
    fake.respond("getlastblockheader", HEADER_RESULT)
    return fake


@pytest.fixture
def host() -> FakeHostMetrics:
    return FakeHostMetrics()


@pytest.fixture
def holder() -> SnapshotHolder:
    return SnapshotHolder(config={"coin": "pool"})


@pytest.fixture
def live_registry() -> SubscriberRegistry:
    return SubscriberRegistry("live")


@pytest.fixture
def detail_registry() -> SubscriberRegistry:
    return SubscriberRegistry("detail")


@pytest.fixture
def detail_use_case(store, keys, holder) -> MinerDetailUseCase:
    return MinerDetailUseCase(
        store=store,
        keys=keys,
        snapshots=holder,
        payments_limit=10,
        worker_blocks_limit=10,
        clock=clock,
    )


@pytest.fixture
def history_use_case(store, keys, holder) -> HistoryQueryUseCase:
    return HistoryQueryUseCase(
        store=store,
        keys=keys,
        snapshots=holder,
        payments_limit=2,
        blocks_limit=2,
        worker_blocks_limit=2,
        top_miners_limit=2,
    )


@pytest.fixture
def dispatcher(live_registry, detail_registry, detail_use_case) -> BroadcastDispatcher:
    return BroadcastDispatcher(live_registry, detail_registry, detail_use_case)


@pytest.fixture
def collector(store, keys, rpc, host, holder, dispatcher) -> StatsCollector:
    return StatsCollector(
        store=store,
        keys=keys,
        network=NetworkProbe(rpc),
        host_metrics=host,
        holder=holder,
        dispatcher=dispatcher,
        config={"coin": "pool"},
        hashrate_window=WINDOW,
        update_interval=0.01,
        blocks_limit=10,
        payments_limit=10,
        pool_charts=["hashrate"],
        blocks_chart_days=2,
        clock=clock,
    )


def seed_pool(store: InMemoryStatsStore, keys: StoreKeys) -> None:
    """A small but complete pool: alice with one rig, bob, one block of each kind."""
    store.zadd(keys.hashrate(), f"{60000}:alice", NOW - 10)
    store.zadd(keys.hashrate(), f"{30000}:alice~rig1", NOW - 20)
    store.zadd(keys.hashrate(), f"{6000}:bob", NOW - 30)
    store.hset(keys.pool_stats(), {"lastBlockFound": str((NOW - 3600) * 1000), "totalShares": "99"})
    store.zadd(keys.candidates(), f"cand1:{NOW - 100}:5000:4000", 1190)
    store.zadd(keys.matured(), f"mat1:{NOW - 3600}:7000:6000:0:500", 1100)
    store.zadd(keys.matured(), f"mat2:{NOW - 7200}:3000:2000:0:", 1090)
    store.hset(keys.round_scores(), {"alice": "12.5", "carol": "1.5"})
    store.hset(keys.round_hashes(), {"alice": "4000", "bob": "500"})
    store.zadd(keys.payments(), "tx1:1000:10:3", NOW - 500)
    store.zadd(keys.payments("alice"), "tx1:1000:10:3", NOW - 500)
    store.set_chart(keys.chart("hashrate"), [[NOW - 60, 150, 1]])
    store.hset(keys.worker("alice"), {"balance": "10", "paid": "1000", "blocksFound": "3"})
    store.hset(keys.worker("bob"), {"balance": "5", "paid": "0", "blocksFound": "1"})
