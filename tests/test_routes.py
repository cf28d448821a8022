"""
HTTP tests for the API router, wired to in-memory collaborators.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from poolpulse.domain.entities.snapshot import ParticipantAggregate, PoolTotals, Snapshot
from poolpulse.presentation.api.routes import init_routes, router

from tests.conftest import NOW, seed_pool


@pytest.fixture
def client(store, keys, holder, live_registry, detail_registry, detail_use_case, history_use_case):
    seed_pool(store, keys)
    holder.replace(Snapshot(
        pool=PoolTotals(miners=2, hashrate=110),
        participants={
            "alice": ParticipantAggregate(hashrate=100, round_score=12.5, round_hashes=4000),
            "alice~rig1": ParticipantAggregate(hashrate=50),
        },
        config={"coin": "pool"},
        candidates=((f"cand1:{NOW - 100}:5000:4000", 1190),),
    ))
    init_routes(
        snapshots=holder,
        live_registry=live_registry,
        detail_registry=detail_registry,
        detail_use_case=detail_use_case,
        history_use_case=history_use_case,
        long_poll_timeout=0.05,
    )
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


class TestStatsEndpoints:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "poolpulse", "cycles": 1}

    def test_stats_with_address(self, client):
        response = client.get("/stats", params={"address": "alice"})

        assert response.headers["cache-control"] == "no-cache"
        data = response.json()
        assert data["pool"]["hashrate"] == 110
        assert data["miner"]["roundScore"] == 12.5

    def test_live_stats_times_out_with_current_state(self, client, live_registry):
        data = client.get("/live_stats", params={"address": "alice"}).json()

        assert data["miner"]["hashrate"] == 100
        assert len(live_registry) == 0


class TestAddressEndpoint:

    def test_missing_address(self, client):
        assert client.get("/stats_address").json() == {"error": "Not found"}

    def test_unknown_address(self, client):
        assert client.get("/stats_address", params={"address": "ghost"}).json() == {"error": "Not found"}

    def test_detail_includes_candidates(self, client, store, keys):
        store.hset(keys.round_scores(1190), {"alice": "55"})

        data = client.get("/stats_address", params={"address": "alice"}).json()

        assert data["stats"]["hashrate"] == 100
        assert data["candidates"] == [f"{NOW - 100}:4000:55", 1190]

    def test_longpoll_unknown_address_returns_immediately(self, client, detail_registry):
        response = client.get("/stats_address", params={"address": "ghost", "longpoll": "true"})

        assert response.json() == {"error": "Not found"}
        assert len(detail_registry) == 0

    def test_longpoll_timeout_returns_fresh_detail(self, client, detail_registry):
        data = client.get("/stats_address", params={"address": "alice", "longpoll": "true"}).json()

        assert data["stats"]["balance"] == "10"
        assert "candidates" not in data
        assert len(detail_registry) == 0


class TestHistoryEndpoints:

    def test_payments(self, client):
        assert client.get("/get_payments").json() == ["tx1:1000:10:3", NOW - 500]

    def test_payments_store_failure(self, client, store):
        store.failing = True

        assert client.get("/get_payments").json() == {"error": "Query failed"}

    def test_blocks_with_cursor(self, client):
        data = client.get("/get_blocks", params={"height": 1100}).json()

        assert data == [f"mat2:{NOW - 7200}:3000:2000:0:", 1090]

    def test_user_blocks_requires_address(self, client):
        assert client.get("/get_blocks_user").json() == {"error": "Query failed"}

    def test_top_miners(self, client):
        data = client.get("/get_top25miners").json()

        assert data[0] == {"miner": "alice???", "hashrate": 100, "totalblocks": 3}

    def test_top_miners_store_failure(self, client, store):
        store.failing = True

        assert client.get("/get_top25miners").json() == {"error": "Error collecting top miners stats"}
