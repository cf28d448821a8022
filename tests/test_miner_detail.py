"""
Tests for MinerDetailUseCase: the staged detail pipeline, candidate
filtering and graceful degradation.
"""

import pytest
import pytest_asyncio

from poolpulse.domain.exceptions.domain_errors import ParticipantNotFoundError

from tests.conftest import NOW, seed_pool


@pytest_asyncio.fixture
async def seeded(collector, store, keys):
    """Seeded pool with two rigs for alice and one published snapshot."""
    seed_pool(store, keys)
    store.zadd(keys.hashrate(), "12000:alice~rig2", NOW - 5)
    store.hset(keys.unique_worker("alice", "rig1"), {"lastShare": NOW - 20, "hashes": 777})
    store.hset(keys.unique_worker("alice", "rig2"), {"lastShare": NOW - 5, "hashes": 10})
    store.set_chart(keys.worker_chart("alice", "rig1"), [[NOW - 100, 40, 1], [NOW - 5000, 60, 1]])
    store.set_chart(keys.participant_chart("alice"), [[NOW - 100, 90, 1]])
    store.zadd(keys.block_stats("alice"), f"{NOW - 4000}:6000:1", 1100)
    await collector.collect()
    store.executed.clear()
    return store


class TestDetailPipeline:

    @pytest.mark.asyncio
    async def test_unknown_participant_is_not_found_without_worker_fetches(self, detail_use_case, store):
        result = await detail_use_case.get_detail("ghost")

        assert result.not_found
        assert result.to_dict() == {"error": "Not found"}
        assert len(store.executed) == 1
        assert not any("unique_workers:ghost~" in key and "*" not in key for key in store.executed_keys())

    @pytest.mark.asyncio
    async def test_stats_merge_snapshot_rates_and_averages(self, detail_use_case, seeded):
        data = (await detail_use_case.get_detail("alice")).to_dict()

        stats = data["stats"]
        assert stats["balance"] == "10"
        assert stats["hashrate"] == 100
        assert stats["roundScore"] == 12.5
        assert stats["roundHashes"] == 4000
        assert stats["hashrate_1h"] == 90
        assert data["charts"]["hashrate"] == [[NOW - 100, 90, 1]]

    @pytest.mark.asyncio
    async def test_workers_breakdown(self, detail_use_case, seeded):
        workers = (await detail_use_case.get_detail("alice")).to_dict()["workers"]

        assert [w["name"] for w in workers] == ["rig1", "rig2"]
        rig1, rig2 = workers
        assert rig1["hashrate"] == 50
        assert rig1["lastShare"] == NOW - 20
        assert rig1["hashes"] == 777
        assert (rig1["hashrate_1h"], rig1["hashrate_6h"]) == (40, 50)
        assert rig2["hashrate"] == 20
        assert rig2["hashrate_24h"] == 0

    @pytest.mark.asyncio
    async def test_payments_blocks_and_payment_chart(self, detail_use_case, seeded):
        data = (await detail_use_case.get_detail("alice")).to_dict()

        assert data["payments"] == ["tx1:1000:10:3", NOW - 500]
        assert data["charts"]["payments"] == [[NOW - 500, 1000]]
        assert data["blocks"] == [f"{NOW - 4000}:6000:1", 1100]
        assert "candidates" not in data

    @pytest.mark.asyncio
    async def test_participant_without_workers(self, detail_use_case, seeded):
        data = (await detail_use_case.get_detail("bob")).to_dict()

        assert data["workers"] == []
        assert data["stats"]["hashrate"] == 10
        assert data["stats"]["hashrate_1h"] == 0

    @pytest.mark.asyncio
    async def test_worker_fetch_failure_degrades_that_worker(self, detail_use_case, seeded, keys):
        seeded.fail_keys.add(keys.unique_worker("alice", "rig1"))

        result = await detail_use_case.get_detail("alice")

        rig1 = result.to_dict()["workers"][0]
        assert not result.not_found
        assert rig1["name"] == "rig1"
        assert rig1["hashrate"] == 50
        assert rig1["hashes"] == 0

    @pytest.mark.asyncio
    async def test_base_fetch_failure_reports_not_found(self, detail_use_case, seeded):
        seeded.failing = True

        assert (await detail_use_case.get_detail("alice")).not_found

    @pytest.mark.asyncio
    async def test_base_stage_raises_not_found_for_missing_record(self, detail_use_case, store):
        with pytest.raises(ParticipantNotFoundError) as excinfo:
            await detail_use_case._fetch_base("ghost")

        assert excinfo.value.participant_id == "ghost"
        assert excinfo.value.code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_participant_exists(self, detail_use_case, seeded):
        assert await detail_use_case.participant_exists("alice")
        assert not await detail_use_case.participant_exists("ghost")
        assert not await detail_use_case.participant_exists("")


class TestCandidates:

    @pytest.mark.asyncio
    async def test_only_candidates_with_participant_work_are_kept(self, detail_use_case, seeded, keys):
        seeded.hset(keys.round_scores(1190), {"alice": "321"})
        candidates = [
            (f"cand1:{NOW - 100}:5000:4000", 1190),
            (f"cand0:{NOW - 900}:5000:3000", 1180),
        ]

        data = (await detail_use_case.get_detail("alice", candidates=candidates)).to_dict()

        assert data["candidates"] == [f"{NOW - 100}:4000:321", 1190]

    @pytest.mark.asyncio
    async def test_empty_candidate_list_gives_empty_result(self, detail_use_case, seeded):
        data = (await detail_use_case.get_detail("alice", candidates=[])).to_dict()

        assert data["candidates"] == []
