"""
Tests for BroadcastDispatcher: grouping, per-group payloads and
exactly-once delivery.
"""

import pytest

from poolpulse.domain.entities.snapshot import ParticipantAggregate, PoolTotals, Snapshot

from tests.conftest import seed_pool


def make_snapshot() -> Snapshot:
    return Snapshot(
        pool=PoolTotals(miners=2, hashrate=110),
        participants={
            "alice": ParticipantAggregate(hashrate=100, round_score=12.5, round_hashes=4000),
            "bob": ParticipantAggregate(hashrate=10),
        },
        config={"coin": "pool"},
    )


class TestLiveBroadcast:

    @pytest.mark.asyncio
    async def test_each_group_gets_its_own_miner_slice(self, dispatcher, live_registry):
        alice_a = live_registry.subscribe("alice")
        alice_b = live_registry.subscribe("alice")
        bob = live_registry.subscribe("bob")

        report = await dispatcher.broadcast(make_snapshot())

        alice_payload = await alice_a.wait(0.1)
        assert alice_payload["miner"]["hashrate"] == 100
        assert await alice_b.wait(0.1) == alice_payload
        assert (await bob.wait(0.1))["miner"]["hashrate"] == 10
        assert report.live_groups == 2
        assert report.live_delivered == 3

    @pytest.mark.asyncio
    async def test_anonymous_and_unknown_groups_get_empty_miner(self, dispatcher, live_registry):
        anonymous = live_registry.subscribe(None)
        unknown = live_registry.subscribe("nobody")

        await dispatcher.broadcast(make_snapshot())

        assert (await anonymous.wait(0.1))["miner"] == {}
        assert (await unknown.wait(0.1))["miner"] == {}

    @pytest.mark.asyncio
    async def test_registries_are_empty_afterwards(self, dispatcher, live_registry, detail_registry):
        live_registry.subscribe("alice")
        detail_registry.subscribe("ghost")

        await dispatcher.broadcast(make_snapshot())

        assert len(live_registry) == 0
        assert len(detail_registry) == 0

    @pytest.mark.asyncio
    async def test_broadcast_with_no_subscribers(self, dispatcher):
        report = await dispatcher.broadcast(make_snapshot())

        assert report.live_groups == 0
        assert report.detail_groups == 0


class TestDetailBroadcast:

    @pytest.mark.asyncio
    async def test_detail_groups_receive_detail_view(self, dispatcher, detail_registry, store, keys):
        seed_pool(store, keys)
        first = detail_registry.subscribe("alice")
        second = detail_registry.subscribe("alice")

        report = await dispatcher.broadcast(make_snapshot())

        payload = await first.wait(0.1)
        assert payload["stats"]["hashrate"] == 100
        assert payload["stats"]["balance"] == "10"
        assert await second.wait(0.1) == payload
        assert report.detail_groups == 1
        assert report.detail_delivered == 2

    @pytest.mark.asyncio
    async def test_missing_participant_gets_not_found(self, dispatcher, detail_registry):
        handle = detail_registry.subscribe("ghost")

        await dispatcher.broadcast(make_snapshot())

        assert await handle.wait(0.1) == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_failing_group_does_not_affect_others(self, dispatcher, detail_registry, store, keys):
        seed_pool(store, keys)
        store.fail_keys.add("workers:bob")
        alice = detail_registry.subscribe("alice")
        bob = detail_registry.subscribe("bob")

        await dispatcher.broadcast(make_snapshot())

        assert (await alice.wait(0.1))["stats"]["hashrate"] == 100
        assert await bob.wait(0.1) == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_handles_are_closed_after_delivery(self, dispatcher, detail_registry):
        handle = detail_registry.subscribe("ghost")

        await dispatcher.broadcast(make_snapshot())

        assert handle.done
        assert not handle.deliver({"late": True})
