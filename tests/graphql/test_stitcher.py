"""
Tests for the relation stitcher.
"""

import pytest

from socialgraph.database.seed_data import seed_id
from socialgraph.graphql.stitcher import Direction, load_linked_users, stitch_subscriptions
from socialgraph.graphql.types.user import LEAF_LINKS
from socialgraph.store.base import (
    Collection,
    FieldEquals,
    FieldIn,
    OrphanedReferenceError,
    SelfSubscriptionError,
    SubscriptionRecord,
)


def _names(users):
    return {u.name for u in users}


class TestLoadLinkedUsers:
    @pytest.mark.asyncio
    async def test_single_key_uses_equality(self, scenario_store, scenario_ids, recorder):
        store = recorder(scenario_store)

        linked = await load_linked_users(store, [scenario_ids["A"]], Direction.SUBSCRIBED_TO)

        assert _names(linked[scenario_ids["A"]]) == {"B", "C"}
        edge_calls = store.calls_for("get_where", Collection.SUBSCRIPTION)
        assert edge_calls == [FieldEquals("subscriber_id", scenario_ids["A"])]

    @pytest.mark.asyncio
    async def test_many_keys_share_one_fetch(self, scenario_store, scenario_ids, recorder):
        store = recorder(scenario_store)
        keys = [scenario_ids["A"], scenario_ids["B"], scenario_ids["C"]]

        linked = await load_linked_users(store, keys, Direction.SUBSCRIBERS)

        assert _names(linked[scenario_ids["A"]]) == {"B"}
        assert _names(linked[scenario_ids["B"]]) == {"A"}
        assert _names(linked[scenario_ids["C"]]) == {"A"}
        assert len(store.calls_for("get_where", Collection.SUBSCRIPTION)) == 1
        assert len(store.calls_for("get_where", Collection.USER)) == 1
        assert isinstance(store.calls_for("get_where", Collection.USER)[0], FieldIn)

    @pytest.mark.asyncio
    async def test_no_keys_no_fetch(self, scenario_store, recorder):
        store = recorder(scenario_store)

        assert await load_linked_users(store, [], Direction.SUBSCRIBERS) == {}
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_no_edges_skips_user_fetch(self, scenario_store, scenario_ids, recorder):
        store = recorder(scenario_store)

        linked = await load_linked_users(store, [scenario_ids["C"]], Direction.SUBSCRIBED_TO)

        assert linked == {scenario_ids["C"]: []}
        assert store.calls_for("get_where", Collection.USER) == []


class TestStitchSubscriptions:
    @pytest.mark.asyncio
    async def test_scenario_sets(self, scenario_store, scenario_ids):
        links = await stitch_subscriptions(scenario_store, scenario_ids["A"])

        assert _names(links.user_subscribed_to) == {"B", "C"}
        assert _names(links.subscribed_to_user) == {"B"}

    @pytest.mark.asyncio
    async def test_followers_carry_focal_followees(self, scenario_store, scenario_ids):
        links = await stitch_subscriptions(scenario_store, scenario_ids["A"])

        (follower,) = links.subscribed_to_user
        assert follower.id == scenario_ids["B"]
        assert _names(follower.links.user_subscribed_to) == {"B", "C"}
        assert follower.links.subscribed_to_user == ()

    @pytest.mark.asyncio
    async def test_followees_carry_focal_followers(self, scenario_store, scenario_ids):
        links = await stitch_subscriptions(scenario_store, scenario_ids["A"])

        for followee in links.user_subscribed_to:
            assert _names(followee.links.subscribed_to_user) == {"B"}
            assert followee.links.user_subscribed_to == ()

    @pytest.mark.asyncio
    async def test_attachment_stops_after_one_hop(self, scenario_store, scenario_ids):
        links = await stitch_subscriptions(scenario_store, scenario_ids["A"])

        for followee in links.user_subscribed_to:
            for leaf in followee.links.subscribed_to_user:
                assert leaf.links is LEAF_LINKS

    @pytest.mark.asyncio
    async def test_attached_sets_are_shared(self, memory_store, sample_ids):
        links = await stitch_subscriptions(memory_store, sample_ids["alice"])

        first, second = links.subscribed_to_user
        assert first.links.user_subscribed_to is second.links.user_subscribed_to

    @pytest.mark.asyncio
    async def test_user_without_edges(self, memory_store):
        links = await stitch_subscriptions(memory_store, seed_id("user:nobody"))

        assert links.user_subscribed_to == ()
        assert links.subscribed_to_user == ()

    @pytest.mark.asyncio
    async def test_self_edge_raises(self, scenario_store, scenario_ids):
        user_id = scenario_ids["C"]
        scenario_store.add(
            Collection.SUBSCRIPTION, SubscriptionRecord(subscriber_id=user_id, author_id=user_id)
        )

        with pytest.raises(SelfSubscriptionError):
            await stitch_subscriptions(scenario_store, user_id)

    @pytest.mark.asyncio
    async def test_orphaned_edge_raises(self, scenario_store, scenario_ids):
        scenario_store.add(
            Collection.SUBSCRIPTION,
            SubscriptionRecord(subscriber_id=seed_id("ghost"), author_id=scenario_ids["C"]),
        )

        with pytest.raises(OrphanedReferenceError) as exc_info:
            await stitch_subscriptions(scenario_store, scenario_ids["C"])

        assert exc_info.value.extensions == {"code": "INTEGRITY_VIOLATION"}
