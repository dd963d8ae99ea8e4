"""
Tests for root collection and by-id queries
"""

import pytest

from socialgraph.database.seed_data import seed_id
from socialgraph.graphql.schema import execute_query
from socialgraph.store.base import Collection


@pytest.mark.asyncio
async def test_member_types(memory_store):
    result = await execute_query(
        "{ memberTypes { id discount postsLimitPerMonth } }", store=memory_store
    )

    assert result.errors == []
    assert result.data == {
        "memberTypes": [
            {"id": "basic", "discount": 2.3, "postsLimitPerMonth": 20},
            {"id": "business", "discount": 7.7, "postsLimitPerMonth": 100},
        ]
    }


@pytest.mark.asyncio
async def test_member_type_by_id_with_profiles(memory_store):
    result = await execute_query(
        "{ memberType(id: basic) { id profiles { user { name } } } }", store=memory_store
    )

    assert result.errors == []
    names = {p["user"]["name"] for p in result.data["memberType"]["profiles"]}
    assert names == {"Bob", "Carol"}


@pytest.mark.asyncio
async def test_posts_with_author(memory_store):
    result = await execute_query("{ posts { title authorId author { name } } }", store=memory_store)

    assert result.errors == []
    by_title = {p["title"]: p for p in result.data["posts"]}
    assert by_title["Notes"]["author"]["name"] == "Bob"
    assert by_title["Hello"]["authorId"] == str(seed_id("user:alice"))


@pytest.mark.asyncio
async def test_profiles_with_member_type(memory_store):
    result = await execute_query(
        "{ profiles { memberTypeId memberType { id } user { name } } }", store=memory_store
    )

    assert result.errors == []
    for profile in result.data["profiles"]:
        assert profile["memberType"]["id"] == profile["memberTypeId"]


@pytest.mark.asyncio
async def test_post_by_id(memory_store):
    post_id = seed_id("post:bob:1")

    result = await execute_query(
        "query Post($id: UUID!) { post(id: $id) { id title content } }",
        {"id": str(post_id)},
        store=memory_store,
    )

    assert result.errors == []
    assert result.data == {"post": {"id": str(post_id), "title": "Notes", "content": "Bob writes"}}


@pytest.mark.asyncio
async def test_missing_post_is_null_without_errors(memory_store):
    result = await execute_query(
        "query Post($id: UUID!) { post(id: $id) { id } }",
        {"id": str(seed_id("post:nobody"))},
        store=memory_store,
    )

    assert result.to_dict() == {"data": {"post": None}, "errors": []}


@pytest.mark.asyncio
async def test_missing_profile_is_null(memory_store):
    result = await execute_query(
        "query Profile($id: UUID!) { profile(id: $id) { id } }",
        {"id": str(seed_id("profile:dave"))},
        store=memory_store,
    )

    assert result.data == {"profile": None}
    assert result.errors == []


@pytest.mark.asyncio
async def test_user_without_profile(memory_store):
    result = await execute_query(
        "query User($id: UUID!) { user(id: $id) { name profile { id } } }",
        {"id": str(seed_id("user:dave"))},
        store=memory_store,
    )

    assert result.errors == []
    assert result.data == {"user": {"name": "Dave", "profile": None}}


@pytest.mark.asyncio
async def test_collection_uses_single_fetch(recording_store):
    await execute_query("{ users { id name } }", store=recording_store)

    assert recording_store.calls == [("get_all", Collection.USER, None)]
