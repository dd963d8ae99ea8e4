"""
Per-request batch loaders.

Every batch function issues a single predicate fetch (two for subscription
sets: edges, then users) for all keys gathered in one tick. A key whose rows
break an invariant is returned as the exception instance, which the DataLoader
raises for that key alone.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID

from strawberry.dataloader import DataLoader

from ..store.base import (
    Collection,
    EntityStore,
    FieldIn,
    IntegrityViolation,
    MemberTypeRecord,
    PostRecord,
    ProfileRecord,
    UserRecord,
)
from .stitcher import Direction, load_linked_users

BatchFn = Callable[[EntityStore, list[Any]], Awaitable[list[Any]]]


async def _load_by_id(store: EntityStore, collection: Collection, keys: list[Any]) -> list[Any]:
    rows = await store.get_where(collection, FieldIn("id", keys))
    by_id = {row.id: row for row in rows}
    return [by_id.get(key) for key in keys]


async def _load_grouped(
    store: EntityStore, collection: Collection, field: str, keys: list[Any]
) -> list[list[Any]]:
    rows = await store.get_where(collection, FieldIn(field, keys))
    groups: dict[Any, list[Any]] = defaultdict(list)
    for row in rows:
        groups[getattr(row, field)].append(row)
    return [groups.get(key, []) for key in keys]


async def load_users(store: EntityStore, keys: list[UUID]) -> list[UserRecord | None]:
    """Batch load users by ID."""
    return await _load_by_id(store, Collection.USER, keys)


async def load_member_types(store: EntityStore, keys: list[str]) -> list[MemberTypeRecord | None]:
    """Batch load member types by ID."""
    return await _load_by_id(store, Collection.MEMBER_TYPE, keys)


async def load_posts_by_author(store: EntityStore, keys: list[UUID]) -> list[list[PostRecord]]:
    """Batch load posts for several authors."""
    return await _load_grouped(store, Collection.POST, "author_id", keys)


async def load_profiles_by_member_type(
    store: EntityStore, keys: list[str]
) -> list[list[ProfileRecord]]:
    """Batch load profiles on several member types."""
    return await _load_grouped(store, Collection.PROFILE, "member_type_id", keys)


async def load_profiles_by_user(
    store: EntityStore, keys: list[UUID]
) -> list[ProfileRecord | IntegrityViolation | None]:
    """Batch load the single profile of several users.

    A user with more than one profile gets an ``IntegrityViolation`` in its
    slot; the DataLoader fails only that key.
    """
    groups = await _load_grouped(store, Collection.PROFILE, "user_id", keys)
    results: list[ProfileRecord | IntegrityViolation | None] = []
    for key, profiles in zip(keys, groups, strict=True):
        if len(profiles) > 1:
            results.append(IntegrityViolation(f"User {key} has {len(profiles)} profiles"))
        else:
            results.append(profiles[0] if profiles else None)
    return results


async def load_subscribed_to(
    store: EntityStore, keys: list[UUID]
) -> list[list[UserRecord] | IntegrityViolation]:
    """Batch load the users each key subscribes to."""
    linked = await load_linked_users(store, keys, Direction.SUBSCRIBED_TO)
    return [linked[key] for key in keys]


async def load_subscribers(
    store: EntityStore, keys: list[UUID]
) -> list[list[UserRecord] | IntegrityViolation]:
    """Batch load the subscribers of each key."""
    linked = await load_linked_users(store, keys, Direction.SUBSCRIBERS)
    return [linked[key] for key in keys]


BATCH_LOADERS: dict[str, BatchFn] = {
    "user_by_id": load_users,
    "member_type_by_id": load_member_types,
    "posts_by_author": load_posts_by_author,
    "profiles_by_member_type": load_profiles_by_member_type,
    "profile_by_user": load_profiles_by_user,
    "subscribed_to_by_user": load_subscribed_to,
    "subscribers_by_user": load_subscribers,
}


def _bind(batch_fn: BatchFn, store: EntityStore) -> Callable[[list[Any]], Awaitable[list[Any]]]:
    async def load_fn(keys: list[Any]) -> list[Any]:
        return await batch_fn(store, keys)

    return load_fn


class Loaders:
    """DataLoaders for one request. Never shared across requests."""

    def __init__(self, store: EntityStore):
        self._loaders = {
            name: DataLoader(load_fn=_bind(batch_fn, store))
            for name, batch_fn in BATCH_LOADERS.items()
        }

    def get(self, name: str) -> DataLoader:
        return self._loaders[name]
