"""
Reusable seed data functions for database initialization.

The sample dataset uses uuid5-derived ids so that seeding is repeatable and
the same rows can be loaded into the in-memory store.
"""

from __future__ import annotations

from uuid import NAMESPACE_URL, UUID, uuid5

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import MemberTypes, Posts, Profiles, SubscribersOnAuthors, Users
from ..logging import get_logger
from ..store.base import (
    Dataset,
    MemberTypeRecord,
    PostRecord,
    ProfileRecord,
    SubscriptionRecord,
    UserRecord,
)

logger = get_logger(__name__)

SEED_NAMESPACE = uuid5(NAMESPACE_URL, "https://socialgraph.local/seed")


def seed_id(name: str) -> UUID:
    """Deterministic id for a named sample row."""
    return uuid5(SEED_NAMESPACE, name)


def build_sample_dataset() -> Dataset:
    """Build the sample dataset: member types, users, profiles, posts, subscriptions."""
    member_types = [
        MemberTypeRecord(id="basic", discount=2.3, posts_limit_per_month=20),
        MemberTypeRecord(id="business", discount=7.7, posts_limit_per_month=100),
    ]

    names = ["alice", "bob", "carol", "dave"]
    users = [
        UserRecord(id=seed_id(f"user:{name}"), name=name.capitalize(), balance=balance)
        for name, balance in zip(names, [120.5, 33.0, -4.25, 0.0], strict=True)
    ]
    alice, bob, carol, dave = users

    profiles = [
        ProfileRecord(
            id=seed_id("profile:alice"),
            is_male=False,
            year_of_birth=1990,
            user_id=alice.id,
            member_type_id="business",
        ),
        ProfileRecord(
            id=seed_id("profile:bob"),
            is_male=True,
            year_of_birth=1985,
            user_id=bob.id,
            member_type_id="basic",
        ),
        ProfileRecord(
            id=seed_id("profile:carol"),
            is_male=False,
            year_of_birth=2001,
            user_id=carol.id,
            member_type_id="basic",
        ),
    ]

    posts = [
        PostRecord(
            id=seed_id("post:alice:1"),
            title="Hello",
            content="First post",
            author_id=alice.id,
        ),
        PostRecord(
            id=seed_id("post:alice:2"),
            title="Follow-up",
            content="Second post",
            author_id=alice.id,
        ),
        PostRecord(
            id=seed_id("post:bob:1"),
            title="Notes",
            content="Bob writes",
            author_id=bob.id,
        ),
    ]

    # alice follows bob and carol; bob follows alice; dave follows alice
    subscriptions = [
        SubscriptionRecord(subscriber_id=alice.id, author_id=bob.id),
        SubscriptionRecord(subscriber_id=alice.id, author_id=carol.id),
        SubscriptionRecord(subscriber_id=bob.id, author_id=alice.id),
        SubscriptionRecord(subscriber_id=dave.id, author_id=alice.id),
    ]

    return Dataset(
        member_types=member_types,
        users=users,
        posts=posts,
        profiles=profiles,
        subscriptions=subscriptions,
    )


async def seed_database(db: AsyncSession, dataset: Dataset | None = None) -> dict[str, int]:
    """
    Insert every row of ``dataset`` that is not already present.

    Rows are written parents first so foreign keys resolve. Existing rows are
    left untouched.

    Returns:
        Count of inserted rows per table
    """
    dataset = dataset or build_sample_dataset()
    inserted: dict[str, int] = {}

    async def insert_missing(model, records, to_row) -> None:
        count = 0
        for record in records:
            if await db.get(model, _primary_key(record)) is None:
                db.add(to_row(record))
                count += 1
        await db.flush()
        inserted[model.__tablename__] = count

    await insert_missing(
        MemberTypes,
        dataset.member_types,
        lambda r: MemberTypes(
            id=r.id, discount=r.discount, posts_limit_per_month=r.posts_limit_per_month
        ),
    )
    await insert_missing(
        Users, dataset.users, lambda r: Users(id=r.id, name=r.name, balance=r.balance)
    )
    await insert_missing(
        Profiles,
        dataset.profiles,
        lambda r: Profiles(
            id=r.id,
            is_male=r.is_male,
            year_of_birth=r.year_of_birth,
            user_id=r.user_id,
            member_type_id=r.member_type_id,
        ),
    )
    await insert_missing(
        Posts,
        dataset.posts,
        lambda r: Posts(id=r.id, title=r.title, content=r.content, author_id=r.author_id),
    )
    await insert_missing(
        SubscribersOnAuthors,
        dataset.subscriptions,
        lambda r: SubscribersOnAuthors(subscriber_id=r.subscriber_id, author_id=r.author_id),
    )

    logger.info("Seed data applied", **inserted)
    return inserted


def _primary_key(record):
    if isinstance(record, SubscriptionRecord):
        return (record.subscriber_id, record.author_id)
    return record.id


async def count_rows(db: AsyncSession) -> dict[str, int]:
    """Row counts per table, for CLI reporting."""
    counts = {}
    for model in (MemberTypes, Users, Profiles, Posts, SubscribersOnAuthors):
        counts[model.__tablename__] = await db.scalar(select(func.count()).select_from(model))
    return counts
