"""
Shared pytest fixtures and configuration for all tests.
"""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import MagicMock
from uuid import UUID

import pytest
import pytest_asyncio

from socialgraph.database.seed_data import build_sample_dataset, seed_id
from socialgraph.graphql.loaders import Loaders
from socialgraph.graphql.registry import REGISTRY
from socialgraph.store.base import (
    Collection,
    Dataset,
    EntityStore,
    MemberTypeRecord,
    Predicate,
    ProfileRecord,
    StoreUnavailableError,
    SubscriptionRecord,
    UserRecord,
)
from socialgraph.store.implementations.memory import InMemoryEntityStore


class RecordingStore(EntityStore):
    """Wraps a store and records every call as ``(method, collection, argument)``."""

    def __init__(self, inner: EntityStore):
        self.inner = inner
        self.calls: list[tuple[str, Collection, Any]] = []

    async def get_by_id(self, collection: Collection, id: Any) -> Any | None:
        self.calls.append(("get_by_id", collection, id))
        return await self.inner.get_by_id(collection, id)

    async def get_where(self, collection: Collection, predicate: Predicate) -> list[Any]:
        self.calls.append(("get_where", collection, predicate))
        return await self.inner.get_where(collection, predicate)

    async def get_all(self, collection: Collection) -> list[Any]:
        self.calls.append(("get_all", collection, None))
        return await self.inner.get_all(collection)

    def calls_for(self, method: str, collection: Collection) -> list[Any]:
        return [arg for m, c, arg in self.calls if m == method and c == collection]


class FailingStore(EntityStore):
    """Delegates to ``inner`` but fails every call touching ``failing``."""

    def __init__(self, inner: EntityStore, failing: Collection):
        self.inner = inner
        self.failing = failing

    def _check(self, collection: Collection) -> None:
        if collection == self.failing:
            raise StoreUnavailableError(f"Failed to fetch from '{collection.value}'")

    async def get_by_id(self, collection: Collection, id: Any) -> Any | None:
        self._check(collection)
        return await self.inner.get_by_id(collection, id)

    async def get_where(self, collection: Collection, predicate: Predicate) -> list[Any]:
        self._check(collection)
        return await self.inner.get_where(collection, predicate)

    async def get_all(self, collection: Collection) -> list[Any]:
        self._check(collection)
        return await self.inner.get_all(collection)


def build_scenario_dataset() -> Dataset:
    """A follows B and C; B follows A. Only A has a profile."""
    a, b, c = (
        UserRecord(id=seed_id(f"scenario:{name}"), name=name, balance=10.0)
        for name in ("A", "B", "C")
    )
    return Dataset(
        member_types=[MemberTypeRecord(id="basic", discount=2.3, posts_limit_per_month=20)],
        users=[a, b, c],
        profiles=[
            ProfileRecord(
                id=seed_id("scenario:profile:A"),
                is_male=True,
                year_of_birth=1999,
                user_id=a.id,
                member_type_id="basic",
            )
        ],
        subscriptions=[
            SubscriptionRecord(subscriber_id=a.id, author_id=b.id),
            SubscriptionRecord(subscriber_id=a.id, author_id=c.id),
            SubscriptionRecord(subscriber_id=b.id, author_id=a.id),
        ],
    )


@pytest.fixture
def sample_dataset() -> Dataset:
    return build_sample_dataset()


@pytest.fixture
def memory_store(sample_dataset: Dataset) -> InMemoryEntityStore:
    return InMemoryEntityStore(sample_dataset)


@pytest.fixture
def scenario_store() -> InMemoryEntityStore:
    return InMemoryEntityStore(build_scenario_dataset())


@pytest.fixture
def recording_store(memory_store: InMemoryEntityStore) -> RecordingStore:
    return RecordingStore(memory_store)


@pytest.fixture
def scenario_ids() -> dict[str, UUID]:
    return {name: seed_id(f"scenario:{name}") for name in ("A", "B", "C")}


@pytest.fixture
def sample_ids() -> dict[str, UUID]:
    return {name: seed_id(f"user:{name}") for name in ("alice", "bob", "carol", "dave")}


@pytest.fixture
def mock_info():
    """Create a mock Strawberry info object bound to a memory store."""

    def _make(store: EntityStore) -> MagicMock:
        info = MagicMock()
        info.context = {"store": store, "loaders": Loaders(store), "registry": REGISTRY}
        return info

    return _make


@pytest_asyncio.fixture
async def sqlite_session_factory(tmp_path) -> AsyncGenerator[Any, None]:
    """Session factory over a temporary SQLite file seeded with the sample dataset."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from socialgraph.database.connection import create_engine_for_url
    from socialgraph.database.seed_data import seed_database
    from socialgraph.dbmodels import Base

    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'socialgraph.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await seed_database(session)
        await session.commit()

    yield session_factory

    await engine.dispose()


@pytest.fixture
def recorder():
    """Wrap a store in a call-recording double."""
    return RecordingStore


@pytest.fixture
def failing():
    """Wrap a store so that one collection always fails."""
    return FailingStore
