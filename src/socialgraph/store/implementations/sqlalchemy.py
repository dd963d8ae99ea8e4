"""SQLAlchemy-backed entity store."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...dbmodels import Base, MemberTypes, Posts, Profiles, SubscribersOnAuthors, Users
from ...logging import get_logger
from ..base import (
    Collection,
    EntityStore,
    FieldEquals,
    MemberTypeRecord,
    PostRecord,
    Predicate,
    ProfileRecord,
    StoreUnavailableError,
    SubscriptionRecord,
    UserRecord,
    check_predicate,
)

logger = get_logger(__name__)

MODELS: dict[Collection, type[Base]] = {
    Collection.MEMBER_TYPE: MemberTypes,
    Collection.POST: Posts,
    Collection.PROFILE: Profiles,
    Collection.USER: Users,
    Collection.SUBSCRIPTION: SubscribersOnAuthors,
}


def to_record(collection: Collection, row: Any) -> Any:
    """Convert an ORM row to the collection's immutable record."""
    if collection is Collection.MEMBER_TYPE:
        return MemberTypeRecord(
            id=row.id,
            discount=float(row.discount),
            posts_limit_per_month=row.posts_limit_per_month,
        )
    if collection is Collection.USER:
        return UserRecord(id=row.id, name=row.name, balance=float(row.balance))
    if collection is Collection.POST:
        return PostRecord(
            id=row.id, title=row.title, content=row.content, author_id=row.author_id
        )
    if collection is Collection.PROFILE:
        return ProfileRecord(
            id=row.id,
            is_male=row.is_male,
            year_of_birth=row.year_of_birth,
            user_id=row.user_id,
            member_type_id=row.member_type_id,
        )
    return SubscriptionRecord(subscriber_id=row.subscriber_id, author_id=row.author_id)


class SQLAlchemyEntityStore(EntityStore):
    """Entity store reading through an async SQLAlchemy session factory.

    Each call opens its own short-lived session; rows are converted to records
    before the session closes.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _fetch(self, collection: Collection, stmt: Any) -> list[Any]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return [to_record(collection, row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Entity store fetch failed", collection=collection.value, error=str(e))
            raise StoreUnavailableError(
                f"Failed to fetch from '{collection.value}': {type(e).__name__}"
            ) from e

    async def get_by_id(self, collection: Collection, id: Any) -> Any | None:
        model = MODELS[collection]
        if collection is Collection.SUBSCRIPTION:
            subscriber_id, author_id = id
            stmt = select(model).where(
                SubscribersOnAuthors.subscriber_id == subscriber_id,
                SubscribersOnAuthors.author_id == author_id,
            )
        else:
            stmt = select(model).where(model.id == id)  # type: ignore[attr-defined]

        logger.debug("get_by_id", collection=collection.value, id=str(id))
        records = await self._fetch(collection, stmt)
        return records[0] if records else None

    async def get_where(self, collection: Collection, predicate: Predicate) -> list[Any]:
        check_predicate(collection, predicate)
        model = MODELS[collection]
        column = getattr(model, predicate.field)

        if isinstance(predicate, FieldEquals):
            condition = column == predicate.value
        else:
            if not predicate.values:
                return []
            condition = column.in_(predicate.values)

        logger.debug("get_where", collection=collection.value, predicate=repr(predicate))
        return await self._fetch(collection, select(model).where(condition))

    async def get_all(self, collection: Collection) -> list[Any]:
        logger.debug("get_all", collection=collection.value)
        return await self._fetch(collection, select(MODELS[collection]))
