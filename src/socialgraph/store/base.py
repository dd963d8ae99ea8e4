"""Core entity store interfaces, records and errors."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class MemberTypeRecord:
    id: str
    discount: float
    posts_limit_per_month: int


@dataclass(frozen=True)
class UserRecord:
    id: UUID
    name: str
    balance: float


@dataclass(frozen=True)
class PostRecord:
    id: UUID
    title: str
    content: str
    author_id: UUID


@dataclass(frozen=True)
class ProfileRecord:
    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: str


@dataclass(frozen=True)
class SubscriptionRecord:
    """Directed edge: ``subscriber_id`` follows ``author_id``."""

    subscriber_id: UUID
    author_id: UUID

    @property
    def id(self) -> tuple[UUID, UUID]:
        return (self.subscriber_id, self.author_id)


class Collection(Enum):
    """Entity collections reachable through an entity store."""

    MEMBER_TYPE = "member_type"
    POST = "post"
    PROFILE = "profile"
    USER = "user"
    SUBSCRIPTION = "subscription"

    @property
    def record_type(self) -> type:
        return _RECORD_TYPES[self]

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in fields(self.record_type))


_RECORD_TYPES: dict[Collection, type] = {
    Collection.MEMBER_TYPE: MemberTypeRecord,
    Collection.POST: PostRecord,
    Collection.PROFILE: ProfileRecord,
    Collection.USER: UserRecord,
    Collection.SUBSCRIPTION: SubscriptionRecord,
}


@dataclass(frozen=True)
class FieldEquals:
    """Predicate: ``record.<field> == value``."""

    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) == self.value


@dataclass(frozen=True)
class FieldIn:
    """Predicate: ``record.<field>`` is one of ``values``."""

    field: str
    values: frozenset[Any]

    def __init__(self, field: str, values: Iterable[Any]):
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "values", frozenset(values))

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) in self.values


Predicate = FieldEquals | FieldIn


def check_predicate(collection: Collection, predicate: Predicate) -> None:
    """Reject predicates that name a field the collection does not have."""
    if predicate.field not in collection.field_names:
        raise ValueError(
            f"Unknown field '{predicate.field}' for collection '{collection.value}'"
        )


@dataclass
class Dataset:
    """A complete set of rows, used for seeding and for the in-memory store."""

    member_types: list[MemberTypeRecord] = field(default_factory=list)
    users: list[UserRecord] = field(default_factory=list)
    posts: list[PostRecord] = field(default_factory=list)
    profiles: list[ProfileRecord] = field(default_factory=list)
    subscriptions: list[SubscriptionRecord] = field(default_factory=list)

    def rows(self, collection: Collection) -> list[Any]:
        return {
            Collection.MEMBER_TYPE: self.member_types,
            Collection.POST: self.posts,
            Collection.PROFILE: self.profiles,
            Collection.USER: self.users,
            Collection.SUBSCRIPTION: self.subscriptions,
        }[collection]


class StoreError(Exception):
    """Base exception for entity store operations."""

    code = "STORE_FAILURE"

    def __init__(self, message: str):
        super().__init__(message)
        self.extensions = {"code": self.code}


class StoreUnavailableError(StoreError):
    """The backing store could not complete a fetch."""

    pass


class IntegrityViolation(StoreError):
    """Fetched data breaks a relational invariant the resolvers rely on."""

    code = "INTEGRITY_VIOLATION"


class SelfSubscriptionError(IntegrityViolation):
    def __init__(self, user_id: UUID):
        super().__init__(f"User {user_id} is subscribed to itself")
        self.user_id = user_id


class OrphanedReferenceError(IntegrityViolation):
    def __init__(self, collection: Collection, key: Any, referenced_by: str):
        super().__init__(
            f"{referenced_by} references missing {collection.value} '{key}'"
        )
        self.collection = collection
        self.key = key


class EntityStore(ABC):
    """Abstract base class for entity stores.

    Stores perform no caching or deduplication across calls. Sequences come
    back in store-defined order; callers must not rely on it.
    """

    @abstractmethod
    async def get_by_id(self, collection: Collection, id: Any) -> Any | None:
        """Fetch one record by primary key, or None when no row matches.

        Raises:
            StoreUnavailableError: On backend failure
        """
        pass

    @abstractmethod
    async def get_where(self, collection: Collection, predicate: Predicate) -> list[Any]:
        """Fetch every record matching a single-field predicate.

        Raises:
            ValueError: If the predicate names an unknown field
            StoreUnavailableError: On backend failure
        """
        pass

    @abstractmethod
    async def get_all(self, collection: Collection) -> list[Any]:
        """Fetch every record of a collection."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
