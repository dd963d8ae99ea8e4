"""
Relation stitcher for the User <-> Subscription <-> User cycle.

For a focal user it fetches both subscription directions and attaches, onto
each related user, the focal user's set in the other direction. Attachment is
exactly one reciprocal hop: the attached users are leaves whose own
subscription sets are empty. Deeper traversal is left to the caller issuing
another query.
"""

from collections.abc import Iterable
from enum import Enum
from uuid import UUID

from ..logging import get_logger
from ..store.base import (
    Collection,
    EntityStore,
    FieldEquals,
    FieldIn,
    IntegrityViolation,
    OrphanedReferenceError,
    SelfSubscriptionError,
    UserRecord,
)
from .resolvers.converters import to_user
from .types.user import LEAF_LINKS, SubscriptionLinks

logger = get_logger(__name__)


class Direction(Enum):
    """Which side of the subscription edge the lookup key sits on."""

    # key follows the users returned
    SUBSCRIBED_TO = ("subscriber_id", "author_id")
    # users returned follow key
    SUBSCRIBERS = ("author_id", "subscriber_id")

    @property
    def key_field(self) -> str:
        return self.value[0]

    @property
    def other_field(self) -> str:
        return self.value[1]


async def load_linked_users(
    store: EntityStore, user_ids: Iterable[UUID], direction: Direction
) -> dict[UUID, list[UserRecord] | IntegrityViolation]:
    """Fetch the users linked to each of ``user_ids`` in one direction.

    Issues one edge fetch and at most one user fetch regardless of how many
    ids are given. A key whose edges are broken maps to the violation instead
    of a list, so one bad key never fails the others in its batch: a
    ``SelfSubscriptionError`` for an edge linking a user to itself, an
    ``OrphanedReferenceError`` for an edge naming a user that does not exist.
    """
    keys = list(dict.fromkeys(user_ids))
    linked: dict[UUID, list[UserRecord] | IntegrityViolation] = {key: [] for key in keys}
    if not keys:
        return linked

    if len(keys) == 1:
        predicate = FieldEquals(direction.key_field, keys[0])
    else:
        predicate = FieldIn(direction.key_field, keys)
    edges = await store.get_where(Collection.SUBSCRIPTION, predicate)

    for edge in edges:
        if edge.subscriber_id == edge.author_id:
            key = getattr(edge, direction.key_field)
            linked[key] = SelfSubscriptionError(edge.subscriber_id)

    edges = [e for e in edges if isinstance(linked[getattr(e, direction.key_field)], list)]
    other_ids = {getattr(edge, direction.other_field) for edge in edges}
    users: dict[UUID, UserRecord] = {}
    if other_ids:
        rows = await store.get_where(Collection.USER, FieldIn("id", other_ids))
        users = {row.id: row for row in rows}

    for edge in edges:
        key = getattr(edge, direction.key_field)
        found = linked[key]
        if not isinstance(found, list):
            continue
        other_id = getattr(edge, direction.other_field)
        user = users.get(other_id)
        if user is None:
            logger.warning("Orphaned subscription edge", user_id=str(key), missing=str(other_id))
            linked[key] = OrphanedReferenceError(Collection.USER, other_id, "Subscription")
        else:
            found.append(user)

    return linked


def linked_or_raise(
    linked: dict[UUID, list[UserRecord] | IntegrityViolation], key: UUID
) -> list[UserRecord]:
    found = linked[key]
    if isinstance(found, IntegrityViolation):
        raise found
    return found


async def stitch_subscriptions(store: EntityStore, user_id: UUID) -> SubscriptionLinks:
    """Build both subscription sets of ``user_id`` with one-hop reciprocal attachment.

    Each subscriber carries ``user_subscribed_to`` = the full set of users the
    focal user follows; each followed user carries ``subscribed_to_user`` = the
    full set of the focal user's subscribers. Nothing is returned unless both
    directions were fetched successfully.
    """
    subscribers = linked_or_raise(
        await load_linked_users(store, [user_id], Direction.SUBSCRIBERS), user_id
    )
    subscribed_to = linked_or_raise(
        await load_linked_users(store, [user_id], Direction.SUBSCRIBED_TO), user_id
    )

    subscriber_leaves = tuple(to_user(r, links=LEAF_LINKS) for r in subscribers)
    subscribed_to_leaves = tuple(to_user(r, links=LEAF_LINKS) for r in subscribed_to)

    logger.debug(
        "Stitched subscriptions",
        user_id=str(user_id),
        subscribers=len(subscribers),
        subscribed_to=len(subscribed_to),
    )

    return SubscriptionLinks(
        user_subscribed_to=tuple(
            to_user(r, links=SubscriptionLinks(subscribed_to_user=subscriber_leaves))
            for r in subscribed_to
        ),
        subscribed_to_user=tuple(
            to_user(r, links=SubscriptionLinks(user_subscribed_to=subscribed_to_leaves))
            for r in subscribers
        ),
    )
