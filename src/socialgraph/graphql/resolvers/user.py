from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...logging import get_logger
from ...store.base import (
    Collection,
    EntityStore,
    FieldEquals,
    IntegrityViolation,
    OrphanedReferenceError,
)
from ..registry import ROOT_TYPE, SchemaRegistry
from ..stitcher import stitch_subscriptions
from ..types.user import UserPrefetch
from .converters import to_member_type, to_post, to_profile, to_user
from .relations import resolve_relation

if TYPE_CHECKING:
    from ..types.post import Post
    from ..types.profile import Profile
    from ..types.user import User

logger = get_logger(__name__)


async def fetch_profile(store: EntityStore, user_id: UUID) -> Profile | None:
    """Fetch a user's profile together with its member type."""
    profiles = await store.get_where(Collection.PROFILE, FieldEquals("user_id", user_id))
    if not profiles:
        return None
    if len(profiles) > 1:
        raise IntegrityViolation(f"User {user_id} has {len(profiles)} profiles")

    profile = profiles[0]
    member_type = await store.get_by_id(Collection.MEMBER_TYPE, profile.member_type_id)
    if member_type is None:
        raise OrphanedReferenceError(
            Collection.MEMBER_TYPE, profile.member_type_id, "Profile.memberType"
        )
    return to_profile(profile, member_type=to_member_type(member_type))


async def resolve_user_by_id(info: strawberry.Info, id: UUID) -> User | None:
    """
    Resolve a user with profile, member type, posts and both subscription sets.

    The fetches run in order and the user is only built once all of them have
    succeeded, so a failure anywhere yields no partial aggregate.
    """
    registry: SchemaRegistry = info.context["registry"]
    store: EntityStore = info.context["store"]

    record = await store.get_by_id(Collection.USER, id)
    if record is None:
        logger.info("User not found", user_id=str(id))
        return registry.ensure_present(registry.field(ROOT_TYPE, "user"), None, id)

    profile = await fetch_profile(store, id)
    posts = await store.get_where(Collection.POST, FieldEquals("author_id", id))
    links = await stitch_subscriptions(store, id)

    return to_user(
        record,
        links=links,
        prefetch=UserPrefetch(profile=profile, posts=tuple(to_post(p) for p in posts)),
    )


async def resolve_user_profile(user: User, info: strawberry.Info) -> Profile | None:
    if user.prefetch is not None:
        return user.prefetch.profile
    return await resolve_relation(user, info, "User", "profile")


async def resolve_user_posts(user: User, info: strawberry.Info) -> list[Post]:
    if user.prefetch is not None:
        return list(user.prefetch.posts)
    return await resolve_relation(user, info, "User", "posts")


async def resolve_user_subscribed_to(user: User, info: strawberry.Info) -> list[User]:
    if user.links is not None:
        return list(user.links.user_subscribed_to)
    return await resolve_relation(user, info, "User", "userSubscribedTo")


async def resolve_subscribed_to_user(user: User, info: strawberry.Info) -> list[User]:
    if user.links is not None:
        return list(user.links.subscribed_to_user)
    return await resolve_relation(user, info, "User", "subscribedToUser")
