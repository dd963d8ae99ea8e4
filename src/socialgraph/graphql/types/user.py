"""
User GraphQL type definitions
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .post import Post
    from .profile import Profile


@dataclass(frozen=True)
class SubscriptionLinks:
    """Subscription sets already attached to a user by the relation stitcher.

    The tuples are shared between every parent they are attached to and must
    be treated as read-only.
    """

    user_subscribed_to: tuple["User", ...] = ()
    subscribed_to_user: tuple["User", ...] = ()


# Attached to the innermost users of a stitched aggregate
LEAF_LINKS = SubscriptionLinks()


@dataclass(frozen=True)
class UserPrefetch:
    """Profile and posts loaded together with the user."""

    profile: Any
    posts: tuple[Any, ...]


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: UUID
    name: str
    balance: float

    links: strawberry.Private[SubscriptionLinks | None] = None
    prefetch: strawberry.Private[UserPrefetch | None] = None

    @strawberry.field
    async def profile(
        self, info: strawberry.Info
    ) -> Annotated["Profile", strawberry.lazy(".profile")] | None:
        """Get this user's profile, if any."""
        from ..resolvers.user import resolve_user_profile

        return await resolve_user_profile(self, info)

    @strawberry.field
    async def posts(self, info: strawberry.Info) -> list[Annotated["Post", strawberry.lazy(".post")]]:
        """Get posts written by this user."""
        from ..resolvers.user import resolve_user_posts

        return await resolve_user_posts(self, info)

    @strawberry.field
    async def user_subscribed_to(self, info: strawberry.Info) -> list["User"]:
        """Get users this user subscribes to."""
        from ..resolvers.user import resolve_user_subscribed_to

        return await resolve_user_subscribed_to(self, info)

    @strawberry.field
    async def subscribed_to_user(self, info: strawberry.Info) -> list["User"]:
        """Get users subscribed to this user."""
        from ..resolvers.user import resolve_subscribed_to_user

        return await resolve_subscribed_to_user(self, info)
