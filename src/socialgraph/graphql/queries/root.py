"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.member_type import MemberType, MemberTypeId
from ..types.post import Post
from ..types.profile import Profile
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def member_types(self, info: strawberry.Info) -> list[MemberType]:
        """Get all member types."""
        from ..resolvers.query import resolve_collection

        return await resolve_collection(info, "memberTypes")

    @strawberry.field
    async def posts(self, info: strawberry.Info) -> list[Post]:
        """Get all posts."""
        from ..resolvers.query import resolve_collection

        return await resolve_collection(info, "posts")

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """Get all users."""
        from ..resolvers.query import resolve_collection

        return await resolve_collection(info, "users")

    @strawberry.field
    async def profiles(self, info: strawberry.Info) -> list[Profile]:
        """Get all profiles."""
        from ..resolvers.query import resolve_collection

        return await resolve_collection(info, "profiles")

    @strawberry.field
    async def member_type(self, info: strawberry.Info, id: MemberTypeId) -> MemberType | None:
        """Get a member type by ID."""
        from ..resolvers.query import resolve_by_id

        return await resolve_by_id(info, "memberType", id.value)

    @strawberry.field
    async def post(self, info: strawberry.Info, id: UUID) -> Post | None:
        """Get a post by ID."""
        from ..resolvers.query import resolve_by_id

        return await resolve_by_id(info, "post", id)

    @strawberry.field
    async def profile(self, info: strawberry.Info, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        from ..resolvers.query import resolve_by_id

        return await resolve_by_id(info, "profile", id)

    @strawberry.field
    async def user(self, info: strawberry.Info, id: UUID) -> User | None:
        """Get a user with profile, posts and subscriptions."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, id)
