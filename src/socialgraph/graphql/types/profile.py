"""
Profile GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from .member_type import MemberType, MemberTypeId

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Profile:
    """Profile type for GraphQL API."""

    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: MemberTypeId

    # Set when the profile was fetched as part of a user aggregate
    prefetched_member_type: strawberry.Private[MemberType | None] = None

    @strawberry.field
    async def user(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the user owning this profile."""
        from ..resolvers.relations import resolve_relation

        return await resolve_relation(self, info, "Profile", "user")

    @strawberry.field
    async def member_type(self, info: strawberry.Info) -> MemberType:
        """Get the membership tier of this profile."""
        if self.prefetched_member_type is not None:
            return self.prefetched_member_type

        from ..resolvers.relations import resolve_relation

        return await resolve_relation(self, info, "Profile", "memberType")
