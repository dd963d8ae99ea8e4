"""
MemberType GraphQL type definitions
"""

from enum import Enum
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .profile import Profile


@strawberry.enum
class MemberTypeId(Enum):
    """Closed set of membership tiers."""

    basic = "basic"
    business = "business"


@strawberry.type
class MemberType:
    """Membership tier referenced by profiles."""

    id: MemberTypeId
    discount: float
    posts_limit_per_month: int

    @strawberry.field
    async def profiles(
        self, info: strawberry.Info
    ) -> list[Annotated["Profile", strawberry.lazy(".profile")]]:
        """Get profiles on this tier."""
        from ..resolvers.relations import resolve_relation

        return await resolve_relation(self, info, "MemberType", "profiles")
