"""
Post GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Post:
    """Post type for GraphQL API."""

    id: UUID
    title: str
    content: str
    author_id: UUID

    @strawberry.field
    async def author(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the author of this post."""
        from ..resolvers.relations import resolve_relation

        return await resolve_relation(self, info, "Post", "author")
