"""
Main GraphQL schema definition using Strawberry
"""

from dataclasses import dataclass, field
from typing import Any

import strawberry
from fastapi import Request
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from ..store.base import EntityStore
from .errors import SchemaRegistryError
from .loaders import BATCH_LOADERS, Loaders
from .queries.root import Query
from .registry import REGISTRY, ROOT_TYPE, SchemaRegistry
from .resolvers.converters import CONVERTERS

logger = get_logger(__name__)

# Create the GraphQL schema
schema = strawberry.Schema(query=Query)


def validate_schema(registry: SchemaRegistry = REGISTRY) -> None:
    """Validate the GraphQL schema and its registry bindings at startup.

    Raises:
        Exception: If the schema is invalid or disagrees with the registry
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        registry.check_schema(graphql_schema)
        registry.check_loaders(BATCH_LOADERS)

        missing = [name for name in registry.types if name != ROOT_TYPE and name not in CONVERTERS]
        if missing:
            raise SchemaRegistryError(f"No converter for types: {', '.join(missing)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def build_context(store: EntityStore, request: Request | None = None) -> dict[str, Any]:
    """Build the per-request resolver context."""
    return {
        "request": request,
        "store": store,
        "loaders": Loaders(store),
        "registry": REGISTRY,
    }


@dataclass
class QueryResult:
    """Outcome of one query: ``errors`` is empty on full success."""

    data: dict[str, Any] | None
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "errors": self.errors}


async def execute_query(
    query: str,
    variables: dict[str, Any] | None = None,
    *,
    store: EntityStore,
    operation_name: str | None = None,
) -> QueryResult:
    """Execute a query document against ``store``.

    Validation errors come back with ``data`` set to None and no resolver run.
    Resolver errors null the failing field only and are reported with its path.
    """
    result = await schema.execute(
        query,
        variable_values=variables,
        context_value=build_context(store),
        operation_name=operation_name,
    )
    errors = [error.formatted for error in result.errors or []]
    if errors:
        logger.info("Query completed with errors", error_count=len(errors))
    return QueryResult(data=result.data, errors=errors)


# Create the GraphQL router for FastAPI integration
def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return build_context(request.app.state.store, request=request)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
