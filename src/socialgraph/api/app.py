"""
Main FastAPI application for the socialgraph service
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..graphql.schema import create_graphql_router, validate_schema
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..store.base import EntityStore
from ..store.factory import create_store

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting socialgraph API...", store_backend=settings.store_backend)

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = create_store()

        if settings.store_backend == "sqlalchemy":
            from ..database.connection import test_database_connection

            ok, error = await test_database_connection()
            if not ok:
                logger.error("Database connection check failed", error=error)

    yield

    logger.info("Shutting down socialgraph API...")
    if owns_store:
        await app.state.store.close()
        if settings.store_backend == "sqlalchemy":
            from ..database.connection import dispose_database

            await dispose_database()


def create_app(store: EntityStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Entity store to serve from. When omitted, one is created from
            settings during startup.
    """
    app = FastAPI(
        title="socialgraph API",
        description="GraphQL query service for users, profiles, posts and subscriptions",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.store = store

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    try:
        # Fail fast: the server must not start with a schema that disagrees
        # with the registry
        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        raise

    return app
