"""Factory for creating entity stores from configuration."""

from ..config import Settings, settings
from ..logging import get_logger
from .base import EntityStore

logger = get_logger(__name__)


def create_store(config: Settings | None = None) -> EntityStore:
    """Create the entity store selected by ``store_backend``.

    Raises:
        ValueError: If the backend name is not recognised
    """
    config = config or settings
    backend = config.store_backend.lower()

    if backend == "memory":
        from ..database.seed_data import build_sample_dataset
        from .implementations.memory import InMemoryEntityStore

        logger.info("Using in-memory entity store with sample data")
        return InMemoryEntityStore(build_sample_dataset())

    if backend == "sqlalchemy":
        from ..database.connection import get_session_factory, init_database
        from .implementations.sqlalchemy import SQLAlchemyEntityStore

        init_database()
        logger.info("Using SQLAlchemy entity store")
        return SQLAlchemyEntityStore(get_session_factory())

    raise ValueError(f"Unknown store backend: {config.store_backend}")
