"""Entity store implementations."""

from .memory import InMemoryEntityStore
from .sqlalchemy import SQLAlchemyEntityStore

__all__ = ["InMemoryEntityStore", "SQLAlchemyEntityStore"]
