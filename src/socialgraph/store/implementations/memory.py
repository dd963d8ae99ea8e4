"""In-memory entity store."""

from typing import Any

from ...logging import get_logger
from ..base import Collection, Dataset, EntityStore, Predicate, check_predicate

logger = get_logger(__name__)


class InMemoryEntityStore(EntityStore):
    """Entity store backed by per-collection dicts.

    Iteration order is insertion order. Relational invariants are not enforced
    on insert, so integrity checks in the resolvers can be exercised.
    """

    def __init__(self, dataset: Dataset | None = None):
        self._rows: dict[Collection, dict[Any, Any]] = {c: {} for c in Collection}
        if dataset is not None:
            self.load(dataset)

    def load(self, dataset: Dataset) -> None:
        for collection in Collection:
            for record in dataset.rows(collection):
                self.add(collection, record)

    def add(self, collection: Collection, record: Any) -> None:
        if not isinstance(record, collection.record_type):
            raise TypeError(
                f"Expected {collection.record_type.__name__}, got {type(record).__name__}"
            )
        self._rows[collection][record.id] = record

    async def get_by_id(self, collection: Collection, id: Any) -> Any | None:
        logger.debug("get_by_id", collection=collection.value, id=str(id))
        return self._rows[collection].get(id)

    async def get_where(self, collection: Collection, predicate: Predicate) -> list[Any]:
        check_predicate(collection, predicate)
        logger.debug("get_where", collection=collection.value, predicate=repr(predicate))
        return [r for r in self._rows[collection].values() if predicate.matches(r)]

    async def get_all(self, collection: Collection) -> list[Any]:
        logger.debug("get_all", collection=collection.value)
        return list(self._rows[collection].values())
