"""
Root query resolvers for collection and by-id fields
"""

from typing import Any

import strawberry

from ...logging import get_logger
from ...store.base import EntityStore
from ..registry import ROOT_TYPE, SchemaRegistry
from .converters import CONVERTERS, convert_all

logger = get_logger(__name__)


async def resolve_collection(info: strawberry.Info, field_name: str) -> list[Any]:
    """Fetch every row behind a root list field. Order is store-defined."""
    registry: SchemaRegistry = info.context["registry"]
    store: EntityStore = info.context["store"]

    descriptor = registry.field(ROOT_TYPE, field_name)
    collection = registry.type(descriptor.target).collection

    records = await store.get_all(collection)
    return convert_all(descriptor.target, records)


async def resolve_by_id(info: strawberry.Info, field_name: str, id: Any) -> Any | None:
    """Fetch one row by primary key; absence follows the field's nullability."""
    registry: SchemaRegistry = info.context["registry"]
    store: EntityStore = info.context["store"]

    descriptor = registry.field(ROOT_TYPE, field_name)
    collection = registry.type(descriptor.target).collection

    record = await store.get_by_id(collection, id)
    if record is None:
        logger.info("Entity not found", type=descriptor.target, id=str(id))
        return registry.ensure_present(descriptor, None, id)

    return CONVERTERS[descriptor.target](record)
