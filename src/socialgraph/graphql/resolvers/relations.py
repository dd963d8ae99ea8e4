"""
Generic relation resolver driven by the schema registry
"""

from enum import Enum
from typing import Any

import strawberry

from ...store.base import OrphanedReferenceError
from ..registry import FieldKind, SchemaRegistry
from .converters import CONVERTERS


async def resolve_relation(parent: Any, info: strawberry.Info, type_name: str, field_name: str) -> Any:
    """Resolve a relation field of an already-resolved parent through its batch loader.

    The loader key is the parent attribute the registry names as foreign key,
    so a child never re-runs the fetch path that produced its parent.
    """
    registry: SchemaRegistry = info.context["registry"]
    descriptor = registry.field(type_name, field_name)

    key = getattr(parent, descriptor.foreign_key)
    if isinstance(key, Enum):
        key = key.value

    loader = info.context["loaders"].get(descriptor.loader)
    value = await loader.load(key)
    convert = CONVERTERS[descriptor.target]

    if descriptor.kind is FieldKind.LIST:
        return [convert(record) for record in value]

    if value is None:
        if descriptor.nullable:
            return None
        raise OrphanedReferenceError(
            registry.type(descriptor.target).collection, key, descriptor.path
        )
    return convert(value)
