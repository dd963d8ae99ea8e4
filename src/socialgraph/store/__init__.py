"""Entity store adapters."""

from .base import (
    Collection,
    Dataset,
    EntityStore,
    FieldEquals,
    FieldIn,
    IntegrityViolation,
    MemberTypeRecord,
    OrphanedReferenceError,
    PostRecord,
    ProfileRecord,
    SelfSubscriptionError,
    StoreError,
    StoreUnavailableError,
    SubscriptionRecord,
    UserRecord,
)
from .factory import create_store

__all__ = [
    "Collection",
    "Dataset",
    "EntityStore",
    "FieldEquals",
    "FieldIn",
    "IntegrityViolation",
    "MemberTypeRecord",
    "OrphanedReferenceError",
    "PostRecord",
    "ProfileRecord",
    "SelfSubscriptionError",
    "StoreError",
    "StoreUnavailableError",
    "SubscriptionRecord",
    "UserRecord",
    "create_store",
]
