"""
Maintenance stores: one interface, in-memory / SQLite / remote-with-fallback
implementations.
"""

from cmms_insights.store.base import (
    InvalidTransitionError,
    MaintenanceStore,
    RecordNotFoundError,
    StoreSnapshot,
)
from cmms_insights.store.fallback import FallbackStore
from cmms_insights.store.memory import InMemoryStore
from cmms_insights.store.remote import PostgrestClient, seed_remote_if_empty
from cmms_insights.store.sqlite_store import SqliteStore

__all__ = [
    "FallbackStore",
    "InMemoryStore",
    "InvalidTransitionError",
    "MaintenanceStore",
    "PostgrestClient",
    "RecordNotFoundError",
    "SqliteStore",
    "StoreSnapshot",
    "seed_remote_if_empty",
]
