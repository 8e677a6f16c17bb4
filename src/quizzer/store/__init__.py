"""Persistent storage for users, quiz sets, and attempts."""

from __future__ import annotations

from .base import (
    RecordNotFound,
    RecordStore,
    StoreError,
    StoreUnavailable,
    UnknownEntityType,
)
from .sql import (
    DATABASE_FILENAME,
    SqlRecordStore,
    default_database_url,
    open_store,
)

__all__ = [
    "DATABASE_FILENAME",
    "RecordNotFound",
    "RecordStore",
    "SqlRecordStore",
    "StoreError",
    "StoreUnavailable",
    "UnknownEntityType",
    "default_database_url",
    "open_store",
]
