"""
Storage module - Database and object storage operations.
"""

from pravas.services.storage.blobs import BaseBlobStore, LocalBlobStore
from pravas.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from pravas.services.storage.models_db import Entry, Trip
from pravas.services.storage.repository import DiaryRepository

__all__ = [
    "Base",
    "BaseBlobStore",
    "DiaryRepository",
    "Entry",
    "LocalBlobStore",
    "Trip",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]
