"""
core/db.py -- MongoDB connection helpers shared by auth/store.py and catalog/store.py.

One MongoClient is opened in the API lifespan (or the CLI) and every store is
built from the same Database handle. pymongo's client is thread-safe and pools
connections internally, so FastAPI's worker threads share it freely.

Stores translate pymongo's DuplicateKeyError into DuplicateDocumentError so the
route layer never imports pymongo.errors for the common conflict case.

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalog/.
"""

from __future__ import annotations

import logging

from bson import ObjectId
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from core.config import Settings

logger = logging.getLogger("vinylstore.db")


class DuplicateDocumentError(ValueError):
    """A write collided with a unique index.

    field is the offending key when the server reports it, else None.
    """

    def __init__(self, collection: str, field: str | None = None) -> None:
        self.collection = collection
        self.field = field
        target = f"{collection}.{field}" if field else collection
        super().__init__(f"Duplicate key on {target}")


def create_client(settings: Settings) -> MongoClient:
    """Open the process-wide MongoClient. Connection is lazy until first use."""
    return MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)


def get_database(client: MongoClient, settings: Settings) -> Database:
    return client[settings.mongo_db_name]


def ping(db: Database) -> bool:
    """Return True if the server answers a ping. Used by the health endpoint."""
    try:
        db.command("ping")
    except Exception:
        logger.warning("MongoDB ping failed", exc_info=True)
        return False
    return True


def to_object_id(value: str) -> ObjectId | None:
    """Parse a hex id from a URL or token. Returns None for malformed input."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def duplicate_field(exc: DuplicateKeyError) -> str | None:
    """Extract the first field of the violated unique index, if reported."""
    details = exc.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue") or {}
    for name in key_pattern:
        return name
    return None
