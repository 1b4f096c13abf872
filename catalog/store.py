"""
catalog/store.py -- pymongo persistence layer for catalog products.

Pattern: Repository + Data Mapper (same as auth/store.py).

Collection: "Product". Unique indexes on albumName and description are
created idempotently at construction.

Products are inserted whole and hard-deleted; there is no update path.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from catalog.models import Product, validate_product
from core.db import DuplicateDocumentError, duplicate_field, to_object_id
from core.validation import DocumentValidationError

COLLECTION = "Product"


def _doc_to_product(doc: Mapping[str, Any]) -> Product:
    return Product(
        id=str(doc["_id"]),
        artist=doc["artist"],
        album_name=doc["albumName"],
        description=doc["description"],
        price=doc["price"],
        stock=doc.get("stock", 0),
        details=list(doc.get("details") or []),
        genre=list(doc.get("genre") or []),
        track_list=doc.get("trackList"),
    )


class ProductStore:
    """Repository for Product documents."""

    def __init__(self, db: Database) -> None:
        self.collection = db[COLLECTION]
        self.collection.create_index([("albumName", ASCENDING)], unique=True)
        self.collection.create_index([("description", ASCENDING)], unique=True)

    def create_product(self, fields: Mapping[str, Any]) -> Product:
        """Validate and insert a product. Unknown fields are dropped.

        Raises:
            DocumentValidationError: the document breaks a schema rule
                                     (including more than five genres).
            DuplicateDocumentError:  albumName or description already exists.
        """
        result = validate_product(fields)
        if not result.ok:
            raise DocumentValidationError(result.violations)

        doc = result.value
        try:
            inserted = self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateDocumentError(COLLECTION, duplicate_field(exc)) from exc
        doc["_id"] = inserted.inserted_id
        return _doc_to_product(doc)

    def get_product(self, product_id: str) -> Product | None:
        oid = to_object_id(product_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return _doc_to_product(doc) if doc is not None else None

    def list_products(self, genre: str | None = None) -> list[Product]:
        """Return products ordered by artist then album, optionally filtered by one genre tag."""
        query: dict[str, Any] = {"genre": genre.strip()} if genre else {}
        cursor = self.collection.find(query).sort([("artist", ASCENDING), ("albumName", ASCENDING)])
        return [_doc_to_product(doc) for doc in cursor]

    def delete_product(self, product_id: str) -> dict[str, Any]:
        """Hard-delete a product. Returns {"acknowledged": bool, "deletedCount": int}."""
        oid = to_object_id(product_id)
        if oid is None:
            return {"acknowledged": True, "deletedCount": 0}
        result = self.collection.delete_one({"_id": oid})
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
