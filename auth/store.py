"""
auth/store.py -- pymongo persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as catalog/store.py).
UserStore is the repository; _doc_to_user is the mapper. Route and dependency
code never touches pymongo collections directly.

Collection: "User". Unique index on email, created idempotently at
construction so every process that opens the store also enforces it.

Write rules:
  - Every insert and update runs validate_user() first; a failed result
    raises DocumentValidationError and nothing is written.
  - Fields outside the User schema are dropped.
  - email, role, passwordHash and the timestamps are never taken from a
    client-supplied update. role is set only by create_user(role=...).
  - Duplicate emails surface as DuplicateDocumentError.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from auth.models import ROLE_USER, User, validate_user
from core.config import now_iso
from core.db import DuplicateDocumentError, duplicate_field, to_object_id
from core.validation import DocumentValidationError

COLLECTION = "User"

# Client-supplied fields that must never reach a write.
_SERVER_OWNED_FIELDS = frozenset({"_id", "email", "role", "passwordHash", "createdAt", "updatedAt"})


# ---------------------------------------------------------------------------
# Mapper
# ---------------------------------------------------------------------------


def _doc_to_user(doc: Mapping[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        name=doc.get("name"),
        email=doc["email"],
        password_hash=doc["passwordHash"],
        role=doc.get("role", ROLE_USER),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User documents.

    Usage:
        store = UserStore(db)
        user = store.create_user({"name": "Ana", "email": "ana@example.com"}, hash_password("S3cret!pw"))
        same = store.get_by_email("ana@example.com")
    """

    def __init__(self, db: Database) -> None:
        self.collection = db[COLLECTION]
        self.collection.create_index([("email", ASCENDING)], unique=True)

    def create_user(self, fields: Mapping[str, Any], password_hash: str, role: str = ROLE_USER) -> User:
        """Validate and insert a new user. Returns the stored User.

        fields is the client body; only name and email are kept from it.

        Raises:
            DocumentValidationError: the document breaks a schema rule.
            DuplicateDocumentError:  the email is already registered.
        """
        candidate = {k: v for k, v in fields.items() if k not in _SERVER_OWNED_FIELDS or k == "email"}
        candidate["passwordHash"] = password_hash
        candidate["role"] = role
        result = validate_user(candidate)
        if not result.ok:
            raise DocumentValidationError(result.violations)

        doc = result.value
        doc["createdAt"] = doc["updatedAt"] = now_iso()
        try:
            inserted = self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateDocumentError(COLLECTION, duplicate_field(exc) or "email") from exc
        doc["_id"] = inserted.inserted_id
        return _doc_to_user(doc)

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by email (trimmed, case-insensitive). Returns None if not found."""
        doc = self.collection.find_one({"email": email.strip().lower()})
        return _doc_to_user(doc) if doc is not None else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by hex id. Returns None if not found or the id is malformed."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return _doc_to_user(doc) if doc is not None else None

    def update_user(self, user_id: str, fields: Mapping[str, Any]) -> User | None:
        """Apply a partial update and return the updated User, or None if it no longer exists.

        Only the fields present are validated (update semantics). Server-owned
        fields are discarded rather than rejected; the route layer is
        responsible for refusing an email change with a 400.

        Raises:
            DocumentValidationError: a supplied field breaks a schema rule.
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        candidate = {k: v for k, v in fields.items() if k not in _SERVER_OWNED_FIELDS}
        result = validate_user(candidate, partial=True)
        if not result.ok:
            raise DocumentValidationError(result.violations)

        changes = dict(result.value)
        changes["updatedAt"] = now_iso()
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _doc_to_user(doc) if doc is not None else None

    def delete_user(self, user_id: str) -> dict[str, Any]:
        """Hard-delete a user. Returns {"acknowledged": bool, "deletedCount": int}."""
        oid = to_object_id(user_id)
        if oid is None:
            return {"acknowledged": True, "deletedCount": 0}
        result = self.collection.delete_one({"_id": oid})
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}

    def count(self) -> int:
        return self.collection.count_documents({})
