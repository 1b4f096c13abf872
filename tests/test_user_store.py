"""Unit tests for auth/store.py against an in-memory mongomock database.

Covers:
- create_user() stores the hash only, drops unknown and server-owned fields
- Duplicate email raises DuplicateDocumentError (case-insensitive)
- Validation failures raise DocumentValidationError and write nothing
- get_by_email()/get_by_id() lookups, including malformed ids
- update_user() partial semantics, immutable email/role/hash, updatedAt bump
- delete_user() hard delete summary
"""

from __future__ import annotations

import pytest

from auth.models import ROLE_ADMIN
from auth.store import UserStore
from core.db import DuplicateDocumentError
from core.validation import DocumentValidationError


def test_create_user_stores_hash_not_plaintext(user_store: UserStore) -> None:
    body = {"name": "Ana", "email": "Ana@Example.com", "password": "Abcdef1!", "favoriteBand": "Can"}
    user = user_store.create_user(body, "$2b$04$fakehash")

    raw = user_store.collection.find_one({"email": "ana@example.com"})
    assert raw is not None
    assert raw["passwordHash"] == "$2b$04$fakehash"
    assert "password" not in raw
    assert "favoriteBand" not in raw
    assert user.id == str(raw["_id"])
    assert user.created_at == user.updated_at


def test_client_cannot_choose_role_or_hash(user_store: UserStore) -> None:
    body = {"name": "Eve", "email": "eve@example.com", "role": "ADMIN", "passwordHash": "mine"}
    user = user_store.create_user(body, "real-hash")
    assert user.role == "USER"
    assert user.password_hash == "real-hash"


def test_create_admin_role(user_store: UserStore) -> None:
    user = user_store.create_user({"name": "Boss", "email": "boss@example.com"}, "h", role=ROLE_ADMIN)
    assert user.role == ROLE_ADMIN


def test_duplicate_email_rejected(user_store: UserStore) -> None:
    user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    with pytest.raises(DuplicateDocumentError):
        user_store.create_user({"name": "Other Ana", "email": " ANA@example.com "}, "h")
    assert user_store.count() == 1


def test_invalid_document_writes_nothing(user_store: UserStore) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        user_store.create_user({"name": "Nobody"}, "h")
    assert [v.field for v in excinfo.value.violations] == ["email"]
    assert user_store.count() == 0


def test_lookups(user_store: UserStore) -> None:
    created = user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    assert user_store.get_by_email("ANA@example.com").id == created.id
    assert user_store.get_by_id(created.id).email == "ana@example.com"
    assert user_store.get_by_email("missing@example.com") is None
    assert user_store.get_by_id("not-an-object-id") is None
    assert user_store.get_by_id("65f1c0ffee0000000000beef") is None


def test_update_is_partial_and_bumps_updated_at(user_store: UserStore) -> None:
    created = user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    user_store.collection.update_one({"email": "ana@example.com"}, {"$set": {"updatedAt": "2000-01-01T00:00:00+00:00"}})

    updated = user_store.update_user(created.id, {"name": "  Ana Maria  "})
    assert updated.name == "Ana Maria"
    assert updated.email == "ana@example.com"
    assert updated.created_at == created.created_at
    assert updated.updated_at != "2000-01-01T00:00:00+00:00"


def test_update_ignores_server_owned_fields(user_store: UserStore) -> None:
    created = user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    updated = user_store.update_user(
        created.id, {"email": "new@example.com", "role": "ADMIN", "passwordHash": "x", "_id": "zzz"}
    )
    assert updated.email == "ana@example.com"
    assert updated.role == "USER"
    assert updated.password_hash == "h"


def test_update_runs_validators(user_store: UserStore) -> None:
    created = user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    with pytest.raises(DocumentValidationError):
        user_store.update_user(created.id, {"name": ""})
    assert user_store.get_by_id(created.id).name == "Ana"


def test_update_missing_user_returns_none(user_store: UserStore) -> None:
    assert user_store.update_user("65f1c0ffee0000000000beef", {"name": "x"}) is None


def test_delete_user(user_store: UserStore) -> None:
    created = user_store.create_user({"name": "Ana", "email": "ana@example.com"}, "h")
    assert user_store.delete_user(created.id) == {"acknowledged": True, "deletedCount": 1}
    assert user_store.get_by_id(created.id) is None
    assert user_store.delete_user(created.id)["deletedCount"] == 0
