"""
tests/conftest.py -- Shared test fixtures for the Vinyl Store test suite.

This module provides:
  - mongo_db: a fresh mongomock Database per test (no MongoDB server needed)
  - user_store / product_store: stores built on that database
  - client: TestClient whose lifespan is patched to use mongo_db
  - make_user / auth_header: helpers for creating accounts and bearer headers

Design: mongomock implements the pymongo API in memory, including unique
indexes and DuplicateKeyError, so the stores run unmodified. Each test gets
its own client instance, so no state leaks between tests.

DEBUG must be set before any auth/core import so get_settings() can
auto-generate SECRET_KEY in dev mode instead of raising ValueError.
BCRYPT_ROUNDS is lowered to the library minimum to keep the suite fast.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.database import Database

from api.main import app
from auth.models import ROLE_USER, User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from catalog.store import ProductStore

STRONG_PASSWORD = "Abcdef1!"


@pytest.fixture
def mongo_db() -> Database:
    return mongomock.MongoClient()["vinylstore_test"]


@pytest.fixture
def user_store(mongo_db: Database) -> UserStore:
    return UserStore(mongo_db)


@pytest.fixture
def product_store(mongo_db: Database) -> ProductStore:
    return ProductStore(mongo_db)


def _patch_lifespan(db: Database, user_store: UserStore, product_store: ProductStore):
    """Return an async context manager that replaces the real lifespan.

    Wires the test stores into app.state so routes never open a real
    MongoClient.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.db = db
        app.state.user_store = user_store
        app.state.product_store = product_store
        yield

    return test_lifespan


@pytest.fixture
def client(mongo_db: Database, user_store: UserStore, product_store: ProductStore) -> Generator[TestClient, None, None]:
    """TestClient over the real app with stores backed by mongo_db."""
    app.router.lifespan_context = _patch_lifespan(mongo_db, user_store, product_store)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture
def make_user(user_store: UserStore) -> Callable[..., User]:
    """Create a stored user directly through the store (bypassing HTTP)."""

    def _make(
        email: str = "listener@example.com",
        name: str = "Listener",
        password: str = STRONG_PASSWORD,
        role: str = ROLE_USER,
    ) -> User:
        return user_store.create_user({"email": email, "name": name}, hash_password(password), role=role)

    return _make


def auth_header(user: User) -> dict[str, str]:
    """Authorization header carrying a fresh token for user."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}
