"""Tests for the management commands in main.py (create-admin, import-products)."""

from __future__ import annotations

import json

from conftest import STRONG_PASSWORD

from auth.models import ROLE_ADMIN
from auth.store import UserStore
from catalog.store import ProductStore
from main import create_admin, import_products


def test_create_admin(mongo_db, capsys):
    user_id = create_admin(mongo_db, "Boss@Example.com", "Boss", STRONG_PASSWORD)
    assert user_id
    user = UserStore(mongo_db).get_by_id(user_id)
    assert user.role == ROLE_ADMIN
    assert user.email == "boss@example.com"
    assert "created" in capsys.readouterr().out


def test_create_admin_rejects_weak_password(mongo_db):
    assert create_admin(mongo_db, "boss@example.com", "Boss", "weak") is None
    assert UserStore(mongo_db).count() == 0


def test_create_admin_twice(mongo_db, capsys):
    create_admin(mongo_db, "boss@example.com", "Boss", STRONG_PASSWORD)
    assert create_admin(mongo_db, "boss@example.com", "Boss", STRONG_PASSWORD) is None
    assert "already registered" in capsys.readouterr().out


def test_import_products(mongo_db, tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {"artist": "Can", "albumName": "Tago Mago", "description": "Double LP.", "price": 30},
                {"artist": "Can", "albumName": "Ege Bamyasi", "description": "1972.", "price": 28, "stock": 2},
                {"artist": "Can", "albumName": "Tago Mago", "description": "Repress.", "price": 30},
                {"artist": "Can", "albumName": "Future Days", "description": "1973.", "price": -1},
            ]
        ),
        encoding="utf-8",
    )
    assert import_products(mongo_db, str(path)) == (2, 2)
    names = [p.album_name for p in ProductStore(mongo_db).list_products()]
    assert names == ["Ege Bamyasi", "Tago Mago"]


def test_import_products_bad_file(mongo_db, tmp_path, capsys):
    path = tmp_path / "catalog.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")
    assert import_products(mongo_db, str(path)) == (0, 0)
    assert "JSON array" in capsys.readouterr().out
    assert import_products(mongo_db, str(tmp_path / "missing.json")) == (0, 0)
