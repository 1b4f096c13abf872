"""Unit tests for catalog/store.py -- product persistence rules.

Covers:
- Genre lists of exactly five are stored; six are rejected before any write
- albumName and description uniqueness
- Defaults (stock=0) and unknown-field dropping
- list_products() ordering and genre filter; get/delete by id
"""

from __future__ import annotations

import pytest

from catalog.store import ProductStore
from core.db import DuplicateDocumentError
from core.validation import DocumentValidationError


def _album(name: str, artist: str = "Nina Simone", **extra) -> dict:
    body = {
        "artist": artist,
        "albumName": name,
        "description": f"{name} by {artist}.",
        "price": 24.5,
    }
    body.update(extra)
    return body


def test_five_genres_accepted(product_store: ProductStore) -> None:
    product = product_store.create_product(_album("Pastel Blues", genre=["jazz", "blues", "soul", "gospel", "folk"]))
    assert product.genre == ["jazz", "blues", "soul", "gospel", "folk"]
    assert product_store.get_product(product.id).genre == product.genre


def test_six_genres_rejected_and_not_written(product_store: ProductStore) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        product_store.create_product(_album("Too Many", genre=["a", "b", "c", "d", "e", "f"]))
    assert "5 genres only allowed." in str(excinfo.value)
    assert product_store.collection.count_documents({}) == 0


def test_defaults_and_unknown_fields(product_store: ProductStore) -> None:
    product = product_store.create_product(_album("Wild Is the Wind", color="red"))
    raw = product_store.collection.find_one({"albumName": "Wild Is the Wind"})
    assert product.stock == 0
    assert raw["stock"] == 0
    assert "color" not in raw


def test_duplicate_album_name(product_store: ProductStore) -> None:
    product_store.create_product(_album("Little Girl Blue"))
    with pytest.raises(DuplicateDocumentError):
        product_store.create_product(_album("Little Girl Blue", description="A different description."))


def test_duplicate_description(product_store: ProductStore) -> None:
    product_store.create_product(_album("Album A", description="Same words."))
    with pytest.raises(DuplicateDocumentError):
        product_store.create_product(_album("Album B", description="Same words."))


def test_list_products_sorted_and_filtered(product_store: ProductStore) -> None:
    product_store.create_product(_album("Mingus Ah Um", artist="Charles Mingus", genre=["jazz"]))
    product_store.create_product(_album("Blue", artist="Joni Mitchell", genre=["folk"]))
    product_store.create_product(_album("A Love Supreme", artist="John Coltrane", genre=["jazz", "spiritual"]))

    names = [p.album_name for p in product_store.list_products()]
    assert names == ["Mingus Ah Um", "A Love Supreme", "Blue"]

    jazz = [p.album_name for p in product_store.list_products(genre="jazz")]
    assert jazz == ["Mingus Ah Um", "A Love Supreme"]


def test_get_and_delete(product_store: ProductStore) -> None:
    product = product_store.create_product(_album("I Put a Spell on You"))
    assert product_store.get_product("bogus") is None
    assert product_store.delete_product(product.id) == {"acknowledged": True, "deletedCount": 1}
    assert product_store.get_product(product.id) is None
