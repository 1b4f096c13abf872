"""
catalog/models.py -- Domain dataclass and schema rules for catalog products.

A Product is one album listing. validate_product() is the write-time rule set;
catalog/store.py runs it before every insert.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from core.validation import SchemaValidator, ValidationResult

MAX_GENRES = 5
MAX_TAG_LENGTH = 32
MAX_DESCRIPTION_LENGTH = 1500


@dataclass
class Product:
    """An album in the catalog.

    album_name and description are each unique across the catalog.
    genre holds at most MAX_GENRES tags.

    id is None before the record is written to the database.
    """

    artist: str
    album_name: str
    description: str
    price: float
    stock: int = 0
    details: list[str] = field(default_factory=list)
    genre: list[str] = field(default_factory=list)
    track_list: Optional[str] = None
    id: Optional[str] = None


def validate_product(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a Product document keyed by its stored (camelCase) field names."""
    v = SchemaValidator(data)
    v.string("artist", required=True, trim=True, min_length=1)
    v.string("albumName", required=True, trim=True, min_length=1)
    v.string("description", required=True, trim=True, min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    v.string_list("details", max_item_length=MAX_TAG_LENGTH)
    v.string_list(
        "genre",
        trim=True,
        max_item_length=MAX_TAG_LENGTH,
        max_items=MAX_GENRES,
        max_items_message=f"{MAX_GENRES} genres only allowed.",
    )
    v.string("trackList")
    v.number("price", required=True, minimum=0)
    v.number("stock", minimum=0, integer=True, default=0)
    return v.result()
