"""
api/routes/products.py -- Catalog REST endpoints.

Routes:
  GET    /products               -- list products, optional ?genre= filter (public)
  GET    /products/{product_id}  -- product detail (public)
  POST   /products               -- create product (admin only)
  DELETE /products/{product_id}  -- hard delete (admin only)

Schema violations (including more than five genres) are 400; an album name
or description that already exists is 500, matching the account routes'
treatment of unique-index collisions.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pymongo.errors import PyMongoError

from api.models import DeleteResponse, ProductResponse
from auth.dependencies import require_admin
from auth.models import User
from catalog.store import ProductStore
from core.db import DuplicateDocumentError
from core.loggable import LoggableRequest
from core.validation import DocumentValidationError

logger = logging.getLogger("vinylstore.api.products")

router = APIRouter()


@router.get("/products", response_model=list[ProductResponse])
def list_products(request: Request, genre: Optional[str] = None) -> list[ProductResponse]:
    """Return every product, or only those tagged with genre."""
    product_store: ProductStore = request.app.state.product_store
    return [ProductResponse.from_product(p) for p in product_store.list_products(genre=genre)]


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(request: Request, product_id: str) -> ProductResponse:
    product_store: ProductStore = request.app.state.product_store
    product = product_store.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    return ProductResponse.from_product(product)


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: Request,
    body: dict[str, Any] = Body(...),
    current_user: User = Depends(require_admin),
) -> ProductResponse:
    """Add an album to the catalog. Admin only."""
    logger.info("POST /products by %s %s", current_user.id, LoggableRequest.from_body(body))
    product_store: ProductStore = request.app.state.product_store
    try:
        product = product_store.create_product(body)
    except DocumentValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DuplicateDocumentError as exc:
        logger.warning("Product rejected: %s", exc)
        raise HTTPException(status_code=500, detail="A product with this album name or description already exists.") from exc
    except PyMongoError as exc:
        logger.exception("Product creation failed")
        raise HTTPException(status_code=500, detail="Could not create the product.") from exc
    return ProductResponse.from_product(product)


@router.delete("/products/{product_id}", response_model=DeleteResponse)
def delete_product(
    request: Request,
    product_id: str,
    current_user: User = Depends(require_admin),
) -> DeleteResponse:
    """Remove a product. Admin only. Unknown ids are 404."""
    product_store: ProductStore = request.app.state.product_store
    summary = product_store.delete_product(product_id)
    if summary["deletedCount"] == 0:
        raise HTTPException(status_code=404, detail="Product not found.")
    logger.info("Product %s deleted by %s", product_id, current_user.id)
    return DeleteResponse(acknowledged=summary["acknowledged"], deleted_count=summary["deletedCount"])
