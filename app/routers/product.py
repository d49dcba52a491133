# app/routers/product.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, status

from app.core.errors import ProductNotFoundError
from app.repositories.product import ProductRepository, get_product_repository
from app.schemas.product import (
    MessageResponse,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)

router = APIRouter(prefix="/products", tags=["products"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Product not found"}}
_INVALID = {status.HTTP_422_UNPROCESSABLE_ENTITY: {"description": "The given data was invalid"}}


@router.get(
    "",
    response_model=List[ProductRead],
    summary="List products",
    description="Returns every product, in insertion order. No pagination.",
)
def list_products(repo: ProductRepository = Depends(get_product_repository)):
    return repo.list_all()


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Stores a new product; `name`, `description`, `price` and `stock` are required.",
    responses=_INVALID,
)
def create_product(payload: ProductCreate, repo: ProductRepository = Depends(get_product_repository)):
    return repo.create(payload)


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    summary="Get a product by id",
    responses=_NOT_FOUND,
)
def get_product(
    product_id: int = Path(..., description="Product id"),
    repo: ProductRepository = Depends(get_product_repository),
):
    obj = repo.get_by_id(product_id)
    if obj is None:
        raise ProductNotFoundError(product_id)
    return obj


_UPDATE_DESC = "Partial update: fields present in the body overwrite, absent fields are kept."


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    summary="Update a product",
    description=_UPDATE_DESC,
    responses={**_NOT_FOUND, **_INVALID},
)
@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    summary="Update a product (PATCH alias of PUT, not part of the original contract)",
    description=_UPDATE_DESC,
    responses={**_NOT_FOUND, **_INVALID},
)
def update_product(
    product_id: int = Path(..., description="Product id"),
    payload: Optional[ProductUpdate] = Body(None),
    repo: ProductRepository = Depends(get_product_repository),
):
    # fără body = submulțimea vidă: produsul rămâne neschimbat
    return repo.update(product_id, payload.changes() if payload else {})


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
    responses=_NOT_FOUND,
)
def delete_product(
    product_id: int = Path(..., description="Product id"),
    repo: ProductRepository = Depends(get_product_repository),
):
    repo.delete(product_id)
    return MessageResponse(message="Product deleted")
