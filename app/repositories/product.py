# app/repositories/product.py
"""
Repository pentru produse.

`ProductRepository` e contractul folosit de router; implementarea SQLAlchemy
e singura concretă din aplicație (testele folosesc una in-memory).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import DataError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ProductNotFoundError, StoreError
from app.database import get_db
from app.models.product import Product
from app.schemas.product import ProductCreate

logger = logging.getLogger("products-api.repository")

# Câmpurile care pot fi scrise din payload (restul sunt gestionate de DB)
FILLABLE = ("name", "description", "price", "stock")

# INTEGER/BIGINT semnat pe 64 biți; în afara intervalului id-ul nu poate exista în tabel
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


class ProductRepository(ABC):

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Toate produsele, în ordinea inserării (id crescător)."""

    @abstractmethod
    def create(self, data: ProductCreate) -> Product:
        """Persistă un produs nou; DB atribuie `id`."""

    @abstractmethod
    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Returnează produsul după ID (sau None)."""

    @abstractmethod
    def update(self, product_id: int, changes: Mapping[str, Any]) -> Product:
        """Suprascrie doar câmpurile primite; ridică ProductNotFoundError."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Șterge definitiv produsul; ridică ProductNotFoundError."""


def _fillable(changes: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in changes.items() if k in FILLABLE}


class SqlAlchemyProductRepository(ProductRepository):
    """Implementare peste tabelul `products`; un commit per scriere."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_all(self) -> List[Product]:
        stmt = select(Product).order_by(Product.id.asc())
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise StoreError("Could not list products.") from e

    def get_by_id(self, product_id: int) -> Optional[Product]:
        if not ID_MIN <= product_id <= ID_MAX:
            return None
        try:
            return self.db.get(Product, product_id)
        except DataError:
            # ex. Postgres INTEGER (32 biți): id valid pe 64 biți dar în afara coloanei
            self.db.rollback()
            return None
        except SQLAlchemyError as e:
            raise StoreError(f"Could not load product {product_id}.") from e

    def create(self, data: ProductCreate) -> Product:
        obj = Product(**_fillable(data.model_dump()))
        self.db.add(obj)
        self._commit(obj, "create")
        logger.info("created product id=%s", obj.id)
        return obj

    def update(self, product_id: int, changes: Mapping[str, Any]) -> Product:
        obj = self.get_by_id(product_id)
        if obj is None:
            raise ProductNotFoundError(product_id)
        for k, v in _fillable(changes).items():
            setattr(obj, k, v)
        self._commit(obj, "update")
        logger.info("updated product id=%s fields=%s", product_id, sorted(_fillable(changes)))
        return obj

    def delete(self, product_id: int) -> None:
        obj = self.get_by_id(product_id)
        if obj is None:
            raise ProductNotFoundError(product_id)
        self.db.delete(obj)
        self._commit(None, "delete")
        logger.info("deleted product id=%s", product_id)

    def _commit(self, obj: Optional[Product], op: str) -> None:
        try:
            self.db.commit()
            if obj is not None:
                # reîncarcă valorile setate de DB (id, timestamps, NUMERIC rotunjit)
                self.db.refresh(obj)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Product {op} failed.") from e


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """FastAPI dependency; testele o pot înlocui prin app.dependency_overrides."""
    return SqlAlchemyProductRepository(db)
