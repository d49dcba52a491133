# tests/test_repository.py
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.errors import ProductNotFoundError, StoreError
from app.repositories.product import SqlAlchemyProductRepository
from app.schemas.product import ProductCreate


def _data(**overrides) -> ProductCreate:
    payload = {"name": "Tofu", "description": "Fresh tofu", "price": 5000, "stock": 20}
    payload.update(overrides)
    return ProductCreate(**payload)


def test_create_then_get(db: Session):
    repo = SqlAlchemyProductRepository(db)
    obj = repo.create(_data())
    assert isinstance(obj.id, int)
    assert obj.created_at is not None

    again = repo.get_by_id(obj.id)
    assert again is not None
    assert again.name == "Tofu"
    assert again.price == Decimal("5000.00")


def test_get_missing_returns_none(db: Session):
    assert SqlAlchemyProductRepository(db).get_by_id(1) is None


def test_list_all_is_ordered_by_id(db: Session):
    repo = SqlAlchemyProductRepository(db)
    ids = [repo.create(_data(name=n)).id for n in ("a", "b", "c")]
    assert [p.id for p in repo.list_all()] == ids


def test_update_skips_non_fillable_keys(db: Session):
    repo = SqlAlchemyProductRepository(db)
    obj = repo.create(_data())
    updated = repo.update(obj.id, {"stock": 5, "id": 999})
    assert updated.id == obj.id
    assert updated.stock == 5
    assert updated.name == "Tofu"


def test_update_and_delete_missing_raise_not_found(db: Session):
    repo = SqlAlchemyProductRepository(db)
    with pytest.raises(ProductNotFoundError):
        repo.update(7, {"name": "x"})
    with pytest.raises(ProductNotFoundError):
        repo.delete(7)


def test_delete_removes_row(db: Session):
    repo = SqlAlchemyProductRepository(db)
    obj = repo.create(_data())
    repo.delete(obj.id)
    assert repo.get_by_id(obj.id) is None


def test_commit_failure_is_wrapped_as_store_error(db: Session, monkeypatch):
    repo = SqlAlchemyProductRepository(db)

    def _boom():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", _boom)
    with pytest.raises(StoreError):
        repo.create(_data())


def test_get_by_id_outside_bigint_range_is_none(db: Session):
    repo = SqlAlchemyProductRepository(db)
    repo.create(_data())
    assert repo.get_by_id(2**63) is None
    assert repo.get_by_id(-(2**63) - 1) is None
    with pytest.raises(ProductNotFoundError):
        repo.update(10**20, {"stock": 1})
    with pytest.raises(ProductNotFoundError):
        repo.delete(10**20)
