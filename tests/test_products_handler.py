# tests/test_products_handler.py
"""Router-ul izolat de DB: repository-ul e înlocuit prin dependency_overrides."""
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.repositories.product import get_product_repository
from fakes import BrokenProductRepository, FakeProductRepository
from helpers import assert_status, create_product, product_payload


@pytest.fixture()
def repo() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture()
def fake_client(repo: FakeProductRepository) -> Iterator[TestClient]:
    app.dependency_overrides[get_product_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_product_repository, None)


def test_create_goes_through_repository(fake_client: TestClient, repo: FakeProductRepository):
    created = create_product(fake_client)
    stored = repo.get_by_id(created["id"])
    assert stored is not None
    assert stored.name == "Tofu"


def test_invalid_create_never_reaches_repository(fake_client: TestClient, repo: FakeProductRepository):
    r = fake_client.post("/products", json=product_payload(price="free"))
    assert_status(r, 422)
    assert repo.list_all() == []


def test_update_passes_only_supplied_fields(fake_client: TestClient, repo: FakeProductRepository):
    pid = create_product(fake_client)["id"]
    r = fake_client.put(f"/products/{pid}", json={"name": "Tempeh"})
    assert_status(r, 200)
    obj = repo.get_by_id(pid)
    assert obj.name == "Tempeh"
    assert obj.description == "Fresh tofu"
    assert obj.stock == 20


def test_price_is_serialized_as_json_number(fake_client: TestClient):
    created = create_product(fake_client, product_payload(price=10.5))
    assert isinstance(created["price"], float)
    assert created["price"] == 10.5


def test_store_failure_is_generic_500():
    app.dependency_overrides[get_product_repository] = lambda: BrokenProductRepository()
    with TestClient(app) as c:
        r = c.get("/products")
        assert_status(r, 500)
        assert r.json() == {"detail": "Internal Server Error"}
        assert r.headers.get("X-Request-ID")

        r = c.post("/products", json=product_payload())
        assert_status(r, 500)
