# tests/conftest.py
from __future__ import annotations

import os

# Trebuie setate înainte de primul import din `app` (engine-ul se creează la import)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_SCHEMA"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.database import Base, engine, session_scope
from app.main import app
from app.models import product  # noqa: F401  (înregistrează tabelul în metadata)


# --- Fixuri -------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _reset_db() -> Iterator[None]:
    """Tabele curate pentru fiecare test (SQLite in-memory, StaticPool)."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db():
    with session_scope() as s:
        yield s
