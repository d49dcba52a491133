# app/database.py
from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from app.core.settings import Settings, settings

logger = logging.getLogger("products-api.db")

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:", "sqlite+pysqlite://"}

# -----------------------------
# Helpers
# -----------------------------
def _mask_url(url: str) -> str:
    if "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    if "@" not in rest or ":" not in rest.split("@", 1)[0]:
        return url
    creds, tail = rest.split("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{tail}"

def _safe_schema(name: Optional[str]) -> Optional[str]:
    """Acceptă doar identificatori ne-citați; altfel ignoră schema (fallback: fără schemă)."""
    if not name:
        return None
    if not _IDENT_RE.fullmatch(name):
        logger.warning("Invalid DB_SCHEMA from env: %r. Using default schema.", name)
        return None
    return name

DEFAULT_SCHEMA = _safe_schema(settings.DB_SCHEMA)

# -----------------------------
# Naming convention (nume stabile pentru constrângeri/indexuri)
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(schema=DEFAULT_SCHEMA, naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)  # schema implicită pentru toate modelele

# -----------------------------
# Engine factory
# -----------------------------
def _build_engine_kwargs(cfg: Settings) -> dict:
    url = cfg.DATABASE_URL
    kwargs: dict = {"echo": cfg.DB_ECHO, "pool_pre_ping": True}

    if cfg.is_sqlite:
        # SQLite: single-thread în driver → dezactivează check_same_thread
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory → StaticPool (altfel fiecare conexiune are DB separat)
        if url in _MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
        else:
            # Pentru fișiere, NullPool e ok (pooling are beneficii reduse la SQLite)
            kwargs["poolclass"] = NullPool
    else:
        kwargs.update(
            {
                "pool_size": cfg.DB_POOL_SIZE,
                "max_overflow": cfg.DB_MAX_OVERFLOW,
                "pool_recycle": cfg.DB_POOL_RECYCLE,
                "pool_timeout": cfg.DB_POOL_TIMEOUT,
                "pool_use_lifo": True,
            }
        )
    return kwargs

engine: Engine = create_engine(settings.DATABASE_URL, **_build_engine_kwargs(settings))
logger.debug("Engine created for %s", _mask_url(settings.DATABASE_URL))

# -----------------------------
# Session factory
# -----------------------------
# expire_on_commit=False → obiectele rămân utilizabile după commit (evită re-load imediat)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency pentru o sesiune SQLAlchemy închisă garantat.
    Face rollback automat dacă apare o excepție în request handler.
    """
    db: Session = SessionLocal()
    try:
        yield db
        # commit-ul e responsabilitatea repository-ului
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Context manager util în scripturi/teste (non-FastAPI).
    Exemplu:
        with session_scope() as db:
            db.add(obj)
    """
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def _ensure_schema() -> None:
    """
    Creează schema DEFAULT_SCHEMA dacă lipsește (doar dacă DB_CREATE_SCHEMA_IF_MISSING=1).
    Nu are sens pe SQLite.
    """
    if settings.DB_CREATE_SCHEMA_IF_MISSING and DEFAULT_SCHEMA and not settings.is_sqlite:
        with engine.begin() as conn:
            conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{DEFAULT_SCHEMA}"')

def init_db_if_requested() -> None:
    """
    Creează tabelele din modele când SQLALCHEMY_CREATE_ALL=1 (implicit).
    create_all e idempotent: tabelele existente nu sunt atinse.
    """
    _ensure_schema()
    if settings.SQLALCHEMY_CREATE_ALL:
        from app.models import product  # noqa: F401
        Base.metadata.create_all(bind=engine)
        logger.info("Tables ensured (schema=%s)", DEFAULT_SCHEMA or "<default>")

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_db",
    "session_scope",
    "init_db_if_requested",
]
