# app/main.py
from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Sequence, cast

from fastapi import FastAPI, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.errors import AppError, StoreError, ValidationError
from app.core.logging import setup_logging
from app.core.settings import settings
from app.database import get_db, engine, init_db_if_requested
from app.routers.product import router as products_router

# --- Config ---
APP_TITLE = settings.APP_TITLE
APP_VERSION = settings.APP_VERSION
ROOT_PATH = settings.ROOT_PATH
OPENAPI_URL = None if settings.DISABLE_DOCS else "/openapi.json"
DOCS_URL = None if settings.DISABLE_DOCS else "/docs"
REDOC_URL = None if settings.DISABLE_DOCS else "/redoc"
MAX_BODY_SIZE_BYTES = settings.MAX_BODY_SIZE_BYTES

APP_STARTED_MONO = time.monotonic()
APP_STARTED_TS = int(time.time())

# --- Logging ---
logger = setup_logging(settings.LOG_LEVEL)

tags_metadata = [
    {"name": "health", "description": "Liveness/Readiness checks"},
    {"name": "products", "description": "Product CRUD"},
]

def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, apoi X-Correlation-ID; dacă lipsesc, generează unul.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )

def _json_error(request: Request, status_code: int, content: dict, headers: dict | None = None) -> JSONResponse:
    headers = dict(headers or {})
    headers.setdefault("X-Request-ID", _get_req_id_from_headers(request))
    return JSONResponse(status_code=status_code, content=content, headers=headers)

# --- Middleware func (registered after app is created) ---
async def request_context_mw(request: Request, call_next):
    """
    - Generează/propagă X-Request-ID
    - Aplică headers de securitate
    - Limitează mărimea corpului când Content-Length e disponibil
    - Server-Timing / X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)

    # Body-size guard (non-intruziv, pe Content-Length)
    if MAX_BODY_SIZE_BYTES > 0:
        cl = request.headers.get("content-length")
        if cl is not None and cl.isdigit() and int(cl) > MAX_BODY_SIZE_BYTES:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": "Payload too large", "max_bytes": MAX_BODY_SIZE_BYTES},
                headers={"X-Request-ID": req_id},
            )

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    # Security + perf headers
    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Cache-Control", "no-store")
    response.headers.setdefault("X-App-Version", APP_VERSION)
    response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.1f}")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    return response

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: creează tabelele (dacă e cerut) + sanity check DB
    try:
        init_db_if_requested()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("DB startup check OK (dialect=%s)", engine.dialect.name)
    except Exception:
        logger.exception("DB startup check FAILED")

    # Ready to serve
    yield

# --- App factory (create app BEFORE registering middleware) ---
app = FastAPI(
    title=APP_TITLE,
    version=APP_VERSION,
    description=settings.APP_DESCRIPTION,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    root_path=ROOT_PATH or "",
    docs_url=DOCS_URL,
    redoc_url=REDOC_URL,
    openapi_url=OPENAPI_URL,
)

# Register middleware now that app exists
app.middleware("http")(request_context_mw)
app.add_middleware(GZipMiddleware, minimum_size=1024)

# Trusted hosts (opțional): TRUSTED_HOSTS="localhost,127.0.0.1,.example.com"
if settings.TRUSTED_HOSTS:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=cast(Sequence[str], settings.TRUSTED_HOSTS))  # type: ignore[arg-type]

# CORS din env: CORS_ORIGINS="http://localhost:3000,https://example.com"
if settings.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Server-Timing", "X-Process-Time", "X-App-Version"],
    )

# --- Exception handlers (ops-friendly) ---
@app.exception_handler(StoreError)
async def _store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error: %s", exc, exc_info=exc.__cause__ or exc)
    return _json_error(request, exc.status_code, {"detail": "Internal Server Error"})

@app.exception_handler(AppError)
async def _app_error_handler(request: Request, exc: AppError):
    return _json_error(request, exc.status_code, exc.to_content())

@app.exception_handler(RequestValidationError)
async def _validation_handler(request: Request, exc: RequestValidationError):
    err = ValidationError.from_pydantic(exc.errors())
    logger.info("validation failed on %s %s: fields=%s", request.method, request.url.path, err.fields)
    return _json_error(request, err.status_code, err.to_content())

# Prinde 404/405 Starlette și răspunde JSON unitar
@app.exception_handler(StarletteHTTPException)
async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = {"message": "Not Found", "path": str(request.url.path)}
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        detail = {"message": "Method Not Allowed", "path": str(request.url.path)}
    return _json_error(request, exc.status_code, {"detail": detail}, dict(exc.headers or {}))

@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {"detail": "Internal Server Error"})

# --- Routes: health ---
@app.get("/", tags=["health"])
def root():
    return {"name": APP_TITLE, "version": APP_VERSION}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

@app.get("/health/uptime", tags=["health"])
def health_uptime():
    return {"uptime_seconds": round(time.monotonic() - APP_STARTED_MONO, 3), "started_at": APP_STARTED_TS}

@app.get("/health/db", tags=["health"])
def health_db(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.warning("DB health check failed", exc_info=True)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="DB not ready")
    return {"status": "ok", "db": "up", "dialect": db.get_bind().dialect.name}

# --- Routers ---
app.include_router(products_router)


def run() -> None:
    """Entry point `products-api`: pornește uvicorn pe HOST/PORT din env."""
    import os

    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.LOG_LEVEL.lower(),
    )
