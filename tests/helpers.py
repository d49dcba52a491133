# tests/helpers.py
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from fastapi.testclient import TestClient


# --- Utilitare ----------------------------------------------------------------
def dump_response(r: httpx.Response) -> str:
    """Diagnostic compact pentru mesaje de aserție."""
    try:
        j = r.json()
    except Exception:
        j = None
    snippet = (r.text or "")[:500].replace("\n", "\\n")
    return (
        f"status={r.status_code} {r.request.method} {r.request.url} "
        f"json={j!r} text='{snippet}...'"
    )


def assert_status(r: httpx.Response, expected: int | tuple[int, ...]):
    if isinstance(expected, int):
        ok = r.status_code == expected
        exp_str = str(expected)
    else:
        ok = r.status_code in expected
        exp_str = "|".join(map(str, expected))
    assert ok, f"expected {exp_str} but got: {dump_response(r)}"


def product_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": "Tofu",
        "description": "Fresh tofu",
        "price": 5000,
        "stock": 20,
    }
    payload.update(overrides)
    return payload


def create_product(c: TestClient, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    r = c.post("/products", json=payload or product_payload())
    assert_status(r, 201)
    j = r.json()
    assert "id" in j and isinstance(j["id"], int), j
    return j
