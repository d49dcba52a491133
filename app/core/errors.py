# app/core/errors.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from fastapi import status


class AppError(Exception):
    """Bază pentru erorile mapate pe un cod HTTP de handler-ele din app.main."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_content(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class StoreError(AppError):
    """Eșec de persistență neclasificat; fatal pentru request, fără retry."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(AppError):
    """
    Unul sau mai multe câmpuri lipsă/invalide.
    `errors` mapează numele câmpului pe lista de mesaje.
    """
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "The given data was invalid."

    def __init__(self, errors: Mapping[str, List[str]], detail: Optional[str] = None) -> None:
        self.errors: Dict[str, List[str]] = {k: list(v) for k, v in errors.items()}
        super().__init__(detail)

    @property
    def fields(self) -> List[str]:
        return list(self.errors)

    def to_content(self) -> Dict[str, Any]:
        return {"detail": self.detail, "errors": self.errors}

    @classmethod
    def from_pydantic(cls, errors: Iterable[Mapping[str, Any]]) -> "ValidationError":
        """
        Construiește eroarea din `exc.errors()` (pydantic / FastAPI).
        loc=('body', 'price') -> 'price'; loc=('body',) -> 'body'.
        """
        out: Dict[str, List[str]] = {}
        for err in errors:
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
            field = ".".join(loc) if loc else str((err.get("loc") or ("body",))[0])
            out.setdefault(field, []).append(str(err.get("msg", "Invalid value")))
        return cls(out)


__all__ = [
    "AppError",
    "NotFoundError",
    "ProductNotFoundError",
    "StoreError",
    "ValidationError",
]
