# app/schemas/product.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, ValidationInfo, field_validator

# În JSON prețul iese ca număr (nu string, cum ar serializa pydantic un Decimal)
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _quantize_price(v: Decimal) -> Decimal:
    # Aliniază la NUMERIC(12,2) și evită erori de reprezentare
    return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ProductBase(BaseModel):
    """Câmpuri comune pentru produs; folosit la create/read."""
    name: str
    description: str
    price: Price
    stock: int

    model_config = ConfigDict(
        # oferă exemple utile în OpenAPI
        json_schema_extra={
            "examples": [
                {
                    "name": "Tofu",
                    "description": "Fresh tofu",
                    "price": 5000,
                    "stock": 20,
                }
            ]
        }
    )


class ProductCreate(ProductBase):
    """Payload pentru creare produs; toate câmpurile sunt obligatorii."""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)

    @field_validator("name", "description")
    @classmethod
    def _strip_nonempty(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v

    @field_validator("price")
    @classmethod
    def _price_quantize(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("price must be a finite number")
        return _quantize_price(v)


class ProductUpdate(BaseModel):
    """
    Payload pentru update parțial; toate câmpurile sunt opționale.
    Nu se aplică reguli de prezență/non-empty (ca la create) - doar conversia de tip.
    Cheile necunoscute (id, created_at, ...) sunt ignorate.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Price] = None
    stock: Optional[int] = None

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"price": 6000}]}
    )

    @field_validator("price")
    @classmethod
    def _price_quantize(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        if not v.is_finite():
            raise ValueError("price must be a finite number")
        return _quantize_price(v)

    def changes(self) -> Dict[str, Any]:
        """Doar câmpurile trimise explicit și non-null."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProductRead(ProductBase):
    """Răspuns pentru produs."""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
