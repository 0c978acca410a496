from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, field_validator

from blessed_api.common.Schemas.base import CamelModel

Quantity = Annotated[int, Field(ge=0, strict=True, description="Целое >= 0")]


class SizeStockOut(BaseModel):
    size: str
    color: Optional[str] = None
    quantity: int
    reserved: int = 0
    available: int


class ProductStockOut(CamelModel):
    product_id: str
    product_name: str = ""
    sizes: List[SizeStockOut]
    total_available: int


class SizeQuantityIn(BaseModel):
    size: str = Field(..., min_length=1)
    quantity: Quantity
    color: Optional[str] = None

    @field_validator("size")
    @classmethod
    def _size_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("size must be a non-empty string")
        return v.strip()

    @field_validator("color")
    @classmethod
    def _blank_color_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class StockReplace(BaseModel):
    sizes: List[SizeQuantityIn] = Field(..., min_length=1)
