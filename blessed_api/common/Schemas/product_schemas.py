from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from blessed_api.common.Schemas.base import CamelModel


class ColorIn(BaseModel):
    name: str = Field(..., min_length=1, description="Название цвета, например 'Negro'")
    hex: Optional[str] = Field(None, description="HEX-код цвета")


class ColorOut(BaseModel):
    name: str
    hex: Optional[str] = None


class StockEntryOut(BaseModel):
    """Одна строка product_stock в карточке товара."""
    size: str
    color: Optional[str] = None
    stock: int


class ProductCreate(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    cat: str = Field(..., min_length=1, description="Категория (tshirts, hoodies, …)")
    drop: str = Field(..., min_length=1, description="id дропа")
    price: float = Field(..., gt=0)
    original_price: float = Field(..., gt=0)
    is_new: bool = False
    is_sale: bool = False
    image: Optional[str] = None
    image_hover: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    colors: List[ColorIn] = Field(default_factory=list)
    sizes: Optional[List[str]] = Field(
        None, description="Размеры для начального (нулевого) стока; None -> размеры по умолчанию"
    )

    @field_validator("sizes")
    @classmethod
    def _sizes_not_blank(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = [s.strip() for s in v]
        if any(not s for s in cleaned):
            raise ValueError("sizes must be non-empty strings")
        return cleaned


class ProductOut(CamelModel):
    id: str
    name: str
    cat: str
    drop: str
    price: float
    original_price: Optional[float] = None
    is_new: bool = False
    is_sale: bool = False
    image: Optional[str] = None
    image_hover: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    colors: List[ColorOut] = Field(default_factory=list)
    stock: List[StockEntryOut] = Field(default_factory=list)


# ---------- images ----------

class ImageAdd(BaseModel):
    url: str = Field(..., min_length=1)


class ImageRemove(BaseModel):
    url: Optional[str] = None
    index: Optional[int] = Field(None, description="0-based индекс в массиве images")


class ImagesReplace(BaseModel):
    images: List[str]


class ImagesOut(BaseModel):
    images: List[str]
