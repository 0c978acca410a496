from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from blessed_api.common.Schemas.base import CamelModel
from blessed_api.db.Models.drop_models import DEFAULT_ACCENT_COLOR


class DropCreate(CamelModel):
    id: str = Field(..., min_length=1)
    number: int = Field(..., gt=0, description="Порядковый номер дропа")
    label: str = Field(..., min_length=1)
    tagline: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    hero_image: str = Field(..., min_length=1)
    hero_image2: Optional[str] = None
    accent_color: Optional[str] = None
    release_date: date
    total_pieces: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "number": self.number,
            "label": self.label,
            "tagline": self.tagline,
            "description": self.description,
            "hero_image": self.hero_image,
            "hero_image2": self.hero_image2 or None,
            "accent_color": self.accent_color or DEFAULT_ACCENT_COLOR,
            "release_date": self.release_date,
            "total_pieces": self.total_pieces if self.total_pieces is not None else 0,
            "active": self.active if self.active is not None else True,
        }


class DropUpdate(CamelModel):
    """
    Все поля опциональны: None -> значение в БД не меняется.
    Исключение: hero_image2 записывается всегда (отсутствие = очистить).
    """
    number: Optional[int] = Field(None, gt=0)
    label: Optional[str] = None
    tagline: Optional[str] = None
    description: Optional[str] = None
    hero_image: Optional[str] = None
    hero_image2: Optional[str] = None
    accent_color: Optional[str] = None
    release_date: Optional[date] = None
    total_pieces: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class DropOut(CamelModel):
    id: str
    number: int
    label: str
    tagline: str
    description: str
    hero_image: str
    hero_image2: Optional[str] = None
    accent_color: str
    release_date: date
    total_pieces: int
    active: bool
    created_at: Optional[datetime] = None
