from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from blessed_api.db.database import Base

DEFAULT_ACCENT_COLOR = "#e8e4dc"


class Drop(Base):
    __tablename__ = "drops"
    id = Column(String, primary_key=True)
    number = Column(Integer, nullable=False, index=True)
    label = Column(String, nullable=False)
    tagline = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    hero_image = Column(String, nullable=False)
    hero_image2 = Column(String, nullable=True)
    accent_color = Column(String, nullable=False, default=DEFAULT_ACCENT_COLOR)
    release_date = Column(Date, nullable=False)
    total_pieces = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
