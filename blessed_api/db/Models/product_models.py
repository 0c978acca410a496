from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from blessed_api.db.database import Base

# в product_stock.color пустая строка = "без цвета" (NULL ломает UNIQUE)
NO_COLOR = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    cat = Column(String, nullable=False, index=True)
    drop = Column(String, nullable=False, index=True)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    original_price = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    is_new = Column(Boolean, nullable=False, default=False)
    is_sale = Column(Boolean, nullable=False, default=False)
    image = Column(String, nullable=True)
    image_hover = Column(String, nullable=True)
    images = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())

    colors = relationship(
        "ProductColor",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductColor.name",
    )
    stock = relationship(
        "ProductStock",
        back_populates="product",
        cascade="all, delete-orphan",
    )


class ProductColor(Base):
    __tablename__ = "product_colors"
    __table_args__ = (UniqueConstraint("product_id", "name", name="uq_product_colors_product_name"),)
    id = Column(Integer, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    hex = Column(String, nullable=True)

    product = relationship("Product", back_populates="colors")


class ProductStock(Base):
    __tablename__ = "product_stock"
    __table_args__ = (
        UniqueConstraint("product_id", "size", "color", name="uq_product_stock_product_size_color"),
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )
    id = Column(Integer, primary_key=True)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False, default=NO_COLOR, server_default="")
    stock = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="stock")
