from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from blessed_api.common.exceptions import ConflictError, NotFoundError
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.drop_schemas import DropCreate, DropOut, DropUpdate
from blessed_api.common.Schemas.product_schemas import (
    ColorIn,
    ColorOut,
    ProductCreate,
    ProductOut,
    StockEntryOut,
)
from blessed_api.common.Schemas.stock_schemas import ProductStockOut, SizeQuantityIn, SizeStockOut
from blessed_api.common.tools.sizes import size_sort_key
from blessed_api.db.Models.drop_models import Drop
from blessed_api.db.Models.product_models import NO_COLOR, Product, ProductColor, ProductStock

ALL = "all"
UNIQUE_VIOLATION = "23505"

# ---------- служебные операции ----------

def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def _commit(db: Session, conflict_message: Optional[str] = None) -> None:
    """
    Коммит текущей транзакции; при любой ошибке -> rollback и проброс дальше.
    Нарушение уникальности превращается в ConflictError, если передано сообщение.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message and _is_unique_violation(exc):
            raise ConflictError(conflict_message) from exc
        raise
    except Exception:
        db.rollback()
        raise


def _unique(values: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


def _color_out(color: str) -> Optional[str]:
    return color if color != NO_COLOR else None


def _stock_sort_key(row: ProductStock) -> Tuple[Tuple[int, float, str], str]:
    return size_sort_key(row.size), row.color

# ---------- products ----------

def product_to_out(product: Product) -> ProductOut:
    colors: List[ColorOut] = []
    seen = set()
    for c in product.colors:
        if (c.name, c.hex) in seen:
            continue
        seen.add((c.name, c.hex))
        colors.append(ColorOut(name=c.name, hex=c.hex))

    stock = [
        StockEntryOut(size=row.size, color=_color_out(row.color), stock=row.stock)
        for row in sorted(product.stock, key=_stock_sort_key)
    ]
    fields = {col.name: getattr(product, col.name) for col in Product.__table__.columns}
    return ProductOut(**fields, colors=colors, stock=stock)


def _product_query():
    return select(Product).options(selectinload(Product.colors), selectinload(Product.stock))


def list_products(db: Session, drop: Optional[str] = None, cat: Optional[str] = None) -> List[ProductOut]:
    conditions = [Product.active.is_(True)]
    if drop and drop != ALL:
        conditions.append(Product.drop == drop)
    if cat and cat != ALL:
        conditions.append(Product.cat == cat)

    stmt = _product_query().where(*conditions).order_by(Product.created_at.desc())
    return [product_to_out(p) for p in db.scalars(stmt).all()]


def get_product(db: Session, product_id: str) -> ProductOut:
    stmt = _product_query().where(Product.id == product_id, Product.active.is_(True))
    product = db.scalar(stmt)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product_to_out(product)


def _unique_colors(colors: Sequence[ColorIn]) -> List[ColorIn]:
    by_name: Dict[str, ColorIn] = {}
    for c in colors:
        by_name.setdefault(c.name, c)
    return list(by_name.values())


def create_product(db: Session, payload: ProductCreate, default_sizes: Sequence[str]) -> ProductOut:
    """
    Товар + цвета + нулевой сток одной транзакцией.
    Сток: по строке на размер (без цветов) или на каждую пару размер x цвет.
    """
    sizes = _unique(payload.sizes if payload.sizes is not None else default_sizes)
    colors = _unique_colors(payload.colors)

    product = Product(
        id=payload.id,
        name=payload.name,
        cat=payload.cat,
        drop=payload.drop,
        price=payload.price,
        original_price=payload.original_price,
        is_new=payload.is_new,
        is_sale=payload.is_sale,
        image=payload.image,
        image_hover=payload.image_hover,
        images=list(payload.images),
        description=payload.description,
    )
    product.colors = [ProductColor(name=c.name, hex=c.hex) for c in colors]
    color_names = [c.name for c in colors] or [NO_COLOR]
    product.stock = [ProductStock(size=s, color=c, stock=0) for s in sizes for c in color_names]

    db.add(product)
    _commit(db, conflict_message=f'A product with id "{payload.id}" already exists')
    logger.info(
        "create_product: id=%s, colors=%s, stock_rows=%s",
        payload.id, len(colors), len(sizes) * len(color_names),
    )
    return product_to_out(product)


def delete_product(db: Session, product_id: str) -> None:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    db.delete(product)
    _commit(db)
    logger.info("delete_product: id=%s", product_id)

# ---------- product images ----------

def _get_product_row(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def _save_images(db: Session, product: Product, images: List[str]) -> List[str]:
    # JSON-колонка: присваиваем новый список, иначе ORM не увидит изменения
    product.images = images
    _commit(db)
    return list(product.images or [])


def add_product_image(db: Session, product_id: str, url: str) -> List[str]:
    product = _get_product_row(db, product_id)
    return _save_images(db, product, [*(product.images or []), url])


def remove_product_image(
    db: Session,
    product_id: str,
    url: Optional[str] = None,
    index: Optional[int] = None,
) -> List[str]:
    """
    Удаление по точному URL (все вхождения) или по 0-based индексу (ровно один элемент).
    Индекс вне диапазона оставляет список без изменений.
    """
    if url is None and index is None:
        raise ValueError("Either url or index is required")

    product = _get_product_row(db, product_id)
    images = list(product.images or [])
    if url is not None:
        images = [i for i in images if i != url]
    elif 0 <= index < len(images):
        images = images[:index] + images[index + 1:]
    return _save_images(db, product, images)


def replace_product_images(db: Session, product_id: str, images: List[str]) -> List[str]:
    product = _get_product_row(db, product_id)
    return _save_images(db, product, list(images))

# ---------- drops ----------

def list_drops(db: Session, include_inactive: bool = False) -> List[DropOut]:
    stmt = select(Drop)
    if not include_inactive:
        stmt = stmt.where(Drop.active.is_(True))
    stmt = stmt.order_by(Drop.number.asc(), Drop.created_at.asc())
    return [DropOut.model_validate(d) for d in db.scalars(stmt).all()]


def get_drop(db: Session, drop_id: str, active_only: bool = True) -> DropOut:
    stmt = select(Drop).where(Drop.id == drop_id)
    if active_only:
        stmt = stmt.where(Drop.active.is_(True))
    drop = db.scalar(stmt)
    if drop is None:
        raise NotFoundError(f"Drop {drop_id} not found")
    return DropOut.model_validate(drop)


def create_drop(db: Session, payload: DropCreate) -> DropOut:
    drop = Drop(**payload.to_row())
    db.add(drop)
    _commit(db, conflict_message=f'A drop with id "{payload.id}" already exists')
    logger.info("create_drop: id=%s", payload.id)
    return DropOut.model_validate(drop)


def update_drop(db: Session, drop_id: str, payload: DropUpdate) -> DropOut:
    drop = db.get(Drop, drop_id)
    if drop is None:
        raise NotFoundError(f"Drop {drop_id} not found")

    changes = payload.model_dump(exclude={"hero_image2"}, exclude_none=True)
    for field, value in changes.items():
        setattr(drop, field, value)
    # hero_image2 пишется всегда: не передали -> очищаем
    drop.hero_image2 = payload.hero_image2

    _commit(db)
    logger.info("update_drop: id=%s, fields=%s", drop_id, sorted(changes) + ["hero_image2"])
    return DropOut.model_validate(drop)


def delete_drop(db: Session, drop_id: str) -> None:
    result = db.execute(delete(Drop).where(Drop.id == drop_id))
    if not result.rowcount:
        db.rollback()
        raise NotFoundError(f"Drop {drop_id} not found")
    _commit(db)
    logger.info("delete_drop: id=%s", drop_id)

# ---------- stock ----------

def to_product_stock(product_id: str, product_name: str, rows: Iterable[ProductStock]) -> ProductStockOut:
    sizes = []
    for row in sorted(rows, key=_stock_sort_key):
        reserved = 0  # резервы в реляционной схеме не ведутся
        sizes.append(
            SizeStockOut(
                size=row.size,
                color=_color_out(row.color),
                quantity=row.stock,
                reserved=reserved,
                available=max(0, row.stock - reserved),
            )
        )
    return ProductStockOut(
        product_id=product_id,
        product_name=product_name or "",
        sizes=sizes,
        total_available=sum(s.available for s in sizes),
    )


def list_stock(db: Session) -> List[ProductStockOut]:
    stmt = (
        select(Product)
        .options(selectinload(Product.stock))
        .where(Product.stock.any())
        .order_by(Product.id)
    )
    return [to_product_stock(p.id, p.name, p.stock) for p in db.scalars(stmt).all()]


def get_stock(db: Session, product_id: str) -> ProductStockOut:
    rows = db.scalars(select(ProductStock).where(ProductStock.product_id == product_id)).all()
    if not rows:
        raise NotFoundError(f"No stock for product {product_id}")
    name = db.scalar(select(Product.name).where(Product.id == product_id))
    return to_product_stock(product_id, name, rows)


def set_stock(db: Session, product_id: str, entry: SizeQuantityIn) -> ProductStockOut:
    """Upsert одной строки (размер, цвет) -> quantity."""
    _get_product_row(db, product_id)
    color = entry.color or NO_COLOR

    row = db.scalar(
        select(ProductStock).where(
            ProductStock.product_id == product_id,
            ProductStock.size == entry.size,
            ProductStock.color == color,
        )
    )
    if row is None:
        db.add(ProductStock(product_id=product_id, size=entry.size, color=color, stock=entry.quantity))
    else:
        row.stock = entry.quantity
    _commit(db)
    logger.info("set_stock: %s size=%s color=%s -> %s", product_id, entry.size, color or "-", entry.quantity)
    return get_stock(db, product_id)


def replace_stock(db: Session, product_id: str, entries: Sequence[SizeQuantityIn]) -> ProductStockOut:
    """Полная замена стока товара; повтор пары (размер, цвет) -> берётся последнее значение."""
    _get_product_row(db, product_id)

    merged: Dict[Tuple[str, str], int] = {}
    for e in entries:
        merged[(e.size, e.color or NO_COLOR)] = e.quantity

    try:
        db.execute(delete(ProductStock).where(ProductStock.product_id == product_id))
        db.add_all(
            ProductStock(product_id=product_id, size=size, color=color, stock=qty)
            for (size, color), qty in merged.items()
        )
    except Exception:
        db.rollback()
        raise
    _commit(db)
    logger.info("replace_stock: %s rows=%s", product_id, len(merged))
    return get_stock(db, product_id)


def decrement_stock(
    db: Session,
    product_id: str,
    size: str,
    quantity: int = 1,
    color: Optional[str] = None,
) -> int:
    """
    Списать quantity единиц одним UPDATE (без read-modify-write), не ниже нуля.
    Нет такой строки -> 0 затронутых строк, без ошибки.
    """
    if quantity < 0:
        raise ValueError("quantity must be >= 0")

    stmt = (
        update(ProductStock)
        .where(
            ProductStock.product_id == product_id,
            ProductStock.size == size,
            ProductStock.color == (color or NO_COLOR),
        )
        .values(
            stock=case(
                (ProductStock.stock > quantity, ProductStock.stock - quantity),
                else_=0,
            )
        )
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
    except Exception:
        db.rollback()
        raise
    _commit(db)
    return result.rowcount
