from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette import status

from blessed_api.common.exceptions import NotFoundError
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.stock_schemas import ProductStockOut, SizeQuantityIn, StockReplace
from blessed_api.db import CRUD
from blessed_api.db.database import get_db

router: APIRouter = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("", response_model=List[ProductStockOut])
def list_stock(db: Session = Depends(get_db)) -> List[ProductStockOut]:
    try:
        return CRUD.list_stock(db)
    except Exception:
        logger.error("[Stock] GET /api/stock error", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch stock",
        )


@router.get("/{product_id}", response_model=ProductStockOut)
def get_stock(product_id: str, db: Session = Depends(get_db)) -> ProductStockOut:
    try:
        return CRUD.get_stock(db, product_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found in stock")
    except Exception:
        logger.error("[Stock] GET /api/stock/%s error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch stock",
        )


@router.patch("/{product_id}", response_model=ProductStockOut)
def set_stock(product_id: str, payload: SizeQuantityIn, db: Session = Depends(get_db)) -> ProductStockOut:
    """
    Body: { "size": "M", "quantity": 5, "color": "Negro" | null }
    Создаёт строку (размер, цвет), если её нет, иначе перезаписывает quantity.
    """
    try:
        return CRUD.set_stock(db, product_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("[Stock] PATCH /api/stock/%s error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update stock",
        )


@router.put("/{product_id}", response_model=ProductStockOut)
def replace_stock(product_id: str, payload: StockReplace, db: Session = Depends(get_db)) -> ProductStockOut:
    """
    Body: { "sizes": [{ "size": "M", "quantity": 5, "color": null }, ...] }
    Полностью заменяет сток товара.
    """
    try:
        return CRUD.replace_stock(db, product_id, payload.sizes)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("[Stock] PUT /api/stock/%s error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update stock",
        )
