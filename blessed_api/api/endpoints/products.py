from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from starlette import status

from blessed_api.api.deps import get_app_settings
from blessed_api.common.exceptions import ConflictError, NotFoundError
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.product_schemas import (
    ImageAdd,
    ImageRemove,
    ImagesOut,
    ImagesReplace,
    ProductCreate,
    ProductOut,
)
from blessed_api.db import CRUD
from blessed_api.db.database import get_db
from blessed_api.settings.config import Settings

router: APIRouter = APIRouter(prefix="/api/products", tags=["products"])

# ---------------- Catalog ---------------- #

@router.get("", response_model=List[ProductOut])
def list_products(
    drop: Optional[str] = Query(None, description="id дропа или 'all'"),
    cat: Optional[str] = Query(None, description="Категория или 'all'"),
    db: Session = Depends(get_db),
) -> List[ProductOut]:
    try:
        return CRUD.list_products(db, drop=drop, cat=cat)
    except Exception:
        logger.error("GET /api/products error (drop=%s, cat=%s)", drop, cat, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch products",
        )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)) -> ProductOut:
    try:
        return CRUD.get_product(db, product_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("GET /api/products/%s error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch product",
        )


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ProductOut:
    """
    Создаёт товар вместе с цветами и нулевым стоком (одна транзакция).
    """
    try:
        return CRUD.create_product(db, payload, default_sizes=settings.default_sizes)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.error("POST /api/products error (id=%s)", payload.id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create product",
        )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        CRUD.delete_product(db, product_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("DELETE /api/products/%s error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not delete product",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ---------------- Images ---------------- #

@router.post("/{product_id}/images", response_model=ImagesOut)
def add_image(product_id: str, payload: ImageAdd, db: Session = Depends(get_db)) -> ImagesOut:
    try:
        return ImagesOut(images=CRUD.add_product_image(db, product_id, payload.url))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("POST /api/products/%s/images error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not add image",
        )


@router.delete("/{product_id}/images", response_model=ImagesOut)
def remove_image(
    product_id: str,
    payload: Optional[ImageRemove] = None,
    db: Session = Depends(get_db),
) -> ImagesOut:
    """
    Body: { "url": "..." } или { "index": 2 } (0-based).
    """
    payload = payload or ImageRemove()
    try:
        return ImagesOut(
            images=CRUD.remove_product_image(db, product_id, url=payload.url, index=payload.index)
        )
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Either url or index is required")
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("DELETE /api/products/%s/images error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not remove image",
        )


@router.put("/{product_id}/images", response_model=ImagesOut)
def reorder_images(product_id: str, payload: ImagesReplace, db: Session = Depends(get_db)) -> ImagesOut:
    try:
        return ImagesOut(images=CRUD.replace_product_images(db, product_id, payload.images))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.error("PUT /api/products/%s/images error", product_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not reorder images",
        )
