from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from starlette import status

from blessed_api.common.exceptions import ConflictError, NotFoundError
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.drop_schemas import DropCreate, DropOut, DropUpdate
from blessed_api.db import CRUD
from blessed_api.db.database import get_db

router: APIRouter = APIRouter(prefix="/api/drops", tags=["drops"])


@router.get("", response_model=List[DropOut])
def list_drops(db: Session = Depends(get_db)) -> List[DropOut]:
    try:
        return CRUD.list_drops(db)
    except Exception:
        logger.error("GET /api/drops error", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch drops",
        )


# объявлен до /{drop_id}, иначе "admin" уйдёт в drop_id
@router.get("/admin/all", response_model=List[DropOut])
def list_all_drops(db: Session = Depends(get_db)) -> List[DropOut]:
    """
    Админка: все дропы, включая неактивные.
    """
    try:
        return CRUD.list_drops(db, include_inactive=True)
    except Exception:
        logger.error("GET /api/drops/admin/all error", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch drops",
        )


@router.get("/{drop_id}", response_model=DropOut)
def get_drop(drop_id: str, db: Session = Depends(get_db)) -> DropOut:
    try:
        return CRUD.get_drop(db, drop_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Drop not found")
    except Exception:
        logger.error("GET /api/drops/%s error", drop_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch drop",
        )


@router.post("", response_model=DropOut, status_code=status.HTTP_201_CREATED)
def create_drop(payload: DropCreate, db: Session = Depends(get_db)) -> DropOut:
    try:
        return CRUD.create_drop(db, payload)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.error("POST /api/drops error (id=%s)", payload.id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create drop",
        )


@router.put("/{drop_id}", response_model=DropOut)
def update_drop(drop_id: str, payload: DropUpdate, db: Session = Depends(get_db)) -> DropOut:
    try:
        return CRUD.update_drop(db, drop_id, payload)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Drop not found")
    except Exception:
        logger.error("PUT /api/drops/%s error", drop_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update drop",
        )


@router.delete("/{drop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_drop(drop_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        CRUD.delete_drop(db, drop_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Drop not found")
    except Exception:
        logger.error("DELETE /api/drops/%s error", drop_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not delete drop",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
