from __future__ import annotations

import io
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette import status
from starlette.concurrency import run_in_threadpool

from blessed_api.api.deps import get_app_settings, get_image_store
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.upload_schemas import ImageDelete, UploadOut
from blessed_api.common.tools.image_store import ImageStore
from blessed_api.settings.config import Settings

router: APIRouter = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.get("/")
def uploads_status() -> Dict[str, str]:
    return {"status": "ok"}


async def _upload(kind: str, file: Optional[UploadFile], store: ImageStore, settings: Settings) -> UploadOut:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File is required (field 'file')")

    # читаем на байт больше лимита, чтобы отличить "ровно лимит" от "больше"
    data = await file.read(settings.UPLOAD_MAX_BYTES + 1)
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.UPLOAD_MAX_BYTES} bytes",
        )

    try:
        result = await run_in_threadpool(store.upload, kind, io.BytesIO(data))
    except Exception:
        logger.error("Upload %s error (filename=%s)", kind, file.filename, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading image",
        )
    return UploadOut(url=result["url"], public_id=result["public_id"])


@router.post("/product", response_model=UploadOut)
async def upload_product_image(
    file: Optional[UploadFile] = File(None),
    store: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_app_settings),
) -> UploadOut:
    return await _upload("product", file, store, settings)


@router.post("/drop", response_model=UploadOut)
async def upload_drop_image(
    file: Optional[UploadFile] = File(None),
    store: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_app_settings),
) -> UploadOut:
    return await _upload("drop", file, store, settings)


@router.delete("")
async def delete_image(
    payload: ImageDelete,
    store: ImageStore = Depends(get_image_store),
) -> Dict[str, bool]:
    try:
        await run_in_threadpool(store.delete, payload.public_id)
    except Exception:
        logger.error("Delete image error (publicId=%s)", payload.public_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting image",
        )
    return {"ok": True}
