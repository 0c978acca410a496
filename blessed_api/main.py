from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette import status

from blessed_api.api.endpoints import checkout, drops, health, products, stock, uploads
from blessed_api.common.logger import logger
from blessed_api.common.tools.image_store import ImageStore
from blessed_api.common.tools.payment_gateway import PaymentGateway
from blessed_api.db.database import Database
from blessed_api.settings.config import Settings, get_settings


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    payment_gateway: Optional[PaymentGateway] = None,
    image_store: Optional[ImageStore] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = Database(settings.DATABASE_URL)
        if settings.CREATE_TABLES:
            database.create_all()
        app.state.database = database
        app.state.payment_gateway = payment_gateway or PaymentGateway(settings.MP_ACCESS_TOKEN)
        app.state.image_store = image_store or ImageStore.from_settings(settings)
        logger.info("Starting app ..... (db=%s)", database.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            database.dispose()
            logger.info("Database pool disposed")

    app = FastAPI(title="Blessed Store API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(drops.router)
    app.include_router(stock.router)
    app.include_router(uploads.router)
    app.include_router(checkout.router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)
