from __future__ import annotations

from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # storage
    DATABASE_URL: str = "sqlite:///./blessed.db"
    CREATE_TABLES: bool = True

    # public URLs
    FRONTEND_URL: str = "http://localhost:4200"
    BACKEND_URL: str = "http://localhost:3000"

    # Mercado Pago
    MP_ACCESS_TOKEN: str = ""
    MP_CURRENCY_ID: str = "ARS"
    MP_INSTALLMENTS: int = 3

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_ROOT_FOLDER: str = "blessed"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024

    # catalog
    DEFAULT_SIZES: str = "S,M,L,XL"

    # server
    CORS_ORIGINS: str = ""
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    @property
    def default_sizes(self) -> List[str]:
        return [s.strip() for s in self.DEFAULT_SIZES.split(",") if s.strip()]

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
        return origins or [self.FRONTEND_URL]

    @property
    def frontend_url(self) -> str:
        return self.FRONTEND_URL.rstrip("/")

    @property
    def backend_url(self) -> str:
        return self.BACKEND_URL.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
