from __future__ import annotations

from typing import Any, BinaryIO, Dict

import cloudinary
import cloudinary.uploader

from blessed_api.common.exceptions import ImageStoreError
from blessed_api.common.logger import logger
from blessed_api.settings.config import Settings

# kind -> подпапка в Cloudinary
FOLDERS: Dict[str, str] = {
    "product": "products",
    "drop": "drops",
}


class ImageStore:
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, root_folder: str = "blessed") -> None:
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.root_folder = root_folder.strip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageStore":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            root_folder=settings.CLOUDINARY_ROOT_FOLDER,
        )

    def folder_for(self, kind: str) -> str:
        if kind not in FOLDERS:
            raise ValueError(f"Unknown upload kind: {kind}")
        return f"{self.root_folder}/{FOLDERS[kind]}"

    def upload(self, kind: str, file: BinaryIO) -> Dict[str, str]:
        """-> {"url": secure_url, "public_id": public_id}"""
        folder = self.folder_for(kind)
        try:
            result: Dict[str, Any] = cloudinary.uploader.upload(file, folder=folder, resource_type="image")
        except Exception as exc:
            raise ImageStoreError(f"Upload to {folder} failed") from exc
        logger.info("Cloudinary upload: %s", result.get("public_id"))
        return {"url": result["secure_url"], "public_id": result["public_id"]}

    def delete(self, public_id: str) -> None:
        try:
            result = cloudinary.uploader.destroy(public_id)
        except Exception as exc:
            raise ImageStoreError(f"Delete of {public_id} failed") from exc
        logger.info("Cloudinary destroy %s: %s", public_id, result.get("result"))
