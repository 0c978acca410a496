from pydantic import Field

from blessed_api.common.Schemas.base import CamelModel


class UploadOut(CamelModel):
    url: str
    public_id: str


class ImageDelete(CamelModel):
    public_id: str = Field(..., min_length=1)
