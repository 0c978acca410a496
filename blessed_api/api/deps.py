from starlette.requests import Request

from blessed_api.common.tools.image_store import ImageStore
from blessed_api.common.tools.payment_gateway import PaymentGateway
from blessed_api.settings.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store
