class NotFoundError(LookupError):
    """Запрошенная сущность не найдена (404)."""


class ConflictError(Exception):
    """Сущность с таким id уже существует (409)."""


class PaymentGatewayError(Exception):
    """Mercado Pago вернул ошибку или недоступен."""


class ImageStoreError(Exception):
    """Cloudinary вернул ошибку или недоступен."""
