from typing import Any, BinaryIO, Dict, List

import pytest
from fastapi.testclient import TestClient

from blessed_api.common.exceptions import ImageStoreError, PaymentGatewayError
from blessed_api.main import create_app
from blessed_api.settings.config import Settings


class FakePaymentGateway:
    def __init__(self) -> None:
        self.preferences: List[Dict[str, Any]] = []
        self.payments: Dict[str, Dict[str, Any]] = {}
        self.lookups: List[Any] = []
        self.fail_create = False

    def create_preference(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail_create:
            raise PaymentGatewayError("gateway down")
        self.preferences.append(body)
        return {
            "id": "pref-123",
            "init_point": "https://www.mercadopago.com.ar/checkout/v1/redirect?pref_id=pref-123",
            "sandbox_init_point": "https://sandbox.mercadopago.com.ar/checkout/v1/redirect?pref_id=pref-123",
        }

    def get_payment(self, payment_id: Any) -> Dict[str, Any]:
        self.lookups.append(payment_id)
        key = str(payment_id)
        if key not in self.payments:
            raise PaymentGatewayError(f"payment {payment_id} not found")
        return self.payments[key]

    def approve(self, payment_id: str, cart_items: List[Dict[str, Any]], status: str = "approved") -> None:
        self.payments[payment_id] = {
            "id": int(payment_id),
            "status": status,
            "transaction_amount": 1000,
            "payer": {"email": "buyer@example.com"},
            "order": {"id": 42},
            "metadata": {"cart_items": cart_items},
        }


class FakeImageStore:
    def __init__(self) -> None:
        self.uploads: List[Dict[str, Any]] = []
        self.deleted: List[str] = []
        self.fail = False

    def upload(self, kind: str, file: BinaryIO) -> Dict[str, str]:
        if self.fail:
            raise ImageStoreError("store down")
        n = len(self.uploads) + 1
        self.uploads.append({"kind": kind, "size": len(file.read())})
        public_id = f"blessed/{kind}s/img{n}"
        return {"url": f"https://res.cloudinary.com/demo/image/upload/{public_id}.jpg", "public_id": public_id}

    def delete(self, public_id: str) -> None:
        if self.fail:
            raise ImageStoreError("store down")
        self.deleted.append(public_id)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        FRONTEND_URL="https://shop.example.com",
        BACKEND_URL="https://api.example.com",
        UPLOAD_MAX_BYTES=1024,
        DEFAULT_SIZES="S,M,L,XL",
    )


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def image_store() -> FakeImageStore:
    return FakeImageStore()


@pytest.fixture
def client(settings, gateway, image_store):
    app = create_app(settings, payment_gateway=gateway, image_store=image_store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client):
    db = client.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def product_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": "remera-blessed",
        "name": "Remera Blessed",
        "cat": "tshirts",
        "drop": "drop01",
        "price": 25000,
        "originalPrice": 30000,
        "images": ["assets/remera-1.jpg"],
        "description": "Algodón peinado",
    }
    payload.update(overrides)
    return payload


def drop_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": "drop01",
        "number": 1,
        "label": "DROP 01",
        "tagline": "Genesis",
        "description": "Primer drop",
        "hero_image": "assets/drop01.jpg",
        "hero_image2": "assets/drop01-b.jpg",
        "release_date": "2025-03-01",
        "total_pieces": 120,
    }
    payload.update(overrides)
    return payload
