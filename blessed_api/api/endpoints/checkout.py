from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from starlette import status
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from blessed_api.api.deps import get_app_settings, get_payment_gateway
from blessed_api.common.logger import logger
from blessed_api.common.Schemas.checkout_schemas import (
    CartItem,
    CheckoutRequest,
    CheckoutResponse,
    ShippingAddress,
    ShippingInfo,
)
from blessed_api.common.tools.payment_gateway import PaymentGateway
from blessed_api.db import CRUD
from blessed_api.db.database import get_session_factory
from blessed_api.settings.config import Settings

router: APIRouter = APIRouter(prefix="/api", tags=["checkout"])

APPROVED = "approved"

# ---------------- Preference ---------------- #

def _line_item(item: CartItem, currency_id: str) -> Dict[str, Any]:
    line: Dict[str, Any] = {
        "id": item.id,
        "title": item.product,
        "description": f"Talle: {item.size}" + (f" - {item.color}" if item.color else ""),
        "quantity": item.quantity,
        "unit_price": float(item.price),
        "currency_id": currency_id,
    }
    if item.image:
        line["picture_url"] = item.image
    return line


def _payer(email: Optional[str], address: ShippingAddress) -> Dict[str, Any]:
    payer: Dict[str, Any] = {}
    if email:
        payer["email"] = email
    if address.first_name:
        payer["name"] = address.first_name
    if address.last_name:
        payer["surname"] = address.last_name
    if address.phone:
        payer["phone"] = {"number": address.phone}
    street = {k: v for k, v in (("street_name", address.street), ("zip_code", address.zip_code)) if v}
    if street:
        payer["address"] = street
    return payer


def build_preference(payload: CheckoutRequest, settings: Settings) -> Dict[str, Any]:
    """
    Тело preference для Mercado Pago.
    В metadata кладём id/size/color/quantity каждой позиции: по ним webhook
    потом находит строки стока для списания.
    """
    shipping = payload.shipping or ShippingInfo()
    address = shipping.address or ShippingAddress()

    items = [_line_item(i, settings.MP_CURRENCY_ID) for i in payload.items]
    if shipping.cost > 0:
        items.append({
            "id": "shipping",
            "title": f"Envío — {shipping.name}" if shipping.name else "Envío",
            "description": "Costo de envío",
            "quantity": 1,
            "unit_price": float(shipping.cost),
            "currency_id": settings.MP_CURRENCY_ID,
        })

    front = settings.frontend_url
    return {
        "payer": _payer(payload.email, address),
        "items": items,
        "back_urls": {
            "success": f"{front}/checkout/success",
            "failure": f"{front}/checkout/failure",
            "pending": f"{front}/checkout/pending",
        },
        "notification_url": f"{settings.backend_url}/api/webhook",
        "payment_methods": {"installments": settings.MP_INSTALLMENTS},
        "metadata": {
            "cart_items": [
                {"id": i.id, "size": i.size, "color": i.color, "quantity": i.quantity}
                for i in payload.items
            ],
            "shipping_cost": shipping.cost,
        },
    }


@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout(
    payload: CheckoutRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway),
    settings: Settings = Depends(get_app_settings),
) -> CheckoutResponse:
    if not payload.items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cart is empty")

    try:
        result = gateway.create_preference(build_preference(payload, settings))
    except Exception:
        logger.error("Checkout error (%s items)", len(payload.items), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create payment preference",
        )

    logger.info("Checkout: preference %s created", result.get("id"))
    return CheckoutResponse(
        init_point=result.get("init_point"),
        sandbox_init_point=result.get("sandbox_init_point"),
        preference_id=result.get("id"),
    )

# ---------------- Webhook ---------------- #

def _decrement_item(session_factory: Callable[[], Session], item: Dict[str, Any]) -> int:
    db = session_factory()
    try:
        return CRUD.decrement_stock(
            db,
            product_id=str(item["id"]),
            size=str(item["size"]),
            quantity=int(item["quantity"]),
            color=item.get("color") or None,
        )
    finally:
        db.close()


async def apply_stock_decrements(
    cart_items: List[Dict[str, Any]],
    session_factory: Callable[[], Session],
) -> List[Union[int, BaseException]]:
    """
    Списание по всем позициям параллельно; ошибка одной позиции не влияет на остальные.
    """
    results = await asyncio.gather(
        *(run_in_threadpool(_decrement_item, session_factory, item) for item in cart_items),
        return_exceptions=True,
    )
    for item, result in zip(cart_items, results):
        ref = item.get("id") if isinstance(item, dict) else item
        if isinstance(result, BaseException):
            logger.error("[Stock] Error on %s: %s", ref, result, exc_info=result)
        elif result == 0:
            logger.warning("[Stock] No stock row for %s (%s)", ref, item.get("size"))
        else:
            logger.info("[Stock] Decremented %s of %s (%s)", item.get("quantity"), ref, item.get("size"))
    return results


async def process_payment_notification(
    payment_id: Any,
    gateway: PaymentGateway,
    session_factory: Callable[[], Session],
) -> None:
    """
    Фоновая обработка уведомления: статус платежа -> при approved списываем сток.
    Повторное уведомление по тому же платежу спишет ещё раз (идемпотентности нет).
    """
    try:
        payment = await run_in_threadpool(gateway.get_payment, payment_id)
    except Exception:
        logger.error("[Webhook] Error fetching payment %s", payment_id, exc_info=True)
        return

    payment_status = payment.get("status")
    logger.info("[Webhook] Payment %s - status: %s", payment.get("id", payment_id), payment_status)
    logger.info(
        "  Order: %s | Amount: %s | Payer: %s",
        (payment.get("order") or {}).get("id"),
        payment.get("transaction_amount"),
        (payment.get("payer") or {}).get("email"),
    )
    if payment_status != APPROVED:
        return

    cart_items = (payment.get("metadata") or {}).get("cart_items") or []
    await apply_stock_decrements(cart_items, session_factory)


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    gateway: PaymentGateway = Depends(get_payment_gateway),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> Response:
    """
    Mercado Pago ждёт быстрый 200: отвечаем сразу, обработка идёт после ответа.
    """
    try:
        body = await request.json()
    except ValueError:
        logger.warning("[Webhook] Body is not valid JSON")
        body = None
    if not isinstance(body, dict):
        body = {}

    event_type = body.get("type") or request.query_params.get("type")
    data = body.get("data") if isinstance(body.get("data"), dict) else {}
    payment_id = data.get("id") or request.query_params.get("data.id")

    if event_type == "payment":
        if payment_id is None:
            logger.warning("[Webhook] Payment event without data.id")
        else:
            background_tasks.add_task(process_payment_notification, payment_id, gateway, session_factory)

    return Response(status_code=status.HTTP_200_OK)
