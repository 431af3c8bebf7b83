from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from loguru import logger
from prometheus_client import Counter
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.config import settings
from quickbill.crud.orders import delete_order_from_db, get_all_orders_from_db, get_order_from_db
from quickbill.db import get_db
from quickbill.dependencies.depend import authentication_get_current_user
from quickbill.schemas.auth import CurrentUser
from quickbill.schemas.order import OrderCreate, OrderOut, OrderStatusPatch, QuoteOut, QuoteRequest
from quickbill.schemas.receipt import Receipt
from quickbill.service.order_status import OrderStatus
from quickbill.service.orders import (
    create_order as svc_create_order,
    quote_order as svc_quote_order,
    update_order_status as svc_update_order_status,
)
from quickbill.service.receipts import build_receipt, get_business_name, render_receipt_text

SERVICE_NAME = settings.SERVICE_NAME

router = APIRouter(prefix="/orders", tags=["Orders"])

ORDERS_API_REQUESTS_TOTAL = Counter(
    "quickbill_orders_api_requests_total",
    "Orders API request events",
    ["service", "endpoint", "method", "status"],
)


def _count(endpoint: str, method: str, result: str) -> None:
    ORDERS_API_REQUESTS_TOTAL.labels(
        service=SERVICE_NAME,
        endpoint=endpoint,
        method=method,
        status=result,
    ).inc()


@router.post("/quote", response_model=QuoteOut)
async def quote_order(
    payload: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    quote = await svc_quote_order(db, current_user.id, payload)
    _count("/orders/quote", "POST", "success")
    return quote


@router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Create order request received for user_id='{user_id}'",
        user_id=str(current_user.id),
    )
    order = await svc_create_order(db, current_user.id, payload)
    logger.info(
        "Order created via service. order_id='{order_id}', user_id='{user_id}'",
        order_id=str(order.id),
        user_id=str(current_user.id),
    )
    _count("/orders/", "POST", "success")
    return order


@router.get("/", response_model=list[OrderOut])
async def get_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    orders = await get_all_orders_from_db(current_user.id, db, status_filter=status_filter)
    _count("/orders/", "GET", "success")
    return orders


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Get order request received. order_id='{order_id}', user_id='{user_id}'",
        order_id=str(order_id),
        user_id=str(current_user.id),
    )
    order = await get_order_from_db(order_id, current_user.id, db)
    _count("/orders/{order_id}", "GET", "success")
    return order


@router.patch("/{order_id}/status", response_model=OrderOut)
async def update_order_status(
    order_id: UUID,
    payload: OrderStatusPatch,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Update order status request received. order_id='{order_id}', status='{status}'",
        order_id=str(order_id),
        status=payload.status.value,
    )
    order = await svc_update_order_status(db, current_user.id, order_id, payload.status)
    _count("/orders/{order_id}/status", "PATCH", "success")
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    logger.info(
        "Delete order request received. order_id='{order_id}', user_id='{user_id}'",
        order_id=str(order_id),
        user_id=str(current_user.id),
    )
    await delete_order_from_db(order_id, current_user.id, db)
    _count("/orders/{order_id}", "DELETE", "success")


async def _receipt(order_id: UUID, db: AsyncSession, current_user: CurrentUser) -> Receipt:
    order = await get_order_from_db(order_id, current_user.id, db, operation="receipt")
    business_name = await get_business_name(db, current_user.id)
    return build_receipt(order, business_name, settings.CURRENCY_SYMBOL)


@router.get("/{order_id}/receipt", response_model=Receipt)
async def get_receipt(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    receipt = await _receipt(order_id, db, current_user)
    _count("/orders/{order_id}/receipt", "GET", "success")
    return receipt


@router.get("/{order_id}/receipt.txt", response_class=PlainTextResponse)
async def get_receipt_text(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    receipt = await _receipt(order_id, db, current_user)
    _count("/orders/{order_id}/receipt.txt", "GET", "success")
    return PlainTextResponse(render_receipt_text(receipt))
