from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.config import settings
from quickbill.core.kafka import send_order_event
from quickbill.core.metrics import ORDERS_SERVICE_OPERATIONS_TOTAL
from quickbill.crud.orders import get_order_from_db
from quickbill.exceptions import InvalidTransition
from quickbill.models.base import utcnow
from quickbill.models.order import Order
from quickbill.models.order_item import OrderItem
from quickbill.models.product import Product
from quickbill.schemas.order import OrderCreate, QuoteLine, QuoteOut, QuoteRequest
from quickbill.service.cart import Cart
from quickbill.service.order_status import OrderStatus, next_state
from quickbill.service.pricing import to_decimal, to_money

SERVICE_NAME = settings.SERVICE_NAME


def _count(operation: str, result: str) -> None:
    ORDERS_SERVICE_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=result,
    ).inc()


def resolve_charges(tax_rate: Decimal | None, package_charge: Decimal | None) -> tuple[Decimal, Decimal]:
    """Fall back to the deployment defaults for whatever the caller left out."""
    rate = settings.DEFAULT_TAX_RATE if tax_rate is None else tax_rate
    charge = settings.DEFAULT_PACKAGE_CHARGE if package_charge is None else package_charge
    return to_decimal(rate), to_decimal(charge)


async def build_cart(session: AsyncSession, user_id: UUID, data: QuoteRequest, operation: str) -> Cart:
    product_ids = {item.product_id for item in data.items}
    products: dict[UUID, Product] = {}
    if product_ids:
        res = await session.execute(
            select(Product).where(Product.id.in_(product_ids), Product.user_id == user_id)
        )
        products = {p.id: p for p in res.scalars().all()}

    for pid in product_ids:
        product = products.get(pid)
        if product is None:
            logger.warning(
                "Product '{product_id}' not found for user_id='{user_id}'",
                product_id=str(pid),
                user_id=str(user_id),
            )
            _count(operation, "product_not_found")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product not found: {pid}",
            )
        if not product.is_available:
            _count(operation, "product_unavailable")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product is not available: {product.name}",
            )

    return Cart.from_items(products, [(item.product_id, item.quantity) for item in data.items])


async def quote_order(session: AsyncSession, user_id: UUID, data: QuoteRequest) -> QuoteOut:
    cart = await build_cart(session, user_id, data, "quote")
    tax_rate, package_charge = resolve_charges(data.tax_rate, data.package_charge)
    totals = cart.totals(tax_rate, package_charge)
    logger.debug(
        "Quoted {lines} lines for user_id='{user_id}': total={total}",
        lines=len(cart),
        user_id=str(user_id),
        total=str(totals.total),
    )
    _count("quote", "success")
    return QuoteOut(
        lines=[
            QuoteLine(
                product_id=line.product_id,
                name=line.product.name,
                quantity=line.quantity,
                unit_price=to_money(line.unit_price),
                subtotal=to_money(line.subtotal),
            )
            for line in cart
        ],
        subtotal=totals.subtotal,
        tax_rate=to_money(tax_rate),
        tax_amount=totals.tax_amount,
        package_charge=to_money(package_charge),
        total=totals.total,
    )


async def _rollback_or_report(session: AsyncSession, order_id: UUID) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError:
        # nothing else can undo the insert from here; make it visible
        logger.exception(
            "Rollback failed after order insert error; order may be orphaned. order_id='{order_id}'",
            order_id=str(order_id),
        )
        _count("create", "rollback_failed")
        raise


async def create_order(session: AsyncSession, user_id: UUID, data: OrderCreate) -> Order:
    _count("create", "attempt")
    logger.info(
        "Service create_order called for user_id='{user_id}' with {items_count} items",
        user_id=str(user_id),
        items_count=len(data.items),
    )
    if not data.items:
        logger.warning(
            "Service create_order called without items for user_id='{user_id}'",
            user_id=str(user_id),
        )
        _count("create", "no_items")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order must contain at least one item",
        )

    cart = await build_cart(session, user_id, data, "create")
    tax_rate, package_charge = resolve_charges(data.tax_rate, data.package_charge)
    totals = cart.totals(tax_rate, package_charge)
    logger.info(
        "Service create_order priced cart: subtotal={subtotal}, tax={tax}, package={package}, total={total}",
        subtotal=str(totals.subtotal),
        tax=str(totals.tax_amount),
        package=str(package_charge),
        total=str(totals.total),
    )

    # prices are copied onto the items so later catalog edits never touch this order
    order = Order(
        user_id=user_id,
        customer_name=data.customer_name or None,
        table_number=data.table_number or None,
        subtotal=totals.subtotal,
        tax_rate=tax_rate,
        tax_amount=totals.tax_amount,
        package_charge=to_money(package_charge),
        total_amount=totals.total,
        status=OrderStatus.PENDING.value,
        notes=data.notes or None,
        items=[
            OrderItem(
                line_no=idx,
                product_id=line.product_id,
                product_name=line.product.name,
                quantity=line.quantity,
                unit_price=to_money(line.unit_price),
                subtotal=to_money(line.subtotal),
            )
            for idx, line in enumerate(cart)
        ],
    )

    session.add(order)
    try:
        await session.commit()
    except SQLAlchemyError:
        logger.exception(
            "Service create_order failed to persist order and items for user_id='{user_id}'",
            user_id=str(user_id),
        )
        _count("create", "persist_failed")
        await _rollback_or_report(session, order.id)
        raise

    logger.info(
        "Service create_order persisted order. order_id='{order_id}', user_id='{user_id}'",
        order_id=str(order.id),
        user_id=str(user_id),
    )
    fresh = await get_order_from_db(order.id, user_id, session)

    await send_order_event(
        "ORDER_CREATED",
        str(fresh.id),
        user_id=str(user_id),
        items=[
            {
                "product_id": str(i.product_id),
                "quantity": i.quantity,
                "unit_price": str(i.unit_price),
            }
            for i in fresh.items
        ],
        subtotal=str(fresh.subtotal),
        tax_amount=str(fresh.tax_amount),
        package_charge=str(fresh.package_charge),
        total_amount=str(fresh.total_amount),
        status=fresh.status,
    )
    _count("create", "success")
    return fresh


async def update_order_status(
    session: AsyncSession,
    user_id: UUID,
    order_id: UUID,
    requested: OrderStatus,
) -> Order:
    _count("update_status", "attempt")
    order = await get_order_from_db(order_id, user_id, session, operation="update_status")
    current = OrderStatus(order.status)
    logger.info(
        "Service update_order_status called. order_id='{order_id}', current='{current}', requested='{requested}'",
        order_id=str(order_id),
        current=current.value,
        requested=requested.value,
    )

    if current == requested:
        # a repeated click on the same staff action
        logger.info(
            "Order already in requested status; nothing to do. order_id='{order_id}', status='{status}'",
            order_id=str(order_id),
            status=current.value,
        )
        _count("update_status", "noop")
        return order

    try:
        new_status = next_state(current, requested)
    except InvalidTransition:
        _count("update_status", "invalid_transition")
        raise

    res = await session.execute(
        update(Order)
        .where(
            Order.id == order_id,
            Order.user_id == user_id,
            Order.status == current.value,
        )
        .values(status=new_status.value, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        # somebody else moved the order between our read and write
        await session.rollback()
        latest = await get_order_from_db(order_id, user_id, session, operation="update_status")
        if latest.status == new_status.value:
            _count("update_status", "noop")
            return latest
        _count("update_status", "conflict")
        raise InvalidTransition(latest.status, requested)

    await session.commit()
    logger.info(
        "Order status updated. order_id='{order_id}', '{previous}' -> '{status}'",
        order_id=str(order_id),
        previous=current.value,
        status=new_status.value,
    )

    fresh = await get_order_from_db(order_id, user_id, session, operation="update_status")
    await send_order_event(
        "ORDER_STATUS_CHANGED",
        str(order_id),
        user_id=str(user_id),
        previous_status=current.value,
        status=new_status.value,
    )
    _count("update_status", "success")
    return fresh
