from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quickbill.core.config import settings
from quickbill.core.kafka import send_order_event
from quickbill.core.metrics import ORDERS_DB_OPERATIONS_TOTAL
from quickbill.models.order import Order
from quickbill.service.order_status import OrderStatus

SERVICE_NAME = settings.SERVICE_NAME


def _count(operation: str, result: str) -> None:
    ORDERS_DB_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=result,
    ).inc()


async def get_order_from_db(order_id: UUID, user_id: UUID, db: AsyncSession, operation: str = "get") -> Order:
    logger.info(
        "Fetching order from DB. order_id='{order_id}', user_id='{user_id}'",
        order_id=str(order_id),
        user_id=str(user_id),
    )
    q = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.id == order_id, Order.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    order = res.scalar_one_or_none()
    if not order:
        logger.warning(
            "Order not found in DB. order_id='{order_id}'",
            order_id=str(order_id),
        )
        _count(operation, "not_found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    _count(operation, "success")
    return order


async def get_all_orders_from_db(
    user_id: UUID,
    db: AsyncSession,
    status_filter: OrderStatus | None = None,
    limit: int | None = None,
) -> list[Order]:
    logger.info(
        "Fetching orders from DB for user_id='{user_id}', status={status}",
        user_id=str(user_id),
        status=status_filter.value if status_filter else None,
    )
    q = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    )
    if status_filter is not None:
        q = q.where(Order.status == status_filter.value)
    if limit:
        q = q.limit(limit)
    res = await db.execute(q)
    orders = list(res.scalars().all())
    logger.info(
        "Fetched {count} orders for user_id='{user_id}'",
        count=len(orders),
        user_id=str(user_id),
    )
    _count("list", "success")
    return orders


async def delete_order_from_db(order_id: UUID, user_id: UUID, db: AsyncSession) -> None:
    order = await get_order_from_db(order_id, user_id, db, operation="delete")

    await db.delete(order)
    await db.commit()
    logger.info(
        "Order deleted from DB. order_id='{order_id}'",
        order_id=str(order_id),
    )
    _count("delete", "deleted")

    await send_order_event("ORDER_DELETED", str(order_id), user_id=str(user_id))
