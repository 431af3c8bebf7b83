"""Printable receipts built from the values stored on an order."""

from __future__ import annotations

from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.config import settings
from quickbill.models.order import Order
from quickbill.models.profile import Profile
from quickbill.schemas.receipt import Receipt, ReceiptLine
from quickbill.service.pricing import format_money, to_money

RECEIPT_WIDTH = 40


def order_number(order_id: UUID) -> str:
    return str(order_id).split("-")[0].upper()


def build_receipt(order: Order, business_name: str, currency_symbol: str) -> Receipt:
    """
    Never reprice here: an order keeps the prices, tax rate and package
    charge it was taken with.
    """
    return Receipt(
        business_name=business_name,
        order_id=order.id,
        order_number=order_number(order.id),
        customer_name=order.customer_name,
        table_number=order.table_number,
        status=order.status,
        created_at=order.created_at,
        lines=[
            ReceiptLine(
                name=item.product_name,
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
                subtotal=to_money(item.subtotal),
            )
            for item in order.items
        ],
        subtotal=to_money(order.subtotal),
        tax_rate=to_money(order.tax_rate),
        tax_amount=to_money(order.tax_amount),
        package_charge=to_money(order.package_charge),
        total=to_money(order.total_amount),
        notes=order.notes,
        currency_symbol=currency_symbol,
    )


def _row(left: str, right: str, width: int) -> str:
    space = width - len(right) - 1
    if len(left) > space:
        left = left[: max(space - 1, 0)] + "~"
    return f"{left:<{space}} {right}"


def render_receipt_text(receipt: Receipt, width: int = RECEIPT_WIDTH) -> str:
    sym = receipt.currency_symbol
    rule = "-" * width
    out = [
        receipt.business_name.center(width).rstrip(),
        f"Order #{receipt.order_number}".center(width).rstrip(),
        receipt.created_at.strftime("%Y-%m-%d %H:%M").center(width).rstrip(),
        rule,
    ]
    if receipt.customer_name:
        out.append(f"Customer: {receipt.customer_name}")
    if receipt.table_number:
        out.append(f"Table: {receipt.table_number}")
    if receipt.customer_name or receipt.table_number:
        out.append(rule)

    for line in receipt.lines:
        out.append(_row(line.name, format_money(line.subtotal, sym), width))
        out.append(f"  {line.quantity} x {format_money(line.unit_price, sym)}")

    out.append(rule)
    out.append(_row("Subtotal", format_money(receipt.subtotal, sym), width))
    out.append(_row(f"Tax ({receipt.tax_rate.normalize():f}%)", format_money(receipt.tax_amount, sym), width))
    if receipt.package_charge:
        out.append(_row("Package charge", format_money(receipt.package_charge, sym), width))
    out.append(rule)
    out.append(_row("TOTAL", format_money(receipt.total, sym), width))
    out.append(rule)
    if receipt.notes:
        out.append(f"Notes: {receipt.notes}")
    out.append("Thank you for your visit!".center(width).rstrip())
    return "\n".join(out) + "\n"


async def get_business_name(db: AsyncSession, user_id: UUID) -> str:
    name = await db.scalar(select(Profile.business_name).where(Profile.user_id == user_id))
    if not name:
        logger.debug(
            "No business name on profile for user_id='{user_id}', using default",
            user_id=str(user_id),
        )
        return settings.BUSINESS_NAME
    return name
