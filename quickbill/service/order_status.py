from __future__ import annotations

from enum import Enum

from quickbill.exceptions import InvalidTransition


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def allowed_transitions(current: OrderStatus | str) -> frozenset[OrderStatus]:
    return TRANSITIONS[OrderStatus(current)]


def is_terminal(status: OrderStatus | str) -> bool:
    return not TRANSITIONS[OrderStatus(status)]


def next_state(current: OrderStatus | str, requested: OrderStatus | str) -> OrderStatus:
    """
    Validate one staff-driven status change and return the new status.

    Self-transitions are rejected too; callers decide whether "already there"
    is a no-op.
    """
    try:
        current = OrderStatus(current)
        requested = OrderStatus(requested)
    except ValueError:
        raise InvalidTransition(current, requested) from None

    if requested not in TRANSITIONS[current]:
        raise InvalidTransition(current, requested)
    return requested
