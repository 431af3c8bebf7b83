import itertools

import pytest

from quickbill.exceptions import InvalidTransition
from quickbill.service.order_status import (
    OrderStatus,
    allowed_transitions,
    is_terminal,
    next_state,
)

LEGAL = {
    (OrderStatus.PENDING, OrderStatus.PREPARING),
    (OrderStatus.PREPARING, OrderStatus.READY),
    (OrderStatus.READY, OrderStatus.COMPLETED),
    (OrderStatus.PENDING, OrderStatus.CANCELLED),
    (OrderStatus.PREPARING, OrderStatus.CANCELLED),
    (OrderStatus.READY, OrderStatus.CANCELLED),
}


@pytest.mark.parametrize("current,requested", sorted(LEGAL))
def test_legal_transitions(current, requested):
    assert next_state(current, requested) is requested


@pytest.mark.parametrize(
    "current,requested",
    [pair for pair in itertools.product(OrderStatus, repeat=2) if pair not in LEGAL],
)
def test_everything_else_is_rejected(current, requested):
    with pytest.raises(InvalidTransition) as exc:
        next_state(current, requested)
    assert exc.value.current == current
    assert exc.value.requested == requested


def test_plain_strings_are_accepted():
    assert next_state("pending", "preparing") == OrderStatus.PREPARING


def test_unknown_status_is_an_invalid_transition():
    with pytest.raises(InvalidTransition):
        next_state("pending", "shipped")


def test_no_self_transitions():
    with pytest.raises(InvalidTransition):
        next_state(OrderStatus.READY, OrderStatus.READY)


def test_full_lifecycle_then_cancel_fails():
    status = OrderStatus.PENDING
    for step in (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.COMPLETED):
        status = next_state(status, step)
    assert status is OrderStatus.COMPLETED

    with pytest.raises(InvalidTransition):
        next_state(status, OrderStatus.CANCELLED)


def test_terminal_states():
    assert is_terminal(OrderStatus.COMPLETED)
    assert is_terminal("cancelled")
    assert not is_terminal(OrderStatus.READY)
    assert allowed_transitions("cancelled") == frozenset()
    assert allowed_transitions(OrderStatus.PENDING) == {OrderStatus.PREPARING, OrderStatus.CANCELLED}
