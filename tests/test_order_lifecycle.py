from datetime import timedelta
from itertools import product

import pytest

from climasite.domain.entities.order import STATUS_TIMESTAMP_FIELDS
from climasite.domain.enums import OrderStatus
from climasite.domain.events.order_events import OrderStatusChanged
from climasite.domain.exceptions import InvalidArgumentError, InvalidTransitionError
from climasite.domain.services.order_lifecycle import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    allowed_transitions,
    can_transition,
    parse_status,
)

from .conftest import NOW


LEGAL_PAIRS = [(src, dst) for src, targets in TRANSITIONS.items() for dst in targets]
ILLEGAL_PAIRS = [
    (src, dst) for src, dst in product(OrderStatus, OrderStatus)
    if dst not in TRANSITIONS[src]
]


def test_table_covers_every_status():
    assert set(TRANSITIONS) == set(OrderStatus)


def test_table_matches_documented_edges():
    assert allowed_transitions(OrderStatus.PENDING) == {
        OrderStatus.PAID, OrderStatus.PAYMENT_FAILED, OrderStatus.CANCELLED,
    }
    assert allowed_transitions(OrderStatus.PAYMENT_FAILED) == {OrderStatus.PAID, OrderStatus.CANCELLED}
    assert allowed_transitions(OrderStatus.PAID) == {
        OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED,
    }
    assert allowed_transitions(OrderStatus.PROCESSING) == {OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    assert allowed_transitions(OrderStatus.SHIPPED) == {OrderStatus.DELIVERED}
    assert allowed_transitions(OrderStatus.DELIVERED) == {OrderStatus.REFUNDED}
    assert TERMINAL_STATUSES == {OrderStatus.CANCELLED, OrderStatus.REFUNDED}


def test_no_status_transitions_to_itself():
    for status in OrderStatus:
        assert not can_transition(status, status)


@pytest.mark.parametrize("src,dst", ILLEGAL_PAIRS)
def test_illegal_transition_leaves_order_untouched(make_order, lifecycle, src, dst):
    order = make_order(src)
    before = (
        order.status, order.paid_at, order.shipped_at, order.delivered_at,
        order.cancelled_at, list(order.notes),
    )

    with pytest.raises(InvalidTransitionError) as exc_info:
        lifecycle.transition(order, dst, "should not apply")

    assert exc_info.value.from_status == src
    assert exc_info.value.to_status == dst
    after = (
        order.status, order.paid_at, order.shipped_at, order.delivered_at,
        order.cancelled_at, list(order.notes),
    )
    assert after == before
    assert order.get_events() == []


@pytest.mark.parametrize("src,dst", LEGAL_PAIRS)
def test_legal_transition_applies(make_order, lifecycle, clock, src, dst):
    order = make_order(src)
    clock.advance(timedelta(hours=1))
    notes_before = len(order.notes)

    lifecycle.transition(order, dst, "ops")

    assert order.status == dst
    assert len(order.notes) == notes_before + 1
    assert order.notes[-1].text == f"Status changed to {dst.display_name}: ops"
    assert order.notes[-1].created_at == clock.now()

    timestamp_field = STATUS_TIMESTAMP_FIELDS.get(dst)
    if timestamp_field:
        assert getattr(order, timestamp_field) == clock.now()

    # fields for other statuses are never stamped by this transition
    for status, field_name in STATUS_TIMESTAMP_FIELDS.items():
        if status != dst and getattr(order, field_name) is not None:
            assert getattr(order, field_name) == NOW


def test_transition_records_status_changed_event(make_order, lifecycle):
    order = make_order(OrderStatus.PENDING)

    lifecycle.transition(order, OrderStatus.PAID, "Payment confirmed")

    events = order.get_events()
    assert len(events) == 1
    assert isinstance(events[0], OrderStatusChanged)
    assert events[0].from_status == OrderStatus.PENDING
    assert events[0].to_status == OrderStatus.PAID
    assert order.get_events() == []


def test_transition_without_reason_has_bare_note(make_order, lifecycle):
    order = make_order(OrderStatus.PAID)

    lifecycle.transition(order, OrderStatus.PROCESSING)

    assert order.notes[-1].text == "Status changed to Processing"


def test_paid_at_is_not_overwritten_on_second_entry(make_order, lifecycle, clock):
    order = make_order(OrderStatus.PENDING)
    lifecycle.transition(order, OrderStatus.PAYMENT_FAILED, "card declined")
    lifecycle.transition(order, OrderStatus.PAID)
    first_paid_at = order.paid_at

    clock.advance(timedelta(days=1))
    # Paid -> Paid is not an edge, so a strict caller is rejected
    with pytest.raises(InvalidTransitionError):
        lifecycle.transition(order, OrderStatus.PAID)

    assert order.paid_at == first_paid_at


def test_admin_moving_delivered_back_to_shipped_is_rejected(make_order, lifecycle):
    order = make_order(OrderStatus.DELIVERED)
    notes = list(order.notes)

    with pytest.raises(InvalidTransitionError) as exc_info:
        lifecycle.transition(order, OrderStatus.SHIPPED, "ready")

    assert exc_info.value.from_status == OrderStatus.DELIVERED
    assert exc_info.value.to_status == OrderStatus.SHIPPED
    assert "Delivered to Shipped" in str(exc_info.value)
    assert order.status == OrderStatus.DELIVERED
    assert order.notes == notes


def test_append_note_preserves_history(make_order, lifecycle, clock):
    order = make_order(OrderStatus.PENDING)
    lifecycle.append_note(order, "Customer called about delivery window", author="ops@climasite.test")
    clock.advance(timedelta(minutes=5))
    lifecycle.append_note(order, "Confirmed Tuesday")

    assert [n.text for n in order.notes[-2:]] == [
        "Customer called about delivery window",
        "Confirmed Tuesday",
    ]
    assert order.notes[-2].author == "ops@climasite.test"
    assert order.notes_text.splitlines()[-1] == "[2026-01-15 10:35] Confirmed Tuesday"


def test_set_tracking_number_only(make_order, lifecycle):
    order = make_order(OrderStatus.PROCESSING)
    order.shipping_method = "Freight"

    lifecycle.set_tracking_info(order, tracking_number="TRK123", shipping_method=None, mark_shipped=False)

    assert order.tracking_number == "TRK123"
    assert order.shipping_method == "Freight"
    assert order.status == OrderStatus.PROCESSING


def test_blank_tracking_fields_are_ignored(make_order, lifecycle):
    order = make_order(OrderStatus.PROCESSING)
    order.tracking_number = "TRK1"

    lifecycle.set_tracking_info(order, tracking_number="   ", shipping_method="UPS Ground")

    assert order.tracking_number == "TRK1"
    assert order.shipping_method == "UPS Ground"


def test_set_tracking_info_mark_shipped(make_order, lifecycle, clock):
    order = make_order(OrderStatus.PROCESSING)

    lifecycle.set_tracking_info(order, tracking_number="TRK123", shipping_method="DHL", mark_shipped=True)

    assert order.status == OrderStatus.SHIPPED
    assert order.shipped_at == clock.now()
    assert order.notes[-1].text == "Status changed to Shipped"


def test_set_tracking_info_mark_shipped_from_pending_changes_nothing(make_order, lifecycle):
    order = make_order(OrderStatus.PENDING)
    notes = list(order.notes)

    with pytest.raises(InvalidTransitionError) as exc_info:
        lifecycle.set_tracking_info(order, tracking_number="TRK123", shipping_method="DHL", mark_shipped=True)

    assert exc_info.value.to_status == OrderStatus.SHIPPED
    assert order.status == OrderStatus.PENDING
    assert order.tracking_number is None
    assert order.shipping_method is None
    assert order.notes == notes


@pytest.mark.parametrize("status", [
    OrderStatus.PAID, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED,
])
def test_record_refund_from_paid_states(make_order, lifecycle, status):
    order = make_order(status)

    lifecycle.record_refund(order, "Refunded 50.00 USD via Stripe")

    assert order.status == OrderStatus.REFUNDED
    assert order.notes[-1].text == "Status changed to Refunded: Refunded 50.00 USD via Stripe"


@pytest.mark.parametrize("status", [
    OrderStatus.PENDING, OrderStatus.PAYMENT_FAILED, OrderStatus.CANCELLED, OrderStatus.REFUNDED,
])
def test_record_refund_rejects_unpaid_states(make_order, lifecycle, status):
    order = make_order(status)

    with pytest.raises(InvalidTransitionError):
        lifecycle.record_refund(order)

    assert order.status == status


@pytest.mark.parametrize("raw,expected", [
    ("Shipped", OrderStatus.SHIPPED),
    ("shipped", OrderStatus.SHIPPED),
    ("PaymentFailed", OrderStatus.PAYMENT_FAILED),
    ("payment_failed", OrderStatus.PAYMENT_FAILED),
    ("PAYMENT_FAILED", OrderStatus.PAYMENT_FAILED),
    (" Refunded ", OrderStatus.REFUNDED),
])
def test_parse_status(raw, expected):
    assert parse_status(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", None, "Returned", "paid!"])
def test_parse_status_rejects_unknown(raw):
    with pytest.raises(InvalidArgumentError):
        parse_status(raw)
