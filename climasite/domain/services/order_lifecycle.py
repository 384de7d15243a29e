"""Order lifecycle: the status transition table and the operations that move an order along it.

Every operation here is an in-memory mutation of the ``Order`` aggregate.
Loading, saving and locking the order row are the caller's job; the
lifecycle assumes it runs under an exclusive lease on the order.
"""

import re
from typing import FrozenSet, Mapping, Optional

from ..clock import Clock, SystemClock
from ..entities.order import Order, OrderNote
from ..enums import OrderStatus
from ..events.order_events import OrderStatusChanged
from ..exceptions import InvalidArgumentError, InvalidTransitionError


TRANSITIONS: Mapping[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.PAYMENT_FAILED, OrderStatus.CANCELLED}),
    OrderStatus.PAYMENT_FAILED: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.REFUNDED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, allowed in TRANSITIONS.items() if not allowed)


def allowed_transitions(current: OrderStatus) -> FrozenSet[OrderStatus]:
    return TRANSITIONS.get(current, frozenset())


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in allowed_transitions(current)


def parse_status(raw: Optional[str]) -> OrderStatus:
    """Parse a status name from an external caller.

    Accepts the enum value (``payment_failed``), the display name
    (``PaymentFailed``) or the member name, case-insensitively.
    """
    if raw is None or not raw.strip():
        raise InvalidArgumentError("Status is required")

    key = re.sub(r"[\s_\-]", "", raw).lower()
    for status in OrderStatus:
        if key == status.value.replace("_", ""):
            return status
    raise InvalidArgumentError(f"Invalid order status: {raw!r}")


class OrderLifecycle:
    """Applies status transitions, notes and shipment updates to orders"""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def transition(
        self,
        order: Order,
        target: OrderStatus,
        reason: Optional[str] = None,
        author: str = "system",
    ) -> Order:
        """Move ``order`` to ``target``.

        Raises ``InvalidTransitionError`` and leaves the order untouched when
        ``target`` is not reachable from the current status.
        """
        if not can_transition(order.status, target):
            raise InvalidTransitionError(order.status, target)
        return self._apply(order, target, reason, author)

    def record_refund(self, order: Order, reason: Optional[str] = None, author: str = "system") -> Order:
        """Mark ``order`` refunded after the payment gateway confirmed the refund.

        The money has already left the gateway, so every paid state is
        accepted, including the ones without a direct edge to Refunded.
        """
        if not order.can_be_refunded:
            raise InvalidTransitionError(order.status, OrderStatus.REFUNDED)
        return self._apply(order, OrderStatus.REFUNDED, reason, author)

    def append_note(self, order: Order, text: str, author: str = "system") -> OrderNote:
        note = OrderNote(created_at=self.clock.now(), text=text, author=author)
        order.add_note(note)
        return note

    def set_tracking_info(
        self,
        order: Order,
        tracking_number: Optional[str] = None,
        shipping_method: Optional[str] = None,
        mark_shipped: bool = False,
        author: str = "system",
    ) -> Order:
        """Update shipment metadata, optionally marking the order shipped.

        All or nothing: when ``mark_shipped`` is set and Shipped is not
        reachable, nothing is changed.
        """
        if mark_shipped and not can_transition(order.status, OrderStatus.SHIPPED):
            raise InvalidTransitionError(order.status, OrderStatus.SHIPPED)

        if tracking_number and tracking_number.strip():
            order.tracking_number = tracking_number.strip()
        if shipping_method and shipping_method.strip():
            order.shipping_method = shipping_method.strip()
        order.updated_at = self.clock.now()

        if mark_shipped:
            self.transition(order, OrderStatus.SHIPPED, author=author)
        return order

    def _apply(self, order: Order, target: OrderStatus, reason: Optional[str], author: str) -> Order:
        now = self.clock.now()
        previous = order.status
        order.apply_status(target, now)

        message = f"Status changed to {target.display_name}"
        if reason and reason.strip():
            message = f"{message}: {reason.strip()}"
        order.add_note(OrderNote(created_at=now, text=message, author=author))

        order.record_event(OrderStatusChanged(
            order_id=order.id,
            order_number=order.order_number,
            from_status=previous,
            to_status=target,
            reason=reason,
            occurred_at=now,
        ))
        return order
