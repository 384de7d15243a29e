"""Drain domain events from aggregates and record them in the log"""

import logging

from ..domain.events.order_events import OrderPlaced, OrderStatusChanged


logger = logging.getLogger(__name__)


def log_order_events(order) -> list:
    """Log and return the events recorded on ``order`` since the last drain"""
    events = order.get_events()
    for event in events:
        if isinstance(event, OrderStatusChanged):
            logger.info(
                "Order %s status changed %s -> %s%s",
                event.order_number,
                event.from_status.display_name,
                event.to_status.display_name,
                f" ({event.reason})" if event.reason else "",
            )
        elif isinstance(event, OrderPlaced):
            logger.info("Order %s placed by %s", event.order_number, event.customer_email)
    return events
