"""Process payment webhook use case"""

import logging
from typing import Optional

from ...domain.entities.order import Order
from ...domain.enums import OrderStatus, WebhookEventType
from ...domain.exceptions import InvalidTransitionError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.order_lifecycle import OrderLifecycle
from ...domain.value_objects.money import Money
from ..dtos.order_dtos import PaymentWebhookEvent
from ..event_log import log_order_events


logger = logging.getLogger(__name__)


class ProcessPaymentWebhookUseCase:
    """Reconcile payment gateway events with order status.

    Gateway events arrive at least once and in any order. Every event is
    acknowledged: unknown orders, unknown event types, replays and
    transitions the table rejects all end as a logged no-op, because a
    failure here would only make the gateway retry.
    """

    def __init__(self, unit_of_work: IUnitOfWork, lifecycle: OrderLifecycle):
        self.unit_of_work = unit_of_work
        self.lifecycle = lifecycle

    async def execute(self, event: PaymentWebhookEvent) -> bool:
        """Apply ``event``; always returns True once the event is acknowledged"""
        logger.info(
            "Processing payment webhook event %s for PaymentIntent %s",
            event.event_type,
            event.payment_intent_id,
        )

        async with self.unit_of_work:
            order = await self.unit_of_work.orders.get_by_payment_intent_id(
                event.payment_intent_id, for_update=True
            )
            if not order:
                logger.warning("No order found for PaymentIntent %s", event.payment_intent_id)
                return True

            try:
                changed = self._dispatch(order, event)
            except InvalidTransitionError as e:
                logger.warning(
                    "Invalid status transition for order %s on event %s: %s",
                    order.order_number,
                    event.event_type,
                    e,
                )
                return True

            if changed:
                await self.unit_of_work.orders.update(order)
                await self.unit_of_work.commit()
                log_order_events(order)

        return True

    def _dispatch(self, order: Order, event: PaymentWebhookEvent) -> bool:
        if event.event_type == WebhookEventType.PAYMENT_SUCCEEDED.value:
            return self._handle_payment_succeeded(order)
        if event.event_type == WebhookEventType.PAYMENT_FAILED.value:
            return self._handle_payment_failed(order, event.failure_message)
        if event.event_type == WebhookEventType.CHARGE_REFUNDED.value:
            return self._handle_charge_refunded(order, event.amount_refunded)

        logger.info(
            "Unhandled webhook event type %s for order %s",
            event.event_type,
            order.order_number,
        )
        return False

    def _handle_payment_succeeded(self, order: Order) -> bool:
        if order.status not in (OrderStatus.PENDING, OrderStatus.PAYMENT_FAILED):
            logger.info(
                "Order %s already in status %s, skipping payment_intent.succeeded",
                order.order_number,
                order.status.display_name,
            )
            return False

        self.lifecycle.transition(order, OrderStatus.PAID, "Payment confirmed via webhook", author="webhook")
        logger.info("Order %s marked as Paid via webhook", order.order_number)
        return True

    def _handle_payment_failed(self, order: Order, failure_message: Optional[str]) -> bool:
        if order.status != OrderStatus.PENDING:
            logger.info(
                "Order %s in status %s, skipping payment_intent.payment_failed",
                order.order_number,
                order.status.display_name,
            )
            return False

        reason = f"Payment failed: {failure_message}" if failure_message else "Payment failed"
        self.lifecycle.transition(order, OrderStatus.PAYMENT_FAILED, reason, author="webhook")
        logger.warning(
            "Order %s marked as PaymentFailed: %s",
            order.order_number,
            failure_message or "No failure message provided",
        )
        return True

    def _handle_charge_refunded(self, order: Order, amount_refunded: Optional[int]) -> bool:
        if not order.can_be_refunded:
            logger.warning(
                "Order %s in status %s cannot be refunded",
                order.order_number,
                order.status.display_name,
            )
            return False

        if amount_refunded is not None and amount_refunded >= 0:
            reason = f"Refunded {Money.from_cents(amount_refunded, order.currency)} via Stripe"
        else:
            reason = "Refunded via Stripe"

        self.lifecycle.record_refund(order, reason, author="webhook")
        logger.info(
            "Order %s marked as Refunded via webhook, amount: %s",
            order.order_number,
            amount_refunded if amount_refunded is not None else "unknown",
        )
        return True
