"""Payment service for Stripe webhook verification and event parsing"""

import json
import logging
from typing import Optional

import stripe

from ...core.config import settings
from ...application.dtos.order_dtos import PaymentWebhookEvent


logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """Webhook payload failed signature verification"""


class WebhookNotConfiguredError(Exception):
    """No webhook secret configured"""


class PaymentService:

    def __init__(self, webhook_secret: Optional[str] = None, tolerance: Optional[int] = None):
        if settings.STRIPE_SECRET_KEY:
            stripe.api_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret or settings.STRIPE_WEBHOOK_SECRET
        self.tolerance = tolerance or settings.STRIPE_WEBHOOK_TOLERANCE

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> None:
        """Verify webhook signature from Stripe"""
        if not self.webhook_secret:
            raise WebhookNotConfiguredError("Stripe webhook secret is not configured")
        if not signature:
            raise WebhookSignatureError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise WebhookSignatureError("Malformed webhook payload") from e

        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self.webhook_secret,
                self.tolerance,
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Stripe webhook signature verification failed: %s", e)
            raise WebhookSignatureError("Invalid signature") from e

    def parse_webhook_event(self, payload: bytes, signature: Optional[str]) -> Optional[PaymentWebhookEvent]:
        """Verify the payload and extract the fields order reconciliation needs.

        Returns ``None`` for event types that carry nothing to reconcile.
        """
        self.verify_webhook(payload, signature)

        try:
            data = json.loads(payload.decode("utf-8"))
        except ValueError as e:
            raise WebhookSignatureError("Malformed webhook payload") from e

        logger.info("Received Stripe webhook: %s (ID: %s)", data.get("type"), data.get("id"))
        return event_from_payload(data)


def event_from_payload(data: dict) -> Optional[PaymentWebhookEvent]:
    """Build a ``PaymentWebhookEvent`` from a decoded Stripe event body"""
    event_type = data.get("type")
    obj = (data.get("data") or {}).get("object") or {}

    if event_type in ("payment_intent.succeeded", "payment_intent.payment_failed"):
        last_error = obj.get("last_payment_error") or {}
        return PaymentWebhookEvent(
            event_id=data.get("id"),
            event_type=event_type,
            payment_intent_id=obj.get("id"),
            failure_message=last_error.get("message"),
        )

    if event_type == "charge.refunded":
        return PaymentWebhookEvent(
            event_id=data.get("id"),
            event_type=event_type,
            payment_intent_id=obj.get("payment_intent"),
            charge_id=obj.get("id"),
            amount_refunded=obj.get("amount_refunded"),
        )

    logger.debug("Stripe webhook event %s not handled", event_type)
    return None
