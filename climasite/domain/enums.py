"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PAYMENT_FAILED = "payment_failed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def display_name(self) -> str:
        """Human readable name used in audit notes, e.g. ``PaymentFailed``"""
        return "".join(part.capitalize() for part in self.value.split("_"))


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class WebhookEventType(str, Enum):
    PAYMENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_FAILED = "payment_intent.payment_failed"
    CHARGE_REFUNDED = "charge.refunded"
