"""Order entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List
from uuid import UUID

from ..value_objects.entity_ids import OrderId, UserId
from ..enums import OrderStatus
from ..exceptions import InvalidArgumentError


NOTE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

# Timestamp stamped the first time an order enters the status
STATUS_TIMESTAMP_FIELDS = {
    OrderStatus.PAID: "paid_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

REFUNDABLE_STATUSES = frozenset({
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})

CANCELLABLE_BY_CUSTOMER = frozenset({OrderStatus.PENDING, OrderStatus.PAID})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderNote:
    """Single audit trail entry"""
    created_at: datetime
    text: str
    author: str = "system"

    def render(self) -> str:
        return f"[{self.created_at.strftime(NOTE_TIMESTAMP_FORMAT)}] {self.text}"


@dataclass
class OrderItem:
    product_id: UUID
    variant_id: UUID
    product_name: str
    variant_name: str
    sku: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        for name in ("product_name", "variant_name", "sku"):
            if not getattr(self, name) or not getattr(self, name).strip():
                raise InvalidArgumentError(f"{name} cannot be empty")
        if self.quantity <= 0:
            raise InvalidArgumentError("Quantity must be greater than zero")
        self.unit_price = Decimal(self.unit_price)
        if self.unit_price < 0:
            raise InvalidArgumentError("Unit price cannot be negative")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Order:
    id: OrderId
    order_number: str
    customer_email: str
    currency: str = "USD"
    user_id: Optional[UserId] = None
    status: OrderStatus = OrderStatus.PENDING

    items: List[OrderItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    # Payment provider fields
    payment_intent_id: Optional[str] = None
    payment_method: Optional[str] = None

    # Shipment metadata
    shipping_method: Optional[str] = None
    tracking_number: Optional[str] = None

    paid_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    notes: List[OrderNote] = field(default_factory=list)

    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.order_number or not self.order_number.strip():
            raise InvalidArgumentError("Order number cannot be empty")
        if not self.customer_email or not self.customer_email.strip():
            raise InvalidArgumentError("Customer email cannot be empty")
        if not self.currency or not self.currency.strip():
            raise InvalidArgumentError("Currency cannot be empty")
        self.customer_email = self.customer_email.strip().lower()
        self.currency = self.currency.upper()

    def add_item(self, item: OrderItem) -> OrderItem:
        self.items.append(item)
        self.calculate_totals()
        return item

    def set_charges(
        self,
        shipping_cost: Decimal = Decimal("0"),
        tax_amount: Decimal = Decimal("0"),
        discount_amount: Decimal = Decimal("0"),
    ) -> None:
        """Set shipping, tax and discount, then recompute totals"""
        charges = {
            "Shipping cost": Decimal(shipping_cost),
            "Tax amount": Decimal(tax_amount),
            "Discount amount": Decimal(discount_amount),
        }
        for label, value in charges.items():
            if value < 0:
                raise InvalidArgumentError(f"{label} cannot be negative")

        self.shipping_cost = charges["Shipping cost"]
        self.tax_amount = charges["Tax amount"]
        self.discount_amount = charges["Discount amount"]
        self.calculate_totals()

    def calculate_totals(self) -> None:
        self.subtotal = sum((item.line_total for item in self.items), Decimal("0"))
        self.total = self.subtotal + self.shipping_cost + self.tax_amount - self.discount_amount

    def set_payment_info(self, payment_intent_id: str, payment_method: Optional[str] = None) -> None:
        if not payment_intent_id or not payment_intent_id.strip():
            raise InvalidArgumentError("Payment intent ID cannot be empty")
        self.payment_intent_id = payment_intent_id.strip()
        self.payment_method = payment_method

    def apply_status(self, status: OrderStatus, at: datetime) -> None:
        """Set the status and stamp its timestamp if this is the first entry.

        No transition checks happen here; callers go through ``OrderLifecycle``.
        """
        self.status = status
        timestamp_field = STATUS_TIMESTAMP_FIELDS.get(status)
        if timestamp_field and getattr(self, timestamp_field) is None:
            setattr(self, timestamp_field, at)
        self.updated_at = at

    def add_note(self, note: OrderNote) -> None:
        self.notes.append(note)
        self.updated_at = note.created_at

    @property
    def notes_text(self) -> Optional[str]:
        """Notes rendered as newline separated ``[timestamp] text`` lines"""
        if not self.notes:
            return None
        return "\n".join(note.render() for note in self.notes)

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_BY_CUSTOMER

    @property
    def can_be_refunded(self) -> bool:
        return self.status in REFUNDABLE_STATUSES

    def record_event(self, event) -> None:
        self._events.append(event)

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
