"""Order domain events"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import OrderStatus
from ..value_objects.entity_ids import OrderId


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    order_number: str
    customer_email: str
    occurred_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    order_number: str
    from_status: OrderStatus
    to_status: OrderStatus
    reason: Optional[str]
    occurred_at: datetime
