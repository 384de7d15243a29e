"""Domain errors raised by the order aggregate and its use cases"""

from .enums import OrderStatus


class OrderDomainError(ValueError):
    """Base class for order domain errors"""


class InvalidArgumentError(OrderDomainError):
    """Input rejected before any state mutation"""


class InvalidTransitionError(OrderDomainError):
    """Attempted status change is not an edge of the transition table"""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot transition order from {from_status.display_name} to {to_status.display_name}"
        )


class OrderNotFoundError(OrderDomainError):

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Order {reference} not found")


class OrderAccessDeniedError(OrderDomainError):
    """Customer tried to act on an order they do not own"""
