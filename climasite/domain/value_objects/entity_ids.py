"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4

from ..exceptions import InvalidArgumentError


@dataclass(frozen=True)
class UserId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise InvalidArgumentError("User ID must be a valid UUID")

    @classmethod
    def generate(cls) -> 'UserId':
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str) -> 'UserId':
        """Create UserId from string representation"""
        try:
            return cls(UUID(uuid_str))
        except (TypeError, ValueError, AttributeError):
            raise InvalidArgumentError(f"Invalid user ID: {uuid_str!r}")


@dataclass(frozen=True)
class OrderId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise InvalidArgumentError("Order ID must be a valid UUID")

    @classmethod
    def generate(cls) -> 'OrderId':
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str) -> 'OrderId':
        """Create OrderId from string representation"""
        if not uuid_str:
            raise InvalidArgumentError("Order ID is required")
        try:
            return cls(UUID(uuid_str))
        except (TypeError, ValueError, AttributeError):
            raise InvalidArgumentError(f"Invalid order ID: {uuid_str!r}")

    def __str__(self) -> str:
        return str(self.value)
