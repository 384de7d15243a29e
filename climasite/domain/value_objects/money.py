"""Money value object with currency"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from ..exceptions import InvalidArgumentError


CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        if self.amount < 0:
            raise InvalidArgumentError("Amount cannot be negative")
        if not self.currency or not self.currency.strip():
            raise InvalidArgumentError("Currency required")

    def to_cents(self) -> int:
        return int((self.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @classmethod
    def from_cents(cls, cents: int, currency: str = "USD") -> "Money":
        return cls(amount=(Decimal(cents) / 100).quantize(CENT), currency=currency.upper())

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
