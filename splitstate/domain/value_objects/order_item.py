"""OrderItem value object.

One line of an order: SKU, quantity and unit price. Prices are Decimal on the
write side and travel as strings in event payloads so replays never pick up
float rounding.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Self

from splitstate.core.result import Failure, Result, Success
from splitstate.domain.errors.order_error import OrderError


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderItem:
    """Immutable order line.

    Attributes:
        sku: Stock keeping unit identifier.
        quantity: Number of units (positive).
        unit_price: Price per unit (non-negative).
    """

    sku: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        """Quantity multiplied by unit price."""
        return self.unit_price * self.quantity

    def validate(self) -> Result[None, str]:
        """Check business rules for a single line.

        Returns:
            Success(None): Line is valid.
            Failure(error): OrderError constant describing the violation.
        """
        if not self.sku:
            return Failure(error=OrderError.INVALID_SKU)
        if self.quantity <= 0:
            return Failure(error=OrderError.INVALID_QUANTITY)
        if self.unit_price < 0:
            return Failure(error=OrderError.INVALID_PRICE)
        return Success(value=None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "sku": self.sku,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Parse from a JSON-compatible dict.

        Raises:
            KeyError: If a field is missing.
            ValueError: If quantity or unit_price cannot be converted.
        """
        try:
            unit_price = Decimal(str(data["unit_price"]))
        except InvalidOperation as e:
            raise ValueError(f"invalid unit_price: {data['unit_price']!r}") from e
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"invalid quantity: {quantity!r}")
        return cls(sku=str(data["sku"]), quantity=quantity, unit_price=unit_price)
