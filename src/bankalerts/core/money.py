#!/usr/bin/env python3
"""
Money Primitive Type

Immutable amount wrapper that uses integer minor units internally.
Prevents floating-point errors when comparing alert and transaction amounts.
"""

from dataclasses import dataclass
from decimal import Decimal

from .currency import (
    minor_units_to_decimal,
    minor_units_to_str,
    parse_amount_to_minor_units,
    safe_amount_to_minor_units,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable amount in minor units (kobo for NGN).

    The currency code is carried alongside on the owning record rather than
    inside Money, since reconciliation never converts between currencies.

    Examples:
        >>> amount = Money.from_string("50,000.00")
        >>> amount.to_minor_units()
        5000000
        >>> str(amount)
        '50000.00'
        >>> (Money.from_major(1300) - Money.from_major(1250)).abs()
        Money(minor_units=5000)
    """

    minor_units: int

    @classmethod
    def zero(cls) -> "Money":
        """Zero amount, used when an amount cannot be extracted."""
        return cls(minor_units=0)

    @classmethod
    def from_minor_units(cls, minor_units: int) -> "Money":
        """Create Money from minor units."""
        return cls(minor_units=minor_units)

    @classmethod
    def from_string(cls, amount_str: str) -> "Money":
        """
        Parse a printed amount such as '50,000.00' or '₦1,250'.

        Raises:
            ValueError: If the text is not a number
        """
        return cls(minor_units=parse_amount_to_minor_units(amount_str))

    @classmethod
    def from_major(cls, amount: int | float | str | Decimal) -> "Money":
        """
        Create Money from a major-unit value, degrading invalid input to zero.

        Args:
            amount: Value like 1250, 1250.5, "1,250.50" or Decimal("1250.50")

        Returns:
            Money object (zero for unparseable input)
        """
        return cls(minor_units=safe_amount_to_minor_units(amount))

    def to_minor_units(self) -> int:
        """Get value in minor units."""
        return self.minor_units

    def to_decimal(self) -> Decimal:
        """Get exact value in major units."""
        return minor_units_to_decimal(self.minor_units)

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(minor_units=abs(self.minor_units))

    def is_zero(self) -> bool:
        """Check whether the amount is zero."""
        return self.minor_units == 0

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects."""
        return Money(minor_units=self.minor_units + other.minor_units)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects."""
        return Money(minor_units=self.minor_units - other.minor_units)

    def __lt__(self, other: "Money") -> bool:
        """Less than comparison."""
        return self.minor_units < other.minor_units

    def __le__(self, other: "Money") -> bool:
        """Less than or equal comparison."""
        return self.minor_units <= other.minor_units

    def __gt__(self, other: "Money") -> bool:
        """Greater than comparison."""
        return self.minor_units > other.minor_units

    def __ge__(self, other: "Money") -> bool:
        """Greater than or equal comparison."""
        return self.minor_units >= other.minor_units

    def __str__(self) -> str:
        """Format as major-unit string."""
        return minor_units_to_str(self.minor_units)

    def __repr__(self) -> str:
        """Repr format."""
        return f"Money(minor_units={self.minor_units})"
