#!/usr/bin/env python3
"""
Currency Parsing and Formatting Utilities

Amount handling for bank alert reconciliation.
All amounts are carried as integer minor units (kobo, cents) to avoid
floating-point errors when comparing alert and transaction amounts.

Currency Systems:
- Bank alerts print major units with grouping commas: "₦50,000.00"
- Internal calculations use minor units: 100 kobo = ₦1.00
- Display uses "<CODE> <major>.<minor>": "NGN 50000.00"

Key Principles:
- Never use floating-point arithmetic for amount comparisons
- Parse through Decimal, store as int
- Currency codes are carried through unchanged, never converted
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

DEFAULT_CURRENCY = "NGN"

MINOR_UNITS_PER_MAJOR = 100

# Symbols that may prefix an amount token in alert text
CURRENCY_SYMBOLS = {
    "₦": "NGN",
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
}


def parse_amount_to_minor_units(amount_str: str) -> int:
    """
    Parse a printed amount to integer minor units.

    Grouping commas, surrounding whitespace and a leading currency symbol are
    stripped. Digits beyond the second decimal place are rounded half-up.

    Args:
        amount_str: Amount text like "50,000.00", "₦1,250" or "12.5"

    Returns:
        Amount in minor units

    Raises:
        ValueError: If the text is not a number

    Examples:
        parse_amount_to_minor_units("50,000") -> 5000000
        parse_amount_to_minor_units("₦1,250.50") -> 125050
        parse_amount_to_minor_units("12.345") -> 1235
    """
    clean = amount_str.replace(",", "").strip()
    for symbol in CURRENCY_SYMBOLS:
        clean = clean.replace(symbol, "")
    clean = clean.strip()

    if not clean:
        raise ValueError(f"Empty amount: {amount_str!r}")

    try:
        decimal_amount = Decimal(clean)
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount_str!r}") from e

    if not decimal_amount.is_finite():
        raise ValueError(f"Non-finite amount: {amount_str!r}")

    minor = (decimal_amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


def safe_amount_to_minor_units(value: Union[str, int, float, Decimal, None]) -> int:
    """
    Convert a loosely-typed amount to minor units, returning 0 for invalid input.

    Numeric input is treated as major units (1250 -> 125000 kobo).

    Examples:
        safe_amount_to_minor_units(1250) -> 125000
        safe_amount_to_minor_units("1,250.00") -> 125000
        safe_amount_to_minor_units("n/a") -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        return parse_amount_to_minor_units(str(value))
    except ValueError:
        return 0


def minor_units_to_str(minor_units: int) -> str:
    """
    Convert minor units to a major-unit string using integer arithmetic.

    Example:
        minor_units_to_str(5000000) -> "50000.00"
    """
    is_negative = minor_units < 0
    abs_units = abs(int(minor_units))

    major = abs_units // MINOR_UNITS_PER_MAJOR
    remainder = abs_units % MINOR_UNITS_PER_MAJOR

    if is_negative:
        return f"-{major}.{remainder:02d}"
    return f"{major}.{remainder:02d}"


def minor_units_to_decimal(minor_units: int) -> Decimal:
    """Convert minor units to an exact Decimal in major units."""
    return Decimal(minor_units) / MINOR_UNITS_PER_MAJOR


def format_amount(minor_units: int, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format minor units for display with a currency code.

    Example:
        format_amount(125000, "NGN") -> "NGN 1250.00"
    """
    return f"{currency} {minor_units_to_str(minor_units)}"
