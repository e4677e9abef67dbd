#!/usr/bin/env python3
"""
Timestamp Helpers

Parsing and normalization of the points in time carried by alerts and
candidate transactions. Alert timestamps come from bank-specific text layouts;
candidate timestamps arrive as datetimes, ISO strings or epoch numbers.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def parse_with_formats(value: str, formats: Iterable[str]) -> datetime | None:
    """
    Parse a timestamp token against a sequence of strptime layouts.

    Args:
        value: Timestamp text like "15/10/2024 14:30:45"
        formats: Layouts to try in order

    Returns:
        Parsed datetime, or None if no layout fits
    """
    # Collapse runs of whitespace between date and time
    normalized = " ".join(value.split())
    for fmt in formats:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    return None


def coerce_timestamp(value: Any, clock: Clock = datetime.now) -> datetime:
    """
    Convert a loosely-typed timestamp to a datetime.

    Accepts datetime objects, ISO 8601 strings (with or without a trailing
    "Z") and epoch numbers (seconds, or milliseconds when larger than 1e11).
    Anything else falls back to the clock.

    Args:
        value: Timestamp value from a candidate record
        clock: Source of "now" for the fallback path

    Returns:
        A datetime (never None)
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if abs(value) > 1e11 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning("Timestamp %r out of range, using current time", value)
            return clock()

    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Unparseable timestamp %r, using current time", value)
            return clock()

    logger.warning("Missing timestamp %r, using current time", value)
    return clock()


def to_naive_utc(value: datetime) -> datetime:
    """
    Drop timezone info so aware and naive datetimes can be compared.

    Aware values are first converted to UTC; naive values are assumed to
    already be in the reference zone and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def time_difference(first: datetime, second: datetime) -> timedelta:
    """Absolute difference between two points in time."""
    if (first.tzinfo is None) != (second.tzinfo is None):
        first, second = to_naive_utc(first), to_naive_utc(second)
    return abs(first - second)
