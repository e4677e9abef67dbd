#!/usr/bin/env python3
"""
JSON Utilities Module

Reading and writing of the JSON documents exchanged with callers: candidate
transaction lists in, parsed alerts and match results out. Output is always
pretty-printed for easier review of reconciliation runs.
"""

import json
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from .money import Money


def to_jsonable(value: Any) -> Any:
    """
    Default serializer for types the json module does not handle.

    Money and Decimal become major-unit strings, datetimes become ISO 8601,
    durations become seconds and enums their values.
    """
    if isinstance(value, (Money, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_json(filepath: str | Path, data: Any) -> None:
    """
    Write data to a JSON file with standard pretty-printing.

    Args:
        filepath: Path to the JSON file (parent directories are created)
        data: Data to write; domain objects are converted with to_jsonable
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=to_jsonable)


def read_json(filepath: str | Path) -> Any:
    """Read data from a JSON file."""
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)


def format_json(data: Any) -> str:
    """Format data as a pretty-printed JSON string."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=to_jsonable)
