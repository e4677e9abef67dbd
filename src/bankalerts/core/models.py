#!/usr/bin/env python3
"""
Core Data Models for Bank Alert Reconciliation

Data contracts shared by the alert extractor and the match scorer.
Alerts and match results are immutable once created; candidate transactions
belong to the caller and are never mutated here.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from .currency import DEFAULT_CURRENCY
from .dates import Clock, coerce_timestamp
from .money import Money

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Direction of money movement reported by an alert."""

    DEBIT = "debit"
    CREDIT = "credit"


class TransactionStatus(Enum):
    """Lifecycle status of a candidate transaction."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Alert:
    """
    Structured record extracted from one bank alert email.

    Invariant: amount is never negative and never missing; a failed amount
    extraction yields Money.zero().
    """

    id: str
    amount: Money
    currency: str
    account_number: str
    description: str
    direction: Direction
    timestamp: datetime
    raw_text: str
    format_name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (amount in major units)."""
        return {
            "id": self.id,
            "amount": str(self.amount),
            "currency": self.currency,
            "account_number": self.account_number,
            "description": self.description,
            "direction": self.direction.value,
            "timestamp": self.timestamp.isoformat(),
            "raw_text": self.raw_text,
            "format_name": self.format_name,
        }


@dataclass(frozen=True)
class Transaction:
    """
    Candidate transaction supplied by the caller.

    Note: amount is the absolute transaction value in minor units; the
    scorer compares it against the alert amount without sign handling.
    """

    id: str
    amount: Money
    account_number: str
    description: str
    timestamp: datetime
    currency: str = DEFAULT_CURRENCY
    status: TransactionStatus = TransactionStatus.COMPLETED
    source: str = "unknown"

    @classmethod
    def from_dict(cls, data: dict[str, Any], clock: Clock = datetime.now) -> "Transaction":
        """
        Create a Transaction from a loosely-typed record (e.g. parsed JSON).

        Accepts snake_case or camelCase keys. Malformed amounts degrade to
        zero and malformed timestamps to the clock's "now", so a bad record
        still scores (poorly) instead of aborting a batch.

        Args:
            data: Record with id, amount, accountNumber/account_number,
                description, timestamp, status, currency, source
            clock: Source of "now" for unparseable timestamps

        Returns:
            Transaction instance

        Raises:
            ValueError: If the record has no id
        """
        txn_id = data.get("id")
        if txn_id is None or str(txn_id) == "":
            raise ValueError(f"Transaction record has no id: {data!r}")

        raw_amount = data.get("amount")
        try:
            if raw_amount is None or isinstance(raw_amount, bool):
                raise ValueError(f"Not an amount: {raw_amount!r}")
            amount = Money.from_string(str(raw_amount))
        except ValueError:
            logger.warning("Transaction %s has unparseable amount %r, using 0", txn_id, raw_amount)
            amount = Money.zero()

        raw_status = str(data.get("status", TransactionStatus.COMPLETED.value)).lower()
        try:
            status = TransactionStatus(raw_status)
        except ValueError:
            logger.warning("Transaction %s has unknown status %r, using pending", txn_id, raw_status)
            status = TransactionStatus.PENDING

        return cls(
            id=str(txn_id),
            amount=amount,
            account_number=str(data.get("account_number", data.get("accountNumber", "")) or ""),
            description=str(data.get("description", "") or ""),
            timestamp=coerce_timestamp(data.get("timestamp"), clock=clock),
            currency=str(data.get("currency", DEFAULT_CURRENCY) or DEFAULT_CURRENCY),
            status=status,
            source=str(data.get("source", "unknown") or "unknown"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization (amount in major units)."""
        return {
            "id": self.id,
            "amount": str(self.amount),
            "currency": self.currency,
            "account_number": self.account_number,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "source": self.source,
        }


@dataclass(frozen=True)
class MatchDetail:
    """Per-candidate breakdown of the factors behind a confidence score."""

    amount_match: bool
    amount_difference: Money
    time_difference: timedelta
    description_similarity: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "amount_match": self.amount_match,
            "amount_difference": str(self.amount_difference),
            "time_difference_seconds": self.time_difference.total_seconds(),
            "description_similarity": self.description_similarity,
        }


@dataclass(frozen=True)
class MatchResult:
    """
    Scored outcome of pairing one alert with one candidate.

    transaction_id is only set when the candidate cleared the confidence
    threshold; below-threshold results carry None.
    """

    alert_id: str
    transaction_id: str | None
    confidence: float
    detail: MatchDetail
    matched: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "alert_id": self.alert_id,
            "transaction_id": self.transaction_id,
            "confidence": self.confidence,
            "matched": self.matched,
            "detail": self.detail.to_dict(),
        }
