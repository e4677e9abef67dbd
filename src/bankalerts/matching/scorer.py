#!/usr/bin/env python3
"""
Alert Match Scoring

Scores candidate transactions against one alert and ranks them.

Confidence is a linear weighted sum of four factors:
- amount (0.4): |alert - candidate| / alert <= tolerance (2%), inclusive
- account (0.3): masked account strings are equal
- time (0.2): |alert time - candidate time| <= window (15 minutes), inclusive
- description (0.1): continuous edit-distance similarity

The weights are configuration (MatchingConfig.weights), not constants of
the algorithm.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from ..core.config import MatchingConfig
from ..core.dates import coerce_timestamp, time_difference
from ..core.models import Alert, MatchDetail, MatchResult, Transaction
from ..core.money import Money
from .similarity import similarity

logger = logging.getLogger(__name__)

# Confidence is rounded so that factor sums such as 0.3 + 0.2 + 0.09 compare
# exactly against the threshold
CONFIDENCE_PRECISION = 4


class MatchScorer:
    """Ranks candidate transactions against an alert by confidence"""

    def __init__(self, config: MatchingConfig | None = None):
        """
        Initialize the scorer.

        Args:
            config: Time window, amount tolerance, threshold and weights
        """
        self.config = config or MatchingConfig()

    def score(self, alert: Alert, candidates: Sequence[Transaction]) -> list[MatchResult]:
        """
        Score every candidate and rank the results.

        Exactly one result is returned per candidate, sorted by descending
        confidence; candidates with equal confidence keep their input order.
        Index 0 is the best result even when nothing cleared the threshold.

        Args:
            alert: Parsed alert
            candidates: Candidate transactions (not modified)

        Returns:
            Ranked list of MatchResult
        """
        results = [self.score_candidate(alert, candidate) for candidate in candidates]

        # sorted() is stable, including with reverse=True
        ranked = sorted(results, key=lambda r: r.confidence, reverse=True)

        if ranked:
            best = ranked[0]
            logger.debug(
                "Alert %s: best of %d candidates has confidence %.4f (%s)",
                alert.id,
                len(ranked),
                best.confidence,
                "matched" if best.matched else "no match",
            )
        else:
            logger.debug("Alert %s: no candidates to score", alert.id)

        return ranked

    def score_candidate(self, alert: Alert, candidate: Transaction) -> MatchResult:
        """
        Score a single candidate against an alert.

        Returns:
            MatchResult; transaction_id is set only when matched
        """
        weights = self.config.weights

        alert_amount = alert.amount.abs()
        candidate_amount = _candidate_amount(candidate)
        amount_difference = (alert_amount - candidate_amount).abs()
        amount_match = self._amount_within_tolerance(alert_amount, amount_difference)

        account_match = alert.account_number == candidate.account_number

        time_diff = time_difference(alert.timestamp, _candidate_timestamp(candidate))
        time_match = time_diff <= self.config.time_window

        description_similarity = similarity(alert.description, candidate.description)

        confidence = 0.0
        if amount_match:
            confidence += weights.amount
        if account_match:
            confidence += weights.account
        if time_match:
            confidence += weights.time
        confidence += description_similarity * weights.description

        confidence = round(max(0.0, min(1.0, confidence)), CONFIDENCE_PRECISION)
        matched = confidence >= self.config.confidence_threshold

        logger.debug(
            "Alert %s vs %s: amount=%s account=%s time=%s description=%.3f -> %.4f",
            alert.id,
            candidate.id,
            amount_match,
            account_match,
            time_match,
            description_similarity,
            confidence,
        )

        return MatchResult(
            alert_id=alert.id,
            transaction_id=candidate.id if matched else None,
            confidence=confidence,
            detail=MatchDetail(
                amount_match=amount_match,
                amount_difference=amount_difference,
                time_difference=time_diff,
                description_similarity=description_similarity,
            ),
            matched=matched,
        )

    def _amount_within_tolerance(self, alert_amount: Money, amount_difference: Money) -> bool:
        """
        Check the relative amount difference against the tolerance (inclusive).

        A zero alert amount defines the ratio as 0, so any candidate amount
        passes.
        """
        if alert_amount.is_zero():
            return True

        allowed = Decimal(alert_amount.to_minor_units()) * Decimal(str(self.config.amount_tolerance))
        return Decimal(amount_difference.to_minor_units()) <= allowed

    def get_config(self) -> dict[str, Any]:
        """Current scoring parameters."""
        weights = self.config.weights
        return {
            "time_window_seconds": self.config.time_window.total_seconds(),
            "amount_tolerance": str(self.config.amount_tolerance),
            "confidence_threshold": self.config.confidence_threshold,
            "weights": {
                "amount": weights.amount,
                "account": weights.account,
                "time": weights.time,
                "description": weights.description,
            },
        }


def _candidate_amount(candidate: Transaction) -> Money:
    """Candidate amount as Money, degrading foreign types instead of failing."""
    if isinstance(candidate.amount, Money):
        return candidate.amount.abs()
    return Money.from_major(candidate.amount).abs()


def _candidate_timestamp(candidate: Transaction) -> datetime:
    """Candidate timestamp as datetime, degrading foreign types instead of failing."""
    return coerce_timestamp(candidate.timestamp)
