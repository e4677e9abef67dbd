#!/usr/bin/env python3
"""
Alert Reconciliation Workflow

Ties extraction and scoring together for batches of alert emails and keeps
running accuracy metrics across batches.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..alerts.parser import AlertExtractor
from ..core.config import MatchingConfig
from ..core.dates import Clock
from ..core.models import MatchResult, Transaction
from .scorer import MatchScorer

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationMetrics:
    """Running totals across processed batches."""

    total_alerts: int = 0
    matched_alerts: int = 0
    accuracy: float = 0.0
    last_run: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_alerts": self.total_alerts,
            "matched_alerts": self.matched_alerts,
            "accuracy": self.accuracy,
            "last_run": self.last_run.isoformat(),
        }


class AlertReconciler:
    """
    Parses alert emails and picks the best candidate for each one.

    The best result per alert is index 0 of the scorer's ranking; it is
    counted as matched only when it cleared the confidence threshold.
    """

    def __init__(
        self,
        extractor: AlertExtractor | None = None,
        scorer: MatchScorer | None = None,
        accuracy_target: float | None = None,
        clock: Clock = datetime.now,
    ):
        """
        Initialize the reconciler.

        Args:
            extractor: Alert extractor (defaults to the built-in bank formats)
            scorer: Match scorer (defaults to the default matching policy)
            accuracy_target: Match rate considered healthy (defaults to the
                scorer config's target)
            clock: Source of "now" for metrics timestamps
        """
        self.extractor = extractor or AlertExtractor(clock=clock)
        self.scorer = scorer or MatchScorer()
        self.accuracy_target = (
            accuracy_target if accuracy_target is not None else self.scorer.config.accuracy_target
        )
        self.clock = clock
        self.metrics = ReconciliationMetrics(last_run=clock())

    def process_alerts(
        self,
        emails: Sequence[str],
        transactions: Sequence[Transaction],
        format_name: str | None = None,
    ) -> list[MatchResult]:
        """
        Reconcile a batch of alert emails against candidate transactions.

        Args:
            emails: Raw alert email texts
            transactions: Candidate transactions shared by every alert
            format_name: Bank format for the whole batch

        Returns:
            Best MatchResult per email, in input order. Emails are skipped
            only when there are no candidates at all.
        """
        alerts = self.extractor.extract_many(emails, format_name)
        results: list[MatchResult] = []

        for alert in alerts:
            ranked = self.scorer.score(alert, transactions)
            if not ranked:
                logger.warning("No candidate transactions to match alert %s against", alert.id)
                continue

            best = ranked[0]
            results.append(best)

            self.metrics.total_alerts += 1
            if best.matched:
                self.metrics.matched_alerts += 1

        self.metrics.accuracy = (
            self.metrics.matched_alerts / self.metrics.total_alerts if self.metrics.total_alerts > 0 else 0.0
        )
        self.metrics.last_run = self.clock()

        logger.info(
            "Processed %d alerts: %d matched (running accuracy %.1f%%)",
            len(alerts),
            sum(1 for r in results if r.matched),
            self.metrics.accuracy * 100,
        )
        return results

    def get_metrics(self) -> ReconciliationMetrics:
        """Snapshot of running metrics with accuracy rounded to 2 places."""
        return replace(self.metrics, accuracy=round(self.metrics.accuracy, 2))

    def reset_metrics(self) -> None:
        """Reset running metrics to their initial state."""
        self.metrics = ReconciliationMetrics(last_run=self.clock())

    def is_meeting_target(self) -> bool:
        """Check whether running accuracy reaches the target."""
        return self.metrics.accuracy >= self.accuracy_target

    def update_config(self, **changes: Any) -> MatchingConfig:
        """
        Replace matching parameters at runtime.

        Args:
            **changes: MatchingConfig fields such as time_window,
                amount_tolerance, confidence_threshold or weights

        Returns:
            The new MatchingConfig

        Raises:
            TypeError: If a field name is not a MatchingConfig field
        """
        new_config = replace(self.scorer.config, **changes)
        self.scorer = MatchScorer(new_config)
        if "accuracy_target" in changes:
            self.accuracy_target = new_config.accuracy_target
        logger.info("Updated matching configuration: %s", ", ".join(sorted(changes)))
        return new_config

    def summary_report(self) -> str:
        """Human-readable summary of running metrics."""
        metrics = self.get_metrics()
        meeting = self.is_meeting_target()

        lines = [
            "========== BANK ALERT MATCHER REPORT ==========",
            f"Total Alerts Processed: {metrics.total_alerts}",
            f"Successfully Matched: {metrics.matched_alerts}",
            f"Accuracy: {metrics.accuracy * 100:.2f}%",
            f"Target ({self.accuracy_target * 100:.0f}%): {'ACHIEVED' if meeting else 'NOT YET'}",
            f"Last Run: {metrics.last_run.isoformat()}",
            "===============================================",
        ]
        return "\n".join(lines)


def generate_match_summary(results: list[MatchResult]) -> dict[str, Any]:
    """
    Generate summary statistics for best-match results.

    Args:
        results: One MatchResult per alert

    Returns:
        Dictionary with summary statistics
    """
    total_alerts = len(results)
    if total_alerts == 0:
        return {"total_alerts": 0}

    matched_confidences = [r.confidence for r in results if r.matched]
    matched_alerts = len(matched_confidences)
    avg_confidence = sum(matched_confidences) / matched_alerts if matched_alerts else 0

    return {
        "total_alerts": total_alerts,
        "matched": matched_alerts,
        "unmatched": total_alerts - matched_alerts,
        "match_rate": matched_alerts / total_alerts,
        "average_confidence": round(avg_confidence, 3),
    }
