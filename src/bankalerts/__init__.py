"""
Bank Alert Matcher - Alert-to-Transaction Reconciliation

Reconciles unstructured bank alert emails against a list of known
transactions, producing a ranked, confidence-scored match per alert.

Key Features:
- Bank-specific alert parsing driven by format profiles (GTBank, Access, FirstBank)
- Runtime registration of new bank formats
- Four-factor weighted confidence scoring (amount, account, time, description)
- Running accuracy metrics across reconciliation batches
- IMAP polling for unread alert emails

Domain Packages:
- core: Amount handling, data models, configuration
- alerts: Alert extraction and inbox fetching
- matching: Similarity, scoring and reconciliation workflow
- cli: Command-line interface

Example Usage:
    from bankalerts.alerts import AlertExtractor
    from bankalerts.matching import MatchScorer

    alert = AlertExtractor().extract(email_text, "gtbank")
    best = MatchScorer().score(alert, transactions)[0]

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Bank Alert Matcher Contributors"

from .alerts import AlertExtractor, FormatProfile, FormatRegistry
from .core.config import Environment, get_config
from .core.models import Alert, Direction, MatchDetail, MatchResult, Transaction
from .matching import AlertReconciler, MatchScorer, similarity

__all__ = [
    "Alert",
    "AlertExtractor",
    "AlertReconciler",
    "Direction",
    "Environment",
    "FormatProfile",
    "FormatRegistry",
    "MatchDetail",
    "MatchResult",
    "MatchScorer",
    "Transaction",
    "get_config",
    "similarity",
]
