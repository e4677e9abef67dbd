"""
Core Utilities Package

Shared primitives and data contracts used by the alert extractor and the
match scorer.

This package provides:
- Amount handling with integer minor units for precision
- Data models for alerts, candidate transactions and match results
- Timestamp parsing and normalization helpers
- Configuration management for environment-specific settings
"""

from .config import (
    Config,
    EmailConfig,
    Environment,
    MatchingConfig,
    ParserConfig,
    ScoringWeights,
    get_config,
    is_development,
    is_production,
    is_test,
    reload_config,
)
from .currency import (
    DEFAULT_CURRENCY,
    format_amount,
    minor_units_to_str,
    parse_amount_to_minor_units,
    safe_amount_to_minor_units,
)
from .models import (
    Alert,
    Direction,
    MatchDetail,
    MatchResult,
    Transaction,
    TransactionStatus,
)
from .money import Money

__all__ = [
    "DEFAULT_CURRENCY",
    # Data models
    "Alert",
    # Configuration
    "Config",
    "Direction",
    "EmailConfig",
    "Environment",
    "MatchDetail",
    "MatchResult",
    "MatchingConfig",
    "Money",
    "ParserConfig",
    "ScoringWeights",
    "Transaction",
    "TransactionStatus",
    # Currency utilities
    "format_amount",
    "get_config",
    "is_development",
    "is_production",
    "is_test",
    "minor_units_to_str",
    "parse_amount_to_minor_units",
    "reload_config",
    "safe_amount_to_minor_units",
]
