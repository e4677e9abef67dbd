#!/usr/bin/env python3
"""
Configuration Management for Bank Alert Reconciliation

Handles environment-based configuration with documented defaults and validation.
Supports multiple environments (development, test, production); the matching
and parsing policies can be tuned per deployment without code changes.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field, is_dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .currency import DEFAULT_CURRENCY

# Load environment variables from .env file
load_dotenv()

DEFAULT_TIME_WINDOW = timedelta(minutes=15)
DEFAULT_AMOUNT_TOLERANCE = Decimal("0.02")
DEFAULT_CONFIDENCE_THRESHOLD = 0.6
DEFAULT_ACCURACY_TARGET = 0.8
DEFAULT_DESCRIPTION_LENGTH = 200
DEFAULT_FORMAT_NAME = "gtbank"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights applied to each match factor.

    The four weights sum to 1.0 so that a combined confidence stays in [0, 1].
    """

    amount: float = 0.4
    account: float = 0.3
    time: float = 0.2
    description: float = 0.1

    def total(self) -> float:
        """Sum of all weights."""
        return self.amount + self.account + self.time + self.description


@dataclass
class MatchingConfig:
    """Tolerances and thresholds used by the match scorer."""

    time_window: timedelta = DEFAULT_TIME_WINDOW
    amount_tolerance: Decimal = DEFAULT_AMOUNT_TOLERANCE
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    accuracy_target: float = DEFAULT_ACCURACY_TARGET


@dataclass
class ParserConfig:
    """Alert extraction defaults."""

    description_length: int = DEFAULT_DESCRIPTION_LENGTH
    default_currency: str = DEFAULT_CURRENCY
    default_format: str = DEFAULT_FORMAT_NAME


@dataclass
class EmailConfig:
    """IMAP configuration for polling bank alert emails."""

    imap_server: str = "imap.gmail.com"
    imap_port: int = 993
    username: str | None = None
    password: str | None = None
    folder: str = "INBOX"
    sender_filter: str | None = None


@dataclass
class Config:
    """
    Settings for one deployment of the alert matcher.

    Every value can be overridden through environment variables (a .env file
    in the working directory is honoured); see from_environment for names.
    """

    environment: Environment

    data_dir: Path
    output_dir: Path  # match results written by the CLI

    matching: MatchingConfig
    parser: ParserConfig
    email: EmailConfig

    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """
        Load settings from BANKALERTS_*, MATCH_*, ALERT_* and EMAIL_* variables.

        Raises:
            ValueError: If a numeric setting cannot be parsed
        """
        env = Environment(os.getenv("BANKALERTS_ENV", "development"))

        # Test runs default to a scratch directory
        if env == Environment.TEST:
            fallback_dir = str(Path(tempfile.gettempdir()) / "test_bankalerts")
            data_dir = Path(os.getenv("BANKALERTS_DATA_DIR", fallback_dir))
        else:
            data_dir = Path(os.getenv("BANKALERTS_DATA_DIR", "./data")).expanduser().resolve()

        output_dir = data_dir / "matches"
        output_dir.mkdir(parents=True, exist_ok=True)

        weights = ScoringWeights(
            amount=float(os.getenv("MATCH_WEIGHT_AMOUNT", "0.4")),
            account=float(os.getenv("MATCH_WEIGHT_ACCOUNT", "0.3")),
            time=float(os.getenv("MATCH_WEIGHT_TIME", "0.2")),
            description=float(os.getenv("MATCH_WEIGHT_DESCRIPTION", "0.1")),
        )

        matching = MatchingConfig(
            time_window=timedelta(minutes=float(os.getenv("MATCH_TIME_WINDOW_MINUTES", "15"))),
            amount_tolerance=_parse_decimal(os.getenv("MATCH_AMOUNT_TOLERANCE", "0.02")),
            confidence_threshold=float(os.getenv("MATCH_CONFIDENCE_THRESHOLD", "0.6")),
            weights=weights,
            accuracy_target=float(os.getenv("MATCH_ACCURACY_TARGET", "0.8")),
        )

        parser = ParserConfig(
            description_length=int(os.getenv("ALERT_DESCRIPTION_LENGTH", "200")),
            default_currency=os.getenv("ALERT_DEFAULT_CURRENCY", DEFAULT_CURRENCY).upper(),
            default_format=os.getenv("ALERT_DEFAULT_FORMAT", DEFAULT_FORMAT_NAME),
        )

        email = EmailConfig(
            imap_server=os.getenv("EMAIL_IMAP_SERVER", "imap.gmail.com"),
            imap_port=int(os.getenv("EMAIL_IMAP_PORT", "993")),
            username=os.getenv("EMAIL_USERNAME"),
            password=os.getenv("EMAIL_PASSWORD"),
            folder=os.getenv("EMAIL_FOLDER", "INBOX"),
            sender_filter=os.getenv("EMAIL_SENDER_FILTER") or None,
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            output_dir=output_dir,
            matching=matching,
            parser=parser,
            email=email,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.data_dir}")

        # Matching policy
        weights = self.matching.weights
        if any(w < 0 for w in (weights.amount, weights.account, weights.time, weights.description)):
            errors.append("Match weights must be non-negative")
        if abs(weights.total() - 1.0) > 1e-9:
            errors.append(f"Match weights must sum to 1.0 (got {weights.total():.4f})")
        if self.matching.time_window <= timedelta(0):
            errors.append("Match time window must be positive")
        if not Decimal("0") <= self.matching.amount_tolerance <= Decimal("1"):
            errors.append("Amount tolerance must be between 0 and 1")
        if not 0.0 <= self.matching.confidence_threshold <= 1.0:
            errors.append("Confidence threshold must be between 0 and 1")
        if not 0.0 <= self.matching.accuracy_target <= 1.0:
            errors.append("Accuracy target must be between 0 and 1")

        # Parser defaults
        if self.parser.description_length <= 0:
            errors.append("Alert description length must be positive")
        if not self.parser.default_currency:
            errors.append("Default currency code must not be empty")

        from ..alerts.profiles import BUILTIN_PROFILES

        if self.parser.default_format not in BUILTIN_PROFILES:
            errors.append(
                f"Default alert format {self.parser.default_format!r} is not one of: "
                f"{', '.join(sorted(BUILTIN_PROFILES))}"
            )

        # Email
        if self.email.username and not self.email.password:
            errors.append("EMAIL_PASSWORD is required when EMAIL_USERNAME is provided")
        if self.email.imap_port <= 0 or self.email.imap_port > 65535:
            errors.append("Email IMAP port must be 1-65535")

        return errors

    def setup_logging(self) -> None:
        """
        Configure root logging for the reconciliation tools.

        Development output names the emitting module, since extraction
        fallbacks are logged per field from several modules.
        """
        level = getattr(logging, self.log_level, logging.INFO)
        if self.environment == Environment.DEVELOPMENT:
            log_format = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
        else:
            log_format = "%(asctime)s %(levelname)-7s %(message)s"

        logging.basicConfig(level=level, format=log_format, datefmt="%Y-%m-%d %H:%M:%S")

        # IMAP session details are only wanted outside production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("bankalerts.alerts.fetcher").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Dotted names of mailbox credentials that must not be displayed."""
        return ["email.password", "email.username"]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """
        Flatten configuration for display or JSON output.

        Section dataclasses (matching, parser, email) become nested dicts;
        mailbox credentials are masked unless include_sensitive is set.
        """
        hidden = set() if include_sensitive else set(self.get_sensitive_fields())
        output: dict[str, Any] = {}

        for name, value in self.__dict__.items():
            if not is_dataclass(value):
                output[name] = _plain_value(value)
                continue

            output[name] = {
                key: "***REDACTED***" if f"{name}.{key}" in hidden else _plain_value(item)
                for key, item in value.__dict__.items()
            }

        return output


def _plain_value(value: Any) -> Any:
    """Convert config values to JSON-friendly primitives."""
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, ScoringWeights):
        return {
            "amount": value.amount,
            "account": value.account,
            "time": value.time,
            "description": value.description,
        }
    return value


def _parse_decimal(value: str) -> Decimal:
    """Parse a decimal setting, raising ValueError for malformed input."""
    try:
        return Decimal(value.strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal configuration value: {value!r}") from e


_config: Config | None = None


def get_config() -> Config:
    """
    Process-wide configuration, loaded from the environment on first use.

    Raises:
        ValueError: If the loaded settings fail validation (the invalid
            configuration is not cached)
    """
    global _config
    if _config is not None:
        return _config

    loaded = Config.from_environment()
    errors = loaded.validate()
    if errors:
        raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    loaded.setup_logging()
    _config = loaded
    return _config


def reload_config() -> Config:
    """Discard the cached configuration and load it again."""
    global _config
    _config = None
    return get_config()


def is_development() -> bool:
    return get_config().environment == Environment.DEVELOPMENT


def is_test() -> bool:
    return get_config().environment == Environment.TEST


def is_production() -> bool:
    return get_config().environment == Environment.PRODUCTION
