#!/usr/bin/env python3
"""
Bank Alert Parser Module

Turns raw bank alert email text into structured Alert records.

Four independent extractions run against the text using the selected
format profile: amount, direction, timestamp and masked account. Each one is
optional; a failed extraction yields a documented default and is logged, so
extraction never raises:

- amount: Money.zero()
- direction: CREDIT (policy default when no keyword is present)
- timestamp: the extractor clock's "now"
- account: empty string

The description is always the first N characters of the raw text.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime

from ..core.config import ParserConfig
from ..core.dates import Clock, parse_with_formats
from ..core.models import Alert, Direction
from ..core.money import Money
from .profiles import FormatProfile, FormatRegistry, search

logger = logging.getLogger(__name__)


class AlertExtractor:
    """
    Extracts structured alerts from bank email text.

    Owns its FormatRegistry; profiles can be registered at runtime and take
    effect for every subsequent extraction.
    """

    def __init__(
        self,
        registry: FormatRegistry | None = None,
        config: ParserConfig | None = None,
        clock: Clock = datetime.now,
    ):
        """
        Initialize the extractor.

        Args:
            registry: Format profiles (defaults to the built-in bank formats)
            config: Description length, default currency and default format
            clock: Source of "now" for alerts without a parseable timestamp
        """
        self.config = config or ParserConfig()
        self.registry = registry or FormatRegistry(default_name=self.config.default_format)
        self.clock = clock

    def register_format(self, name: str, profile: FormatProfile) -> None:
        """Register a format profile, replacing any existing one with that name."""
        self.registry.register(name, profile)

    def formats(self) -> list[str]:
        """Names of the registered format profiles."""
        return self.registry.names()

    def extract(self, text: str, format_name: str | None = None, alert_id: str | None = None) -> Alert:
        """
        Parse one alert email.

        Args:
            text: Raw email text (may be empty)
            format_name: Profile name; unknown names fall back to the default
            alert_id: Identifier to assign (generated when omitted)

        Returns:
            Alert with every field populated
        """
        text = text or ""
        resolved_name, profile = self.registry.resolve(format_name)
        alert_id = alert_id or f"alert-{uuid.uuid4().hex[:12]}"

        alert = Alert(
            id=alert_id,
            amount=self._extract_amount(text, profile, alert_id),
            currency=profile.currency or self.config.default_currency,
            account_number=self._extract_account(text, profile, alert_id),
            description=text[: self.config.description_length],
            direction=self._extract_direction(text, profile, alert_id),
            timestamp=self._extract_timestamp(text, profile, alert_id),
            raw_text=text,
            format_name=resolved_name,
        )

        logger.debug(
            "Parsed %s with %s format: %s %s, account %r, %s",
            alert.id,
            resolved_name,
            alert.currency,
            alert.amount,
            alert.account_number,
            alert.direction.value,
        )
        return alert

    def extract_many(self, texts: Iterable[str], format_name: str | None = None) -> list[Alert]:
        """
        Parse several alert emails that share one format.

        Alert ids are "alert-<epoch ms>-<index>", so results can be traced
        back to their position in the input.
        """
        batch_stamp = int(self.clock().timestamp() * 1000)
        return [
            self.extract(text, format_name, alert_id=f"alert-{batch_stamp}-{idx}")
            for idx, text in enumerate(texts)
        ]

    def _extract_amount(self, text: str, profile: FormatProfile, alert_id: str) -> Money:
        """Find the amount token and parse it, defaulting to zero."""
        token = search(profile.amount_pattern, text)
        if token is None:
            logger.debug("%s: no amount found, using 0", alert_id)
            return Money.zero()

        try:
            amount = Money.from_string(token)
        except ValueError:
            logger.debug("%s: unparseable amount %r, using 0", alert_id, token)
            return Money.zero()

        # Alerts carry direction separately; amounts are never negative
        return amount.abs()

    def _extract_direction(self, text: str, profile: FormatProfile, alert_id: str) -> Direction:
        """Classify the matched keyword; anything that is not an outflow is a credit."""
        keyword = search(profile.direction_pattern, text)
        if keyword is None:
            logger.debug("%s: no direction keyword, using credit", alert_id)
            return Direction.CREDIT

        keyword = keyword.lower()
        if any(debit in keyword for debit in profile.debit_keywords):
            return Direction.DEBIT
        return Direction.CREDIT

    def _extract_timestamp(self, text: str, profile: FormatProfile, alert_id: str) -> datetime:
        """Parse the timestamp token, falling back to the extraction time."""
        token = search(profile.timestamp_pattern, text)
        if token is not None:
            parsed = parse_with_formats(token, profile.timestamp_formats)
            if parsed is not None:
                return parsed
            logger.debug("%s: unparseable timestamp %r, using extraction time", alert_id, token)
        else:
            logger.debug("%s: no timestamp found, using extraction time", alert_id)

        return self.clock()

    def _extract_account(self, text: str, profile: FormatProfile, alert_id: str) -> str:
        """Masked account identifier exactly as printed, or empty string."""
        token = search(profile.account_pattern, text)
        if token is None:
            logger.debug("%s: no account found", alert_id)
            return ""
        return token
