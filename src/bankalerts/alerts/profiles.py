#!/usr/bin/env python3
"""
Bank Alert Format Profiles

Each bank lays out its alert emails differently:
- GTBank: "Amount: ₦50,000.00 ... Account: ****1234 ... 15/10/2024 14:30:45"
- Access: "NGN 50,000.00 ... A/C: ****1234 ... 15-Oct-2024 14:30:45"
- FirstBank: "Amount = ₦50,000 ... Account = ****1234 ... 15/10/2024 14:30"

A FormatProfile captures one layout as data (four patterns plus the strptime
layouts for the timestamp token), so a single extraction routine serves
every bank. Profiles live in a FormatRegistry owned by the extractor.
"""

import logging
import re
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache

logger = logging.getLogger(__name__)

PatternLike = str | re.Pattern[str]


@dataclass(frozen=True)
class FormatProfile:
    """
    Extraction rules for one bank's alert layout.

    Patterns may be given as strings or compiled patterns. Strings are
    compiled case-insensitively on first use; a malformed pattern surfaces
    as a failed extraction, not as an error at registration time.
    """

    amount_pattern: PatternLike
    direction_pattern: PatternLike
    timestamp_pattern: PatternLike
    account_pattern: PatternLike

    # strptime layouts tried in order for the matched timestamp token
    timestamp_formats: tuple[str, ...] = ("%d/%m/%Y %H:%M:%S",)

    # Matched direction keywords containing any of these are outflows
    debit_keywords: tuple[str, ...] = ("debit", "withdrawal")

    # None means "use the extractor's default currency"
    currency: str | None = None

    description: str = ""


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def search(pattern: PatternLike, text: str) -> str | None:
    """
    Search text with a profile pattern and return the captured token.

    The first capture group is returned when the pattern has one, otherwise
    the whole match. Invalid patterns are logged and treated as no match.

    Returns:
        Stripped token, or None if nothing matched
    """
    try:
        compiled = pattern if isinstance(pattern, re.Pattern) else _compile(pattern)
    except re.error as e:
        logger.warning("Invalid extraction pattern %r: %s", pattern, e)
        return None

    match = compiled.search(text)
    if not match:
        return None

    token = match.group(1) if compiled.groups else match.group(0)
    if token is None:
        return None
    return token.strip()


BUILTIN_PROFILES: dict[str, FormatProfile] = {
    "gtbank": FormatProfile(
        amount_pattern=r"Amount:\s*₦?([\d,]+\.?\d*)",
        direction_pattern=r"(debit|credit|withdrawal|transfer|payment)",
        timestamp_pattern=r"(\d{1,2}/\d{1,2}/\d{4}\s+\d{1,2}:\d{2}:\d{2})",
        account_pattern=r"Account:\s*(\*{2,4}\d{4,10})",
        timestamp_formats=("%d/%m/%Y %H:%M:%S",),
        description="Guaranty Trust Bank",
    ),
    "access": FormatProfile(
        amount_pattern=r"NGN\s*([\d,]+\.?\d*)",
        direction_pattern=r"(DEBIT|CREDIT|Withdrawal|Transfer|Payment)",
        timestamp_pattern=r"(\d{2}-\w{3}-\d{4}\s+\d{2}:\d{2}:\d{2})",
        account_pattern=r"A/C:\s*(\*{2,4}\d{4,10})",
        timestamp_formats=("%d-%b-%Y %H:%M:%S",),
        description="Access Bank",
    ),
    "firstbank": FormatProfile(
        amount_pattern=r"Amount\s*[:=]\s*₦?([\d,]+\.?\d*)",
        direction_pattern=r"(Debit|Credit)",
        timestamp_pattern=r"(\d{2}/\d{2}/\d{4}\s+\d{2}:\d{2})",
        account_pattern=r"Account\s*[:=]\s*(\*{2,4}\d{4,10})",
        timestamp_formats=("%d/%m/%Y %H:%M",),
        description="First Bank of Nigeria",
    ),
}


class FormatRegistry:
    """
    Named, runtime-extensible mapping of format profiles.

    Lookups are case-sensitive. Unknown names resolve to the default profile
    instead of failing. Writes replace the underlying mapping under a lock
    (copy-on-write), so concurrent readers always see a complete mapping.
    """

    def __init__(
        self,
        profiles: Mapping[str, FormatProfile] | None = None,
        default_name: str = "gtbank",
    ):
        """
        Initialize the registry.

        Args:
            profiles: Initial profiles (defaults to the built-in bank formats)
            default_name: Profile used when a requested name is unknown
        """
        initial = dict(BUILTIN_PROFILES if profiles is None else profiles)
        if default_name not in initial:
            raise ValueError(f"Default format {default_name!r} is not among the registered profiles")

        self._profiles: dict[str, FormatProfile] = initial
        self._default_name = default_name
        self._lock = threading.Lock()

    @property
    def default_name(self) -> str:
        return self._default_name

    def register(self, name: str, profile: FormatProfile) -> None:
        """Register a profile, replacing any existing profile with that name."""
        with self._lock:
            updated = dict(self._profiles)
            replaced = name in updated
            updated[name] = profile
            self._profiles = updated

        logger.info("%s format profile %r", "Replaced" if replaced else "Registered", name)

    def resolve(self, name: str | None) -> tuple[str, FormatProfile]:
        """
        Look up a profile by name, falling back to the default profile.

        Returns:
            Tuple of (name of the profile actually used, profile)
        """
        profiles = self._profiles
        if name is not None and name in profiles:
            return name, profiles[name]

        logger.debug("Unknown format %r, falling back to %r", name, self._default_name)
        return self._default_name, profiles[self._default_name]

    def get(self, name: str | None) -> FormatProfile:
        """Look up a profile by name, falling back to the default profile."""
        return self.resolve(name)[1]

    def names(self) -> list[str]:
        """Registered profile names, sorted."""
        return sorted(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._profiles)
