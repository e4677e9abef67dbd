"""
Bank Alert Extraction Package

Turns raw bank alert emails into structured Alert records.

Key Components:
- profiles: per-bank format profiles and the runtime-extensible registry
- parser: AlertExtractor, one generic extraction routine driven by a profile
- fetcher: IMAP polling for unread alert emails

Supported Formats:
- gtbank (default): "Amount: ₦50,000.00", "Account: ****1234", "15/10/2024 14:30:45"
- access: "NGN 50,000.00", "A/C: ****1234", "15-Oct-2024 14:30:45"
- firstbank: "Amount = ₦50,000", "Account = ****1234", "15/10/2024 14:30"

Extraction never fails: missing or unparseable fields fall back to
documented defaults (zero amount, credit direction, extraction time, empty
account) and are logged at debug level.
"""

from .fetcher import BankAlertEmail, InboxFetcher
from .parser import AlertExtractor
from .profiles import BUILTIN_PROFILES, FormatProfile, FormatRegistry

__all__ = [
    "BUILTIN_PROFILES",
    "AlertExtractor",
    "BankAlertEmail",
    "FormatProfile",
    "FormatRegistry",
    "InboxFetcher",
]
