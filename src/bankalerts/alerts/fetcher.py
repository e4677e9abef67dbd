#!/usr/bin/env python3
"""
Bank Alert Inbox Fetcher

Polls an IMAP mailbox for unread bank alert emails and returns their bodies
as plain text ready for the AlertExtractor.
"""

import email
import email.header
import email.message
import email.utils
import imaplib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from bs4 import BeautifulSoup

from ..core.config import EmailConfig, get_config

logger = logging.getLogger(__name__)

DEFAULT_POLL_WINDOW = timedelta(minutes=15)


@dataclass
class BankAlertEmail:
    """A bank alert email fetched from the mailbox."""

    message_id: str
    subject: str
    sender: str
    date: datetime
    text_content: str | None = None
    html_content: str | None = None
    folder: str = "INBOX"
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def body(self) -> str:
        """
        Plain-text body for extraction.

        Prefers the text/plain part; HTML-only alerts are flattened to text.
        """
        if self.text_content:
            return self.text_content
        if self.html_content:
            soup = BeautifulSoup(self.html_content, "lxml")
            return " ".join(soup.get_text(separator=" ").split())
        return ""


class InboxFetcher:
    """
    Fetches unread bank alert emails over IMAP (SSL).

    Connection failures are logged and reported as empty results so a
    polling loop can simply try again on its next tick.
    """

    def __init__(self, config: EmailConfig | None = None):
        """Initialize with email configuration (defaults to application config)."""
        self.config = config if config is not None else get_config().email
        self.connection: imaplib.IMAP4_SSL | None = None

    def connect(self) -> bool:
        """
        Connect to the IMAP server and select the alert folder.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            logger.info(f"Connecting to IMAP server: {self.config.imap_server}:{self.config.imap_port}")

            self.connection = imaplib.IMAP4_SSL(self.config.imap_server, self.config.imap_port)
            self.connection.login(self.config.username or "", self.config.password or "")

            result, _ = self.connection.select(self.config.folder)
            if result != "OK":
                logger.error(f"Cannot open folder '{self.config.folder}'")
                self.disconnect()
                return False

            logger.info("Successfully connected to IMAP server")
            return True

        except (imaplib.IMAP4.error, OSError) as e:
            logger.error(f"Failed to connect to IMAP server: {e}")
            self.connection = None
            return False

    def disconnect(self) -> None:
        """Disconnect from IMAP server."""
        if self.connection:
            try:
                self.connection.close()
                self.connection.logout()
                logger.info("Disconnected from IMAP server")
            except (imaplib.IMAP4.error, OSError) as e:
                logger.warning(f"Error during disconnect: {e}")
            finally:
                self.connection = None

    def poll_bank_alerts(self, since: datetime | None = None, sender: str | None = None) -> list[BankAlertEmail]:
        """
        Fetch unread alert emails received since a point in time.

        Args:
            since: Only emails on or after this date (default: last 15 minutes;
                IMAP SINCE has day granularity)
            sender: Only emails from this sender (default: configured filter)

        Returns:
            List of BankAlertEmail objects, empty on connection failure
        """
        criteria = self._build_search_criteria(since, sender or self.config.sender_filter)
        return self.fetch_emails(criteria)

    def fetch_emails(self, criteria: list[str]) -> list[BankAlertEmail]:
        """
        Fetch emails matching arbitrary IMAP search criteria.

        Args:
            criteria: Search keys, e.g. ["UNSEEN", "FROM", '"alerts@gtbank.com"']

        Returns:
            List of BankAlertEmail objects, empty on connection or search failure
        """
        if not self.connection and not self.connect():
            logger.error("Cannot fetch emails without connection")
            return []

        alerts: list[BankAlertEmail] = []

        if not self.connection:
            logger.warning("Connection lost")
            return []

        try:
            result, message_numbers = self.connection.search(None, *criteria)
            if result != "OK":
                logger.error(f"IMAP search failed: {result}")
                return []

            msg_ids = message_numbers[0].split() if message_numbers and message_numbers[0] else []
            logger.info(f"Found {len(msg_ids)} emails in {self.config.folder} matching {' '.join(criteria)}")

            for msg_num in msg_ids:
                alert_email = self._fetch_and_parse_email(msg_num.decode())
                if alert_email is not None:
                    alerts.append(alert_email)

        except (imaplib.IMAP4.error, OSError) as e:
            logger.error(f"Error during email fetching: {e}")

        return alerts

    def mark_as_read(self, msg_nums: list[str]) -> bool:
        """
        Set the \\Seen flag on messages so later polls skip them.

        Args:
            msg_nums: Message sequence numbers, as in BankAlertEmail.metadata["msg_num"]

        Returns:
            True if the server accepted the flag update
        """
        if not msg_nums:
            return True
        if not self.connection:
            logger.warning("Cannot mark emails as read without connection")
            return False

        try:
            result, _ = self.connection.store(",".join(msg_nums), "+FLAGS", "\\Seen")
        except (imaplib.IMAP4.error, OSError) as e:
            logger.error(f"Error marking emails as read: {e}")
            return False

        if result != "OK":
            logger.error(f"IMAP store failed: {result}")
            return False

        logger.info(f"Marked {len(msg_nums)} emails as read")
        return True

    def _build_search_criteria(self, since: datetime | None, sender: str | None) -> list[str]:
        """Build IMAP search criteria: UNSEEN, SINCE and optional FROM."""
        if since is None:
            since = datetime.now() - DEFAULT_POLL_WINDOW

        criteria = ["UNSEEN", "SINCE", since.strftime("%d-%b-%Y")]
        if sender:
            criteria.extend(["FROM", f'"{sender}"'])
        return criteria

    def _fetch_and_parse_email(self, msg_num: str) -> BankAlertEmail | None:
        """Fetch and parse a single email."""
        if not self.connection:
            logger.warning("Connection lost")
            return None

        try:
            result, msg_data = self.connection.fetch(msg_num, "(RFC822)")
        except (imaplib.IMAP4.error, OSError) as e:
            logger.error(f"Error fetching email {msg_num}: {e}")
            return None

        if result != "OK" or not msg_data or not msg_data[0]:
            return None

        raw_email = msg_data[0][1]
        if not isinstance(raw_email, bytes):
            logger.warning(f"Expected bytes but got {type(raw_email)}")
            return None

        msg = email.message_from_bytes(raw_email)

        date_str = msg.get("Date", "")
        try:
            email_date = email.utils.parsedate_to_datetime(date_str)
        except (TypeError, ValueError):
            email_date = datetime.now()

        text_content, html_content = self._extract_email_content(msg)

        return BankAlertEmail(
            message_id=msg.get("Message-ID", f"{self.config.folder}_{msg_num}"),
            subject=self._decode_header(msg.get("Subject", "")),
            sender=self._decode_header(msg.get("From", "")),
            date=email_date,
            text_content=text_content,
            html_content=html_content,
            folder=self.config.folder,
            metadata={"msg_num": msg_num, "size": len(raw_email)},
        )

    def _extract_email_content(self, msg: email.message.Message) -> tuple[str | None, str | None]:
        """Extract text and HTML content from email message."""
        text_content = None
        html_content = None

        parts = msg.walk() if msg.is_multipart() else [msg]
        for part in parts:
            if "attachment" in str(part.get("Content-Disposition", "")):
                continue

            content_type = part.get_content_type()
            if content_type not in ("text/plain", "text/html"):
                continue

            payload = part.get_payload(decode=True)
            if not payload or not isinstance(payload, bytes):
                continue

            charset = part.get_content_charset() or "utf-8"
            try:
                content = payload.decode(charset, errors="ignore")
            except LookupError:
                content = payload.decode("utf-8", errors="ignore")

            if content_type == "text/plain" and text_content is None:
                text_content = content
            elif content_type == "text/html" and html_content is None:
                html_content = content

        return text_content, html_content

    def _decode_header(self, header: str) -> str:
        """Decode email header with proper encoding handling."""
        if not header:
            return ""

        decoded_parts = []
        for part, encoding in email.header.decode_header(header):
            if isinstance(part, bytes):
                try:
                    decoded_parts.append(part.decode(encoding or "utf-8", errors="ignore"))
                except LookupError:
                    decoded_parts.append(part.decode("utf-8", errors="ignore"))
            else:
                decoded_parts.append(str(part))

        return "".join(decoded_parts)
