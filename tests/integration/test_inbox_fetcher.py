#!/usr/bin/env python3
"""
Integration tests for the IMAP inbox fetcher.

The IMAP connection is replaced with a MagicMock; message parsing runs on
real RFC 822 bytes.
"""

import imaplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from unittest.mock import MagicMock, patch

import pytest

from bankalerts.alerts.fetcher import BankAlertEmail, InboxFetcher
from bankalerts.core.config import EmailConfig


@pytest.fixture
def email_config():
    """Create a test email configuration."""
    return EmailConfig(
        imap_server="test.imap.example.com",
        imap_port=993,
        username="test@example.com",
        password="test_password",  # noqa: S106
        sender_filter="alerts@gtbank.com",
    )


def _raw_alert(text: str | None = None, html: str | None = None) -> bytes:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = "GTBank Credit Alert"
    msg["From"] = "GTBank <alerts@gtbank.com>"
    msg["Date"] = "Tue, 15 Oct 2024 14:31:00 +0100"
    msg["Message-ID"] = "<alert-1@gtbank.com>"
    if text is not None:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    if html is not None:
        msg.attach(MIMEText(html, "html", "utf-8"))
    return msg.as_bytes()


@pytest.fixture
def connected_fetcher(email_config):
    fetcher = InboxFetcher(email_config)
    fetcher.connection = MagicMock()
    return fetcher


@pytest.mark.integration
class TestPollBankAlerts:
    def test_search_criteria(self, connected_fetcher):
        criteria = connected_fetcher._build_search_criteria(datetime(2024, 10, 15, 14, 0), "alerts@gtbank.com")
        assert criteria == ["UNSEEN", "SINCE", "15-Oct-2024", "FROM", '"alerts@gtbank.com"']

    def test_search_criteria_without_sender(self, connected_fetcher):
        criteria = connected_fetcher._build_search_criteria(datetime(2024, 10, 15, 14, 0), None)
        assert criteria == ["UNSEEN", "SINCE", "15-Oct-2024"]

    def test_fetches_and_parses_messages(self, connected_fetcher, gtbank_email):
        connection = connected_fetcher.connection
        connection.search.return_value = ("OK", [b"1"])
        connection.fetch.return_value = ("OK", [(b"1 (RFC822 {100}", _raw_alert(text=gtbank_email))])

        emails = connected_fetcher.poll_bank_alerts(since=datetime(2024, 10, 15))

        assert len(emails) == 1
        alert_email = emails[0]
        assert alert_email.subject == "GTBank Credit Alert"
        assert alert_email.message_id == "<alert-1@gtbank.com>"
        assert alert_email.body.strip() == gtbank_email
        assert alert_email.date.year == 2024

        search_args = connection.search.call_args.args
        assert "FROM" in search_args
        assert '"alerts@gtbank.com"' in search_args

    def test_html_only_alert_is_flattened(self, connected_fetcher):
        html = "<html><body><p>Amount: ₦1,000</p><p>Account: ****1234</p></body></html>"
        connection = connected_fetcher.connection
        connection.search.return_value = ("OK", [b"7"])
        connection.fetch.return_value = ("OK", [(b"7 (RFC822 {100}", _raw_alert(html=html))])

        emails = connected_fetcher.poll_bank_alerts()

        assert emails[0].text_content is None
        assert emails[0].body == "Amount: ₦1,000 Account: ****1234"

    def test_failed_search_returns_empty(self, connected_fetcher):
        connected_fetcher.connection.search.return_value = ("NO", [b""])
        assert connected_fetcher.poll_bank_alerts() == []

    def test_imap_error_during_search_returns_empty(self, connected_fetcher):
        connected_fetcher.connection.search.side_effect = imaplib.IMAP4.error("boom")
        assert connected_fetcher.poll_bank_alerts() == []

    def test_connection_failure_returns_empty(self, email_config):
        fetcher = InboxFetcher(email_config)

        with patch("bankalerts.alerts.fetcher.imaplib.IMAP4_SSL", side_effect=OSError("unreachable")):
            assert fetcher.poll_bank_alerts() == []

        assert fetcher.connection is None


@pytest.mark.integration
class TestCustomSearchAndFlags:
    def test_fetch_emails_passes_criteria_through(self, connected_fetcher, gtbank_email):
        connection = connected_fetcher.connection
        connection.search.return_value = ("OK", [b"3 4"])
        connection.fetch.return_value = ("OK", [(b"3 (RFC822 {100}", _raw_alert(text=gtbank_email))])

        emails = connected_fetcher.fetch_emails(["SUBJECT", '"Credit Alert"', "SEEN"])

        connection.search.assert_called_once_with(None, "SUBJECT", '"Credit Alert"', "SEEN")
        assert len(emails) == 2
        assert [e.metadata["msg_num"] for e in emails] == ["3", "4"]

    def test_fetch_emails_without_connection_returns_empty(self, email_config):
        fetcher = InboxFetcher(email_config)

        with patch("bankalerts.alerts.fetcher.imaplib.IMAP4_SSL", side_effect=OSError("unreachable")):
            assert fetcher.fetch_emails(["ALL"]) == []

    def test_mark_as_read_sets_seen_flag(self, connected_fetcher):
        connected_fetcher.connection.store.return_value = ("OK", [b"3 (FLAGS (\\Seen))"])

        assert connected_fetcher.mark_as_read(["3", "4"]) is True

        connected_fetcher.connection.store.assert_called_once_with("3,4", "+FLAGS", "\\Seen")

    def test_mark_as_read_with_nothing_to_mark(self, connected_fetcher):
        assert connected_fetcher.mark_as_read([]) is True
        connected_fetcher.connection.store.assert_not_called()

    def test_mark_as_read_reports_server_rejection(self, connected_fetcher):
        connected_fetcher.connection.store.return_value = ("NO", [b"read-only folder"])
        assert connected_fetcher.mark_as_read(["3"]) is False

    def test_mark_as_read_reports_imap_error(self, connected_fetcher):
        connected_fetcher.connection.store.side_effect = imaplib.IMAP4.error("boom")
        assert connected_fetcher.mark_as_read(["3"]) is False

    def test_mark_as_read_without_connection(self, email_config):
        assert InboxFetcher(email_config).mark_as_read(["3"]) is False


@pytest.mark.integration
class TestConnection:
    def test_connect_logs_in_and_selects_folder(self, email_config):
        mock_imap = MagicMock()
        mock_imap.select.return_value = ("OK", [b"3"])

        with patch("bankalerts.alerts.fetcher.imaplib.IMAP4_SSL", return_value=mock_imap) as imap_cls:
            fetcher = InboxFetcher(email_config)
            assert fetcher.connect() is True

        imap_cls.assert_called_once_with("test.imap.example.com", 993)
        mock_imap.login.assert_called_once_with("test@example.com", "test_password")
        mock_imap.select.assert_called_once_with("INBOX")

    def test_missing_folder_fails(self, email_config):
        mock_imap = MagicMock()
        mock_imap.select.return_value = ("NO", [b"no such folder"])

        with patch("bankalerts.alerts.fetcher.imaplib.IMAP4_SSL", return_value=mock_imap):
            fetcher = InboxFetcher(email_config)
            assert fetcher.connect() is False

        assert fetcher.connection is None

    def test_disconnect_closes_and_logs_out(self, connected_fetcher):
        connection = connected_fetcher.connection
        connected_fetcher.disconnect()

        connection.close.assert_called_once()
        connection.logout.assert_called_once()
        assert connected_fetcher.connection is None


@pytest.mark.integration
def test_body_prefers_text_content():
    alert_email = BankAlertEmail(
        message_id="m1",
        subject="Alert",
        sender="bank",
        date=datetime(2024, 10, 15),
        text_content="plain body",
        html_content="<p>html body</p>",
    )
    assert alert_email.body == "plain body"


@pytest.mark.integration
def test_empty_email_body():
    alert_email = BankAlertEmail(message_id="m2", subject="", sender="", date=datetime(2024, 10, 15))
    assert alert_email.body == ""
