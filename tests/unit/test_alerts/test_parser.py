#!/usr/bin/env python3
"""
Unit tests for bank alert extraction.

Covers the built-in bank layouts, documented fallbacks for every field,
and runtime registration of custom formats.
"""

import logging
from datetime import datetime

import pytest

from bankalerts.alerts.parser import AlertExtractor
from bankalerts.alerts.profiles import FormatProfile
from bankalerts.core.config import ParserConfig
from bankalerts.core.models import Direction

FIXED_NOW = datetime(2024, 10, 15, 12, 0, 0)


@pytest.fixture
def extractor():
    return AlertExtractor(clock=lambda: FIXED_NOW)


class TestBuiltinFormats:
    """Test extraction with the shipped bank layouts."""

    @pytest.mark.alerts
    def test_gtbank_alert(self, extractor, gtbank_email):
        alert = extractor.extract(gtbank_email, "gtbank")

        assert alert.amount.to_minor_units() == 5000000
        assert alert.account_number == "****1234"
        assert alert.direction == Direction.CREDIT
        assert alert.timestamp == datetime(2024, 10, 15, 14, 30, 45)
        assert alert.currency == "NGN"
        assert alert.format_name == "gtbank"
        assert alert.raw_text == gtbank_email
        assert alert.description == gtbank_email

    @pytest.mark.alerts
    def test_access_debit_alert(self, extractor, access_email):
        alert = extractor.extract(access_email, "access")

        assert alert.amount.to_minor_units() == 1250050
        assert alert.account_number == "****5678"
        assert alert.direction == Direction.DEBIT
        assert alert.timestamp == datetime(2024, 11, 3, 9, 5, 10)

    @pytest.mark.alerts
    def test_firstbank_alert(self, extractor):
        text = "Debit Alert\nAccount = ****4455\nAmount = ₦2,000.00\nDate: 01/12/2024 18:45"
        alert = extractor.extract(text, "firstbank")

        assert alert.amount.to_minor_units() == 200000
        assert alert.account_number == "****4455"
        assert alert.direction == Direction.DEBIT
        assert alert.timestamp == datetime(2024, 12, 1, 18, 45)

    @pytest.mark.alerts
    def test_withdrawal_keyword_is_debit(self, extractor):
        alert = extractor.extract("ATM Withdrawal Amount: ₦5,000 Account: ****1234", "gtbank")
        assert alert.direction == Direction.DEBIT

    @pytest.mark.alerts
    def test_transfer_keyword_is_credit(self, extractor):
        alert = extractor.extract("Transfer received Amount: ₦5,000", "gtbank")
        assert alert.direction == Direction.CREDIT

    @pytest.mark.alerts
    def test_unknown_format_uses_default(self, extractor, gtbank_email):
        alert = extractor.extract(gtbank_email, "no-such-bank")

        assert alert.format_name == "gtbank"
        assert alert.amount.to_minor_units() == 5000000

    @pytest.mark.alerts
    def test_format_lookup_is_case_sensitive(self, extractor, access_email):
        alert = extractor.extract(access_email, "ACCESS")

        assert alert.format_name == "gtbank"
        assert alert.account_number == ""


class TestFallbacks:
    """Test documented defaults when fields cannot be extracted."""

    @pytest.mark.alerts
    def test_empty_text(self, extractor):
        alert = extractor.extract("")

        assert alert.amount.is_zero()
        assert alert.direction == Direction.CREDIT
        assert alert.timestamp == FIXED_NOW
        assert alert.account_number == ""
        assert alert.description == ""
        assert alert.id.startswith("alert-")

    @pytest.mark.alerts
    def test_every_fallback_is_logged(self, extractor, caplog):
        with caplog.at_level(logging.DEBUG, logger="bankalerts.alerts.parser"):
            extractor.extract("", alert_id="alert-empty")

        messages = [record.getMessage() for record in caplog.records]
        assert "alert-empty: no amount found, using 0" in messages
        assert "alert-empty: no direction keyword, using credit" in messages
        assert "alert-empty: no timestamp found, using extraction time" in messages
        assert "alert-empty: no account found" in messages

    @pytest.mark.alerts
    def test_matched_direction_keyword_is_not_reported_as_fallback(self, extractor, caplog):
        with caplog.at_level(logging.DEBUG, logger="bankalerts.alerts.parser"):
            extractor.extract("Debit Amount: ₦10", "gtbank", alert_id="alert-debit")

        assert not any("no direction keyword" in record.getMessage() for record in caplog.records)

    @pytest.mark.alerts
    def test_invalid_timestamp_uses_clock(self, extractor):
        alert = extractor.extract("Amount: ₦100 on 45/13/2024 25:61:00", "gtbank")

        assert alert.timestamp == FIXED_NOW
        assert alert.amount.to_minor_units() == 10000

    @pytest.mark.alerts
    def test_unparseable_amount_token_is_zero(self, extractor):
        alert = extractor.extract("Amount: ,,, Account: ****1234", "gtbank")

        assert alert.amount.is_zero()
        assert alert.account_number == "****1234"

    @pytest.mark.alerts
    def test_description_is_truncated(self, extractor):
        text = "Amount: ₦1,000 " + "x" * 500
        alert = extractor.extract(text)

        assert len(alert.description) == 200
        assert alert.description == text[:200]
        assert alert.raw_text == text

    @pytest.mark.alerts
    def test_configured_description_length(self):
        extractor = AlertExtractor(config=ParserConfig(description_length=10), clock=lambda: FIXED_NOW)
        assert extractor.extract("0123456789abcdef").description == "0123456789"

    @pytest.mark.alerts
    def test_invalid_pattern_is_treated_as_no_match(self, extractor):
        extractor.register_format(
            "broken",
            FormatProfile(
                amount_pattern=r"Amount: ([\d",
                direction_pattern=r"(debit|credit",
                timestamp_pattern=r"(",
                account_pattern=r"[",
            ),
        )

        alert = extractor.extract("Amount: 500 debit Account: ****1234", "broken")

        assert alert.format_name == "broken"
        assert alert.amount.is_zero()
        assert alert.direction == Direction.CREDIT
        assert alert.timestamp == FIXED_NOW
        assert alert.account_number == ""


class TestRegistration:
    """Test runtime format registration."""

    @pytest.mark.alerts
    def test_register_new_format(self, extractor):
        extractor.register_format(
            "zenith",
            FormatProfile(
                amount_pattern=r"Amt:\s*([\d,.]+)",
                direction_pattern=r"(DR|CR)",
                timestamp_pattern=r"(\d{4}-\d{2}-\d{2} \d{2}:\d{2})",
                account_pattern=r"Acct:\s*(\S+)",
                timestamp_formats=("%Y-%m-%d %H:%M",),
                debit_keywords=("dr",),
                currency="USD",
            ),
        )

        alert = extractor.extract("DR Amt: 75.25 Acct: ****0001 2024-10-15 09:30", "zenith")

        assert "zenith" in extractor.formats()
        assert alert.amount.to_minor_units() == 7525
        assert alert.direction == Direction.DEBIT
        assert alert.account_number == "****0001"
        assert alert.timestamp == datetime(2024, 10, 15, 9, 30)
        assert alert.currency == "USD"

    @pytest.mark.alerts
    def test_reregistering_replaces_profile(self, extractor, gtbank_email):
        extractor.register_format(
            "gtbank",
            FormatProfile(
                amount_pattern=r"Total:\s*([\d,]+)",
                direction_pattern=r"(debit|credit)",
                timestamp_pattern=r"(\d{1,2}/\d{1,2}/\d{4}\s+\d{1,2}:\d{2}:\d{2})",
                account_pattern=r"Account:\s*(\*{2,4}\d{4,10})",
            ),
        )

        assert extractor.extract(gtbank_email, "gtbank").amount.is_zero()
        assert extractor.extract("Total: 1,000", "gtbank").amount.to_minor_units() == 100000


class TestBatchExtraction:
    """Test extract_many."""

    @pytest.mark.alerts
    def test_preserves_order_and_numbers_ids(self, extractor, gtbank_email):
        texts = [gtbank_email, "", "Amount: ₦10"]
        alerts = extractor.extract_many(texts, "gtbank")

        stamp = int(FIXED_NOW.timestamp() * 1000)
        assert [a.id for a in alerts] == [f"alert-{stamp}-{i}" for i in range(3)]
        assert [a.raw_text for a in alerts] == texts
        assert alerts[2].amount.to_minor_units() == 1000

    @pytest.mark.alerts
    def test_empty_batch(self, extractor):
        assert extractor.extract_many([]) == []
