"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from bankalerts.core.models import Transaction
from bankalerts.core.money import Money

FIXED_NOW = datetime(2024, 10, 15, 12, 0, 0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def gtbank_email() -> str:
    """GTBank-style credit alert."""
    return "Amount: ₦50,000 from Account: ****1234 on 15/10/2024 14:30:45"


@pytest.fixture
def access_email() -> str:
    """Access Bank-style debit alert."""
    return (
        "Access Bank Alert\n"
        "Txn Type: DEBIT\n"
        "A/C: ****5678\n"
        "Amt: NGN 12,500.50\n"
        "Date: 03-Nov-2024 09:05:10\n"
        "Desc: POS PURCHASE SHOPRITE"
    )


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Candidate transactions around the GTBank alert."""
    return [
        Transaction(
            id="txn-exact",
            amount=Money.from_major(50000),
            account_number="****1234",
            description="Amount: ₦50,000 from Account: ****1234 on 15/10/2024 14:30:45",
            timestamp=datetime(2024, 10, 15, 14, 30, 45),
        ),
        Transaction(
            id="txn-other-account",
            amount=Money.from_major(50000),
            account_number="****9999",
            description="Transfer to savings",
            timestamp=datetime(2024, 10, 15, 14, 35, 0),
        ),
        Transaction(
            id="txn-unrelated",
            amount=Money.from_major(7200),
            account_number="****4321",
            description="Airtime purchase",
            timestamp=datetime(2024, 10, 14, 8, 0, 0),
        ),
    ]


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("BANKALERTS_ENV", "test")
    monkeypatch.setenv("BANKALERTS_DATA_DIR", str(Path(tempfile.gettempdir()) / "test_bankalerts_data"))
    monkeypatch.setenv("EMAIL_PASSWORD", "test-password")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("EMAIL_USERNAME", raising=False)

    # Each test reads configuration from its own environment
    monkeypatch.setattr("bankalerts.core.config._config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for amount handling and precision")
    config.addinivalue_line("markers", "alerts: Tests for alert extraction")
    config.addinivalue_line("markers", "matching: Tests for scoring and reconciliation")
