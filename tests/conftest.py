"""
Pytest fixtures for the money kernel test suite.

Provides:
- Structured logging setup and a captured_logs fixture
- A private CurrencyCatalog per test, pre-registered with a small set of
  real currencies (2, 0 and 3 decimal places, plus a pseudo-currency)
- Currency fixtures resolved from that catalog
"""

import json
import logging
from io import StringIO

import pytest

from money_kernel.domain.catalog import CurrencyCatalog
from money_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# code, numeric code, decimal places, countries
TEST_CURRENCIES = [
    ("USD", 840, 2, ("US", "EC", "SV")),
    ("EUR", 978, 2, ("DE", "FR", "IT", "ES")),
    ("PLN", 985, 2, ("PL",)),
    ("GBP", 826, 2, ("GB",)),
    ("CHF", 756, 2, ("CH", "LI")),
    ("JPY", 392, 0, ("JP",)),
    ("BHD", 48, 3, ("BH",)),
    ("XAU", 959, -1, ()),
]


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture money_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, catalog):
            catalog.register("ABC", 1, 2)
            logs = captured_logs()
            assert any(r["message"] == "currency_registered" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("money_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow_locks: mark test as exercising lock contention with many threads"
    )


# =============================================================================
# Catalog fixtures
# =============================================================================


@pytest.fixture
def catalog() -> CurrencyCatalog:
    """A private catalog holding TEST_CURRENCIES."""
    catalog = CurrencyCatalog("test")
    catalog.register_many(TEST_CURRENCIES)
    return catalog


@pytest.fixture
def usd(catalog):
    return catalog.resolve("USD")


@pytest.fixture
def eur(catalog):
    return catalog.resolve("EUR")


@pytest.fixture
def pln(catalog):
    return catalog.resolve("PLN")


@pytest.fixture
def gbp(catalog):
    return catalog.resolve("GBP")


@pytest.fixture
def chf(catalog):
    return catalog.resolve("CHF")


@pytest.fixture
def jpy(catalog):
    return catalog.resolve("JPY")


@pytest.fixture
def bhd(catalog):
    return catalog.resolve("BHD")


@pytest.fixture
def xau(catalog):
    return catalog.resolve("XAU")
