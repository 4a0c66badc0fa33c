"""
Pure domain layer.

This module contains the monetary value types and the currency catalog
with NO dependencies on:
- Database
- Time/clock
- I/O

All value objects are immutable and deterministic. The CurrencyCatalog is
the only mutable object and guards its own state.
"""

from money_kernel.domain.catalog import CatalogEntry, CurrencyCatalog
from money_kernel.domain.codec import MoneyCodec
from money_kernel.domain.currency import Currency
from money_kernel.domain.exchange import ExchangeRate, ExchangeResult, RateOperations
from money_kernel.domain.values import BigMoney, MonetaryValue, Money

__all__ = [
    # Registry
    "Currency",
    "CurrencyCatalog",
    "CatalogEntry",
    # Value Objects
    "MonetaryValue",
    "BigMoney",
    "Money",
    # Exchange
    "ExchangeRate",
    "ExchangeResult",
    "RateOperations",
    # Serialization
    "MoneyCodec",
]
