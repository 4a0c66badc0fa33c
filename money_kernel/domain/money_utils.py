"""Null-tolerant helpers for monetary values.

Each helper treats None as "no amount" so callers can fold optional values
without branching. Non-None arguments must share a currency.
"""

from __future__ import annotations

from typing import TypeVar

from money_kernel.domain.currency import Currency
from money_kernel.domain.values import MonetaryValue, Money

M = TypeVar("M", bound=MonetaryValue)


def is_zero(money: MonetaryValue | None) -> bool:
    """True for None or a zero amount."""
    return money is None or money.is_zero


def default_to_zero(money: M | None, currency: Currency) -> M | Money:
    """Return money, or Money.zero(currency) when money is None."""
    return money if money is not None else Money.zero(currency)


def maximum(first: M | None, second: M | None) -> M | None:
    """The larger amount; None is absent, so the other value wins."""
    if first is None:
        return second
    if second is None:
        return first
    return first if first.compare_to(second) >= 0 else second


def minimum(first: M | None, second: M | None) -> M | None:
    """The smaller amount; None is absent, so the other value wins."""
    if first is None:
        return second
    if second is None:
        return first
    return first if first.compare_to(second) <= 0 else second


def add(first: M | None, second: M | None) -> M | None:
    """Sum, treating None as zero. Both None returns None."""
    if first is None:
        return second
    if second is None:
        return first
    return first.plus(second)


def subtract(first: M | None, second: M | None) -> M | None:
    """Difference, treating None as zero. Both None returns None."""
    if second is None:
        return first
    if first is None:
        return second.negated()
    return first.minus(second)
