"""
Exchange -- exchange rates and the operations that derive new ones.

Responsibility:
    ExchangeRate is the immutable statement "1 base = rate counter".
    RateOperations holds one current rate and replaces it as rates are
    inverted or combined, and converts amounts with it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends on money_kernel.domain.values for the amounts it converts.

Invariants enforced:
    - rate > 0; a rate between a currency and itself is exactly 1.
    - An ExchangeRate is never mutated; RateOperations swaps its held rate
      for a newly constructed one.
    - Division happens at the RateOperations scale and rounding mode, fixed
      when the instance is created.

Failure modes:
    - InvalidExchangeRateError on construction with a bad rate.
    - NotExchangeableError when an amount matches neither side of the rate.
    - NoCommonCurrencyError when combining rates over four currencies.
    - ExchangeRateParseError when text is not "<BASE>/<COUNTER> <rate>".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import TYPE_CHECKING

from money_kernel.domain.currency import Currency
from money_kernel.domain.values import BigMoney, MonetaryValue, Money
from money_kernel.exceptions import (
    ExchangeRateParseError,
    InvalidExchangeRateError,
    MissingArgumentError,
    MoneyKernelError,
    NoCommonCurrencyError,
    NotExchangeableError,
)
from money_kernel.logging_config import get_logger
from money_kernel.utils.decimals import (
    divide,
    multiply,
    strip_trailing_zeros,
    to_decimal,
    to_plain_string,
    validate_rounding,
    validate_scale,
)

if TYPE_CHECKING:
    from money_kernel.domain.catalog import CurrencyCatalog

logger = get_logger("domain.exchange")

DEFAULT_SCALE = 16
DEFAULT_ROUNDING = ROUND_HALF_EVEN

_RATE_TEXT = re.compile(r"([A-Z]{3})/([A-Z]{3})\s+([0-9]+(?:\.[0-9]+)?)")

_ONE = Decimal(1)


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Exchange rate between two currencies.

    Contract:
        Represents: 1 unit of base = rate units of counter.
        Validated on construction: rate must be positive, and exactly 1 when
        base and counter are the same currency.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - rate is always a positive Decimal (never float)
        - Equality is numeric on the rate: USD/PLN 3.5 == USD/PLN 3.50

    Non-goals:
        - Does NOT store effective dates or sources
        - Does NOT perform conversion itself (see RateOperations.exchange)
    """

    base: Currency
    counter: Currency
    rate: Decimal

    def __post_init__(self) -> None:
        if self.base is None:
            raise MissingArgumentError("base")
        if self.counter is None:
            raise MissingArgumentError("counter")
        if not isinstance(self.base, Currency) or not isinstance(self.counter, Currency):
            raise TypeError("base and counter must be Currency")

        rate = to_decimal(self.rate, "rate")
        if rate <= 0:
            raise InvalidExchangeRateError(to_plain_string(rate), "rate must be positive")
        if self.base == self.counter and rate != _ONE:
            raise InvalidExchangeRateError(
                to_plain_string(rate),
                f"rate must be 1 when base and counter are both {self.base}",
            )
        object.__setattr__(self, "rate", rate)

    @classmethod
    def of(cls, base: Currency, counter: Currency, rate: Decimal | int | str) -> ExchangeRate:
        """Factory method for creating ExchangeRate."""
        return cls(base, counter, rate)

    @classmethod
    def identity(cls, currency: Currency) -> ExchangeRate:
        """The rate 1 between currency and itself."""
        return cls(currency, currency, _ONE)

    @classmethod
    def parse(cls, text: str, catalog: CurrencyCatalog) -> ExchangeRate:
        """
        Parse the textual form "USD/PLN 3.50".

        Codes are case-sensitive and resolved through catalog. Surrounding
        whitespace is ignored.

        Raises:
            ExchangeRateParseError: malformed text, unknown currency code or
                a rate the pair does not accept.
        """
        if text is None:
            raise MissingArgumentError("text")
        match = _RATE_TEXT.fullmatch(text.strip())
        if match is None:
            raise ExchangeRateParseError(text)
        base_code, counter_code, rate = match.groups()
        try:
            return cls(catalog.resolve(base_code), catalog.resolve(counter_code), rate)
        except MoneyKernelError as exc:
            raise ExchangeRateParseError(text) from exc

    def with_rate(self, rate: Decimal | int | str) -> ExchangeRate:
        """Same currency pair, different rate."""
        return ExchangeRate(self.base, self.counter, rate)

    def involves(self, currency: Currency) -> bool:
        return currency == self.base or currency == self.counter

    @property
    def pair(self) -> tuple[str, str]:
        """Get the currency pair as a tuple."""
        return (self.base.code, self.counter.code)

    def operations(
        self, scale: int = DEFAULT_SCALE, rounding: str = DEFAULT_ROUNDING
    ) -> RateOperations:
        """Start a RateOperations chain from this rate."""
        return RateOperations(self, scale, rounding)

    def __str__(self) -> str:
        return f"{self.base}/{self.counter} {to_plain_string(self.rate)}"

    def __repr__(self) -> str:
        return f"ExchangeRate({self.base!r}, {self.counter!r}, {self.rate!r})"


@dataclass(frozen=True, slots=True)
class ExchangeResult:
    """A converted amount and the rate that produced it."""

    exchange_rate: ExchangeRate
    amount: MonetaryValue


class RateOperations:
    """
    Stateful adapter over one exchange rate.

    Contract:
        invert() and combine() replace the held rate and return self, so
        calls chain: rate.operations(4).invert().combine(other).exchange_rate.
        exchange() converts an amount without changing the held rate.

    Guarantees:
        - scale and rounding are fixed for the life of the instance
        - The held rate is always a valid ExchangeRate

    Non-goals:
        - Not thread-safe; share ExchangeRate values, not RateOperations
    """

    def __init__(
        self,
        exchange_rate: ExchangeRate,
        scale: int = DEFAULT_SCALE,
        rounding: str = DEFAULT_ROUNDING,
    ):
        if exchange_rate is None:
            raise MissingArgumentError("exchange_rate")
        self._exchange_rate = exchange_rate
        self.scale = validate_scale(scale)
        self.rounding = validate_rounding(rounding)

    @property
    def exchange_rate(self) -> ExchangeRate:
        """The currently held rate."""
        return self._exchange_rate

    def _inverted(self, rate: ExchangeRate) -> ExchangeRate:
        return ExchangeRate(
            rate.counter,
            rate.base,
            divide(_ONE, rate.rate, self.scale, self.rounding),
        )

    def invert(self) -> RateOperations:
        """
        Replace the held rate with (counter, base, 1/rate).

        The reciprocal is computed at the instance scale and rounding mode.
        """
        previous = self._exchange_rate
        self._exchange_rate = self._inverted(previous)
        logger.debug(
            "exchange_rate_inverted",
            extra={
                "previous_rate": str(previous),
                "exchange_rate": str(self._exchange_rate),
                "scale": self.scale,
                "rounding": self.rounding,
            },
        )
        return self

    def exchange(self, money: MonetaryValue) -> ExchangeResult:
        """
        Convert money across the held rate.

        A base-currency amount is multiplied by the rate. A counter-currency
        amount is multiplied by the inverted rate; the inversion applies to
        this call only and the held rate is unchanged.

        A Money input gives a Money rounded to the target currency scale with
        the instance rounding mode. A BigMoney input gives an exact BigMoney.

        Raises:
            NotExchangeableError: money is in neither currency of the rate.
        """
        if money is None:
            raise MissingArgumentError("money")
        held = self._exchange_rate
        if money.currency == held.base:
            applied = held
        elif money.currency == held.counter:
            applied = self._inverted(held)
        else:
            raise NotExchangeableError(money, held)

        product = multiply(money.amount, applied.rate)
        if isinstance(money, Money):
            converted: MonetaryValue = Money.of(applied.counter, product, self.rounding)
        else:
            converted = BigMoney(applied.counter, product)
        return ExchangeResult(exchange_rate=applied, amount=converted)

    def combine(self, other: ExchangeRate) -> RateOperations:
        """
        Replace the held rate with the cross rate through a shared currency.

        With held "USD/PLN 3.50" and other "EUR/PLN 4.00" the result is
        "USD/EUR 0.875". Rates over the same pair give the identity rate of
        the held base currency.

        Raises:
            NoCommonCurrencyError: the rates share no currency.
        """
        if other is None:
            raise MissingArgumentError("other")
        held = self._exchange_rate
        shared = {held.base, held.counter} & {other.base, other.counter}
        if not shared:
            raise NoCommonCurrencyError(held, other)

        if len(shared) == 2:
            combined = ExchangeRate.identity(held.base)
        else:
            common = shared.pop()
            this_norm = held if held.counter == common else self._inverted(held)
            other_norm = other if other.counter == common else self._inverted(other)
            if this_norm.base == other_norm.base:
                rate = _ONE
            else:
                rate = strip_trailing_zeros(
                    divide(this_norm.rate, other_norm.rate, self.scale, self.rounding)
                )
            combined = ExchangeRate(this_norm.base, other_norm.base, rate)

        self._exchange_rate = combined
        logger.debug(
            "exchange_rate_combined",
            extra={
                "previous_rate": str(held),
                "other_rate": str(other),
                "exchange_rate": str(combined),
                "scale": self.scale,
                "rounding": self.rounding,
            },
        )
        return self

    def __repr__(self) -> str:
        return (
            f"RateOperations({self._exchange_rate}, scale={self.scale}, "
            f"rounding={self.rounding})"
        )
