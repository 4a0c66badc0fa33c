"""
Values -- Immutable monetary value objects.

Responsibility:
    Provides BigMoney (an amount in a currency at any scale) and Money (an
    amount at exactly the currency's decimal places), with currency-checked
    exact arithmetic, explicit rounding, comparison and sign queries.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Depends on money_kernel.domain.currency and money_kernel.utils.decimals.
    parse() takes the CurrencyCatalog to resolve codes against.

Invariants enforced:
    - Amounts are Decimal, never float; scale is never negative.
    - Binary operations require identical currencies (CurrencyMismatchError).
    - Money.amount is always at the currency's decimal places.
    - Every operation returns a new object.
    - Rounding happens only where a rounding mode is passed; the default
      ROUND_UNNECESSARY raises MoneyArithmeticError instead of rounding.

Failure modes:
    - InvalidAmountError for float, bool, NaN or unparseable amounts.
    - CurrencyMismatchError when arithmetic or comparison mixes currencies.
    - MoneyArithmeticError on division by zero or forbidden rounding.
    - MissingArgumentError when a required rounding mode is omitted.
    - MoneyParseError when text is not "<CODE> <amount>".

Equality:
    == compares type, currency, numeric value and scale, so
    BigMoney USD 1.0 != BigMoney USD 1.00. is_equal() and compare_to()
    compare the numeric value only.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import TYPE_CHECKING, Any

from money_kernel.domain.currency import Currency
from money_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidExchangeRateError,
    MissingArgumentError,
    MoneyParseError,
)
from money_kernel.utils.decimals import (
    ROUND_UNNECESSARY,
    add,
    divide,
    from_unscaled,
    multiply,
    scale_of,
    set_scale,
    subtract,
    to_decimal,
    to_plain_string,
    unscaled_value,
    validate_scale,
)

if TYPE_CHECKING:
    from money_kernel.domain.catalog import CurrencyCatalog

_MONEY_TEXT = re.compile(r"([A-Z]{3})\s*([+-]?[0-9]+(?:\.[0-9]+)?)")


def _require_currency(currency: Any) -> Currency:
    if currency is None:
        raise MissingArgumentError("currency")
    if not isinstance(currency, Currency):
        raise TypeError(f"currency must be Currency, got {type(currency).__name__}")
    return currency


def _require_int(value: Any, argument: str) -> int:
    if value is None:
        raise MissingArgumentError(argument)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(value, f"{argument} must be an int")
    return value


def _parse(text: str, catalog: CurrencyCatalog) -> tuple[Currency, Decimal]:
    if text is None:
        raise MissingArgumentError("text")
    match = _MONEY_TEXT.fullmatch(text.strip())
    if match is None:
        raise MoneyParseError(text, "expected '<CODE> <amount>'")
    return catalog.resolve(match.group(1)), to_decimal(match.group(2))


class MonetaryValue:
    """
    Read-only queries shared by BigMoney and Money.

    Subclasses provide `currency` and `amount` fields.
    """

    __slots__ = ()

    currency: Currency
    amount: Decimal

    # -- structure ------------------------------------------------------------

    @property
    def scale(self) -> int:
        """Digits after the decimal point."""
        return scale_of(self.amount)

    @property
    def unscaled_value(self) -> int:
        return unscaled_value(self.amount)

    @property
    def is_currency_scale(self) -> bool:
        return self.scale == self.currency.decimal_places

    @property
    def amount_major(self) -> Decimal:
        """Whole major units, truncated toward zero: USD 25.95 -> 25."""
        return set_scale(self.amount, 0, ROUND_DOWN)

    @property
    def amount_major_int(self) -> int:
        return int(self.amount_major)

    @property
    def amount_minor(self) -> Decimal:
        """Amount in minor units, truncated toward zero: USD 25.956 -> 2595."""
        dp = self.currency.decimal_places
        return Decimal(unscaled_value(set_scale(self.amount, dp, ROUND_DOWN)))

    @property
    def amount_minor_int(self) -> int:
        return int(self.amount_minor)

    @property
    def minor_part(self) -> int:
        """Minor units beyond the whole major units: USD -25.95 -> -95."""
        minor = self.amount_minor_int
        part = abs(minor) % (10 ** self.currency.decimal_places)
        return -part if minor < 0 else part

    # -- sign -----------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.amount.is_zero()

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_positive_or_zero(self) -> bool:
        return self.amount >= 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def is_negative_or_zero(self) -> bool:
        return self.amount <= 0

    # -- comparison -----------------------------------------------------------

    def check_currency_equal(self, other: MonetaryValue) -> None:
        """Raise CurrencyMismatchError unless other has the same currency."""
        if other is None:
            raise MissingArgumentError("other")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def is_same_currency(self, other: MonetaryValue) -> bool:
        return self.currency == other.currency

    def compare_to(self, other: MonetaryValue) -> int:
        """-1, 0 or 1 comparing amounts numerically, ignoring scale."""
        self.check_currency_equal(other)
        if self.amount < other.amount:
            return -1
        if self.amount > other.amount:
            return 1
        return 0

    def is_equal(self, other: MonetaryValue) -> bool:
        """Numeric equality: USD 1.0 is equal to USD 1.00."""
        return self.compare_to(other) == 0

    def is_greater_than(self, other: MonetaryValue) -> bool:
        return self.compare_to(other) > 0

    def is_less_than(self, other: MonetaryValue) -> bool:
        return self.compare_to(other) < 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self.currency == other.currency
            and self.amount == other.amount
            and self.scale == other.scale
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.currency, self.amount, self.scale))

    # -- conversion -----------------------------------------------------------

    def to_big_money(self) -> BigMoney:
        return BigMoney(self.currency, self.amount)

    def _amount_of(self, other: Any) -> Decimal:
        """Amount of a same-currency money, or other itself as a Decimal."""
        if isinstance(other, MonetaryValue):
            self.check_currency_equal(other)
            return other.amount
        return to_decimal(other)

    def __str__(self) -> str:
        return f"{self.currency.code} {to_plain_string(self.amount)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class BigMoney(MonetaryValue):
    """
    An amount of money in a currency, at any non-negative scale.

    Contract:
        Arithmetic is exact: plus/minus keep the wider scale and
        multiplied_by keeps every digit. Only divided_by, with_scale,
        with_currency_scale and rounded round, and each takes the rounding
        mode explicitly.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is a canonical Decimal (no float, no negative scale)
        - No silent currency mixing

    Non-goals:
        - Does NOT stay at the currency scale (use Money for that)
    """

    currency: Currency
    amount: Decimal

    def __post_init__(self) -> None:
        _require_currency(self.currency)
        object.__setattr__(self, "amount", to_decimal(self.amount))

    # -- factories ------------------------------------------------------------

    @classmethod
    def of(cls, currency: Currency, amount: Decimal | int | str) -> BigMoney:
        """
        Create a BigMoney with the amount's own scale.

        Raises:
            InvalidAmountError: amount is a float, bool, NaN or malformed text.
        """
        return cls(currency, amount)

    @classmethod
    def of_scale(cls, currency: Currency, unscaled: int, scale: int) -> BigMoney:
        """Create unscaled * 10**-scale: of_scale(USD, 2595, 2) is USD 25.95."""
        _require_int(unscaled, "unscaled")
        validate_scale(scale)
        return cls(currency, from_unscaled(unscaled, scale))

    @classmethod
    def of_currency_scale(
        cls,
        currency: Currency,
        amount: Decimal | int | str,
        rounding: str = ROUND_UNNECESSARY,
    ) -> BigMoney:
        """Create a BigMoney at the currency's decimal places."""
        _require_currency(currency)
        return cls(currency, set_scale(to_decimal(amount), currency.decimal_places, rounding))

    @classmethod
    def of_major(cls, currency: Currency, amount: int) -> BigMoney:
        """Whole major units at scale 0: of_major(USD, 25) is USD 25."""
        return cls(currency, Decimal(_require_int(amount, "amount")))

    @classmethod
    def of_minor(cls, currency: Currency, amount: int) -> BigMoney:
        """Minor units at the currency scale: of_minor(USD, 2595) is USD 25.95."""
        _require_currency(currency)
        return cls(currency, from_unscaled(_require_int(amount, "amount"), currency.decimal_places))

    @classmethod
    def zero(cls, currency: Currency, scale: int = 0) -> BigMoney:
        return cls(currency, from_unscaled(0, validate_scale(scale)))

    @classmethod
    def total(cls, values: Iterable[MonetaryValue]) -> BigMoney:
        """Exact sum of one or more amounts in the same currency."""
        iterator = iter(values)
        first = next(iterator, None)
        if first is None:
            raise MissingArgumentError("values")
        result = first.to_big_money()
        for value in iterator:
            result = result.plus(value)
        return result

    @classmethod
    def parse(cls, text: str, catalog: CurrencyCatalog) -> BigMoney:
        """Parse "USD 25.95", resolving the code through catalog."""
        currency, amount = _parse(text, catalog)
        return cls(currency, amount)

    # -- arithmetic -----------------------------------------------------------

    def plus(self, other: MonetaryValue | Decimal | int | str) -> BigMoney:
        """Exact sum, at the wider of the two scales."""
        return BigMoney(self.currency, add(self.amount, self._amount_of(other)))

    def plus_major(self, amount: int) -> BigMoney:
        return self.plus(Decimal(_require_int(amount, "amount")))

    def plus_minor(self, amount: int) -> BigMoney:
        return self.plus(from_unscaled(_require_int(amount, "amount"), self.currency.decimal_places))

    def minus(self, other: MonetaryValue | Decimal | int | str) -> BigMoney:
        """Exact difference, at the wider of the two scales."""
        return BigMoney(self.currency, subtract(self.amount, self._amount_of(other)))

    def minus_major(self, amount: int) -> BigMoney:
        return self.minus(Decimal(_require_int(amount, "amount")))

    def minus_minor(self, amount: int) -> BigMoney:
        return self.minus(from_unscaled(_require_int(amount, "amount"), self.currency.decimal_places))

    def multiplied_by(self, value: Decimal | int | str) -> BigMoney:
        """Exact product; the scale grows by the multiplier's scale."""
        return BigMoney(self.currency, multiply(self.amount, to_decimal(value, "multiplier")))

    def multiply_retain_scale(self, value: Decimal | int | str, rounding: str) -> BigMoney:
        """Product rounded back to the current scale."""
        product = multiply(self.amount, to_decimal(value, "multiplier"))
        return BigMoney(self.currency, set_scale(product, self.scale, rounding))

    def divided_by(self, value: Decimal | int | str, rounding: str) -> BigMoney:
        """
        Quotient at the current scale.

        Raises:
            MissingArgumentError: rounding is None.
            MoneyArithmeticError: value is zero, or rounding is
                ROUND_UNNECESSARY and the quotient does not fit the scale.
        """
        divisor = to_decimal(value, "divisor")
        return BigMoney(self.currency, divide(self.amount, divisor, self.scale, rounding))

    def negated(self) -> BigMoney:
        return BigMoney(self.currency, self.amount.copy_negate())

    def abs(self) -> BigMoney:
        return self if not self.is_negative else self.negated()

    # -- scale ----------------------------------------------------------------

    def with_scale(self, scale: int, rounding: str = ROUND_UNNECESSARY) -> BigMoney:
        """Re-express at exactly scale digits, widening or rounding."""
        if scale == self.scale:
            return self
        return BigMoney(self.currency, set_scale(self.amount, scale, rounding))

    converted_to_scale = with_scale

    def with_currency_scale(self, rounding: str = ROUND_UNNECESSARY) -> BigMoney:
        return self.with_scale(self.currency.decimal_places, rounding)

    def rounded(self, scale: int, rounding: str) -> BigMoney:
        """
        Round to scale digits but keep the current scale.

        BigMoney USD 1.2345 rounded(2, ROUND_HALF_EVEN) is USD 1.2300. A scale
        at or above the current scale returns self.
        """
        validate_scale(scale)
        if scale >= self.scale:
            return self
        narrowed = set_scale(self.amount, scale, rounding)
        return BigMoney(self.currency, set_scale(narrowed, self.scale, ROUND_UNNECESSARY))

    # -- replacement ----------------------------------------------------------

    def with_amount(self, amount: Decimal | int | str) -> BigMoney:
        return BigMoney(self.currency, amount)

    def with_currency(self, currency: Currency) -> BigMoney:
        """Same amount, different currency; no conversion is applied."""
        return BigMoney(currency, self.amount)

    def converted_to(self, currency: Currency, multiplier: Decimal | int | str) -> BigMoney:
        """Exact conversion: the amount times multiplier, in currency."""
        factor = _conversion_multiplier(self.currency, currency, multiplier)
        return BigMoney(currency, multiply(self.amount, factor))

    def to_money(self, rounding: str = ROUND_UNNECESSARY) -> Money:
        return Money.from_money(self, rounding)

    # -- operators ------------------------------------------------------------

    def __add__(self, other: object) -> BigMoney:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> BigMoney:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.minus(other)

    def __mul__(self, other: object) -> BigMoney:
        if isinstance(other, MonetaryValue):
            return NotImplemented
        return self.multiplied_by(other)

    __rmul__ = __mul__

    def __neg__(self) -> BigMoney:
        return self.negated()

    def __abs__(self) -> BigMoney:
        return self.abs()


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class Money(MonetaryValue):
    """
    An amount of money at exactly its currency's decimal places.

    Contract:
        Every result is re-expressed at currency.decimal_places. Operations
        whose exact result may not fit take a rounding mode; the default
        ROUND_UNNECESSARY raises MoneyArithmeticError rather than rounding
        silently.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount scale == currency.decimal_places, always
        - No silent currency mixing

    Non-goals:
        - Does NOT hold sub-minor precision (use BigMoney for that)
    """

    currency: Currency
    amount: Decimal

    def __post_init__(self) -> None:
        currency = _require_currency(self.currency)
        amount = set_scale(to_decimal(self.amount), currency.decimal_places, ROUND_UNNECESSARY)
        object.__setattr__(self, "amount", amount)

    # -- factories ------------------------------------------------------------

    @classmethod
    def of(
        cls,
        currency: Currency,
        amount: Decimal | int | str,
        rounding: str = ROUND_UNNECESSARY,
    ) -> Money:
        """
        Create a Money, rounding the amount to the currency scale.

        Raises:
            MoneyArithmeticError: rounding is ROUND_UNNECESSARY (the default)
                and amount has more decimals than the currency allows.
        """
        _require_currency(currency)
        return cls(currency, set_scale(to_decimal(amount), currency.decimal_places, rounding))

    @classmethod
    def from_money(cls, money: MonetaryValue, rounding: str = ROUND_UNNECESSARY) -> Money:
        """Convert any monetary value to a Money at the currency scale."""
        if money is None:
            raise MissingArgumentError("money")
        if isinstance(money, Money):
            return money
        return cls.of(money.currency, money.amount, rounding)

    @classmethod
    def of_major(cls, currency: Currency, amount: int) -> Money:
        return cls(currency, Decimal(_require_int(amount, "amount")))

    @classmethod
    def of_minor(cls, currency: Currency, amount: int) -> Money:
        """Minor units: of_minor(USD, 2595) is USD 25.95."""
        _require_currency(currency)
        return cls(currency, from_unscaled(_require_int(amount, "amount"), currency.decimal_places))

    @classmethod
    def zero(cls, currency: Currency) -> Money:
        return cls(currency, Decimal(0))

    @classmethod
    def total(cls, values: Iterable[MonetaryValue]) -> Money:
        """Sum of one or more amounts in the same currency."""
        return cls.from_money(BigMoney.total(values))

    @classmethod
    def parse(cls, text: str, catalog: CurrencyCatalog) -> Money:
        """
        Parse "USD 25.95", resolving the code through catalog.

        The amount must fit the currency scale; "USD 25.951" raises
        MoneyArithmeticError.
        """
        currency, amount = _parse(text, catalog)
        return cls(currency, amount)

    # -- arithmetic -----------------------------------------------------------

    def _with(self, amount: Decimal, rounding: str = ROUND_UNNECESSARY) -> Money:
        return Money(self.currency, set_scale(amount, self.currency.decimal_places, rounding))

    def plus(
        self,
        other: MonetaryValue | Decimal | int | str,
        rounding: str = ROUND_UNNECESSARY,
    ) -> Money:
        return self._with(add(self.amount, self._amount_of(other)), rounding)

    def plus_major(self, amount: int) -> Money:
        return self.plus(Decimal(_require_int(amount, "amount")))

    def plus_minor(self, amount: int) -> Money:
        return self.plus(from_unscaled(_require_int(amount, "amount"), self.currency.decimal_places))

    def minus(
        self,
        other: MonetaryValue | Decimal | int | str,
        rounding: str = ROUND_UNNECESSARY,
    ) -> Money:
        return self._with(subtract(self.amount, self._amount_of(other)), rounding)

    def minus_major(self, amount: int) -> Money:
        return self.minus(Decimal(_require_int(amount, "amount")))

    def minus_minor(self, amount: int) -> Money:
        return self.minus(from_unscaled(_require_int(amount, "amount"), self.currency.decimal_places))

    def multiplied_by(self, value: Decimal | int | str, rounding: str | None = None) -> Money:
        """
        Product rounded to the currency scale.

        An int multiplier is always exact and needs no rounding mode; any
        other multiplier requires one.
        """
        if rounding is None:
            if isinstance(value, int) and not isinstance(value, bool):
                return self._with(multiply(self.amount, Decimal(value)))
            raise MissingArgumentError("rounding")
        return self._with(multiply(self.amount, to_decimal(value, "multiplier")), rounding)

    def divided_by(self, value: Decimal | int | str, rounding: str) -> Money:
        divisor = to_decimal(value, "divisor")
        return Money(
            self.currency,
            divide(self.amount, divisor, self.currency.decimal_places, rounding),
        )

    def negated(self) -> Money:
        return Money(self.currency, self.amount.copy_negate())

    def abs(self) -> Money:
        return self if not self.is_negative else self.negated()

    def rounded(self, scale: int, rounding: str) -> Money:
        """
        Round to scale digits, keeping the currency scale.

        Money USD 25.95 rounded(0, ROUND_HALF_UP) is USD 26.00.
        """
        validate_scale(scale)
        if scale >= self.scale:
            return self
        return self._with(set_scale(self.amount, scale, rounding))

    # -- replacement ----------------------------------------------------------

    def with_amount(self, amount: Decimal | int | str, rounding: str = ROUND_UNNECESSARY) -> Money:
        return self._with(to_decimal(amount), rounding)

    def with_currency(self, currency: Currency, rounding: str = ROUND_UNNECESSARY) -> Money:
        """Same amount in a different currency, rounded to its scale."""
        return Money.of(currency, self.amount, rounding)

    def converted_to(
        self,
        currency: Currency,
        multiplier: Decimal | int | str,
        rounding: str = ROUND_UNNECESSARY,
    ) -> Money:
        factor = _conversion_multiplier(self.currency, currency, multiplier)
        return Money.of(currency, multiply(self.amount, factor), rounding)

    # -- operators ------------------------------------------------------------

    def __add__(self, other: object) -> Money:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> Money:
        if not isinstance(other, MonetaryValue):
            return NotImplemented
        return self.minus(other)

    def __neg__(self) -> Money:
        return self.negated()

    def __abs__(self) -> Money:
        return self.abs()


def _conversion_multiplier(source: Currency, target: Currency, multiplier: Any) -> Decimal:
    _require_currency(target)
    factor = to_decimal(multiplier, "multiplier")
    if factor < 0:
        raise InvalidExchangeRateError(to_plain_string(factor), "multiplier must not be negative")
    if source == target and factor != 1:
        raise InvalidExchangeRateError(
            to_plain_string(factor), f"conversion from {source} to itself must use 1"
        )
    return factor
