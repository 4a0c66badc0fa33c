"""
Typed Exception Hierarchy for the Money Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of a money library must be able to tell a currency mismatch from a
malformed currency code from a corrupted byte stream without parsing message
text. Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        total = invoice_total.plus(shipping)
    except CurrencyMismatchError as e:
        log.warning("mixed currencies", extra={"first": e.first, "second": e.second})

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from MoneyKernelError:

    MoneyKernelError (base)
    |
    +-- MoneyValidationError
    |   +-- MissingArgumentError
    |   +-- InvalidCurrencyCodeError
    |   +-- InvalidNumericCodeError
    |   +-- InvalidDecimalPlacesError
    |   +-- InvalidCountryCodeError
    |   +-- InvalidAmountError
    |   +-- InvalidRoundingError
    |   +-- InvalidScaleError
    |
    +-- CurrencyError
    |   +-- UnknownCurrencyError
    |   +-- CurrencyAlreadyRegisteredError
    |   +-- CurrencyMismatchError
    |
    +-- ExchangeRateError
    |   +-- InvalidExchangeRateError
    |   +-- NotExchangeableError
    |   +-- NoCommonCurrencyError
    |   +-- ExchangeRateParseError
    |
    +-- MoneyArithmeticError
    +-- MoneyParseError
    |
    +-- DeserializationError
    |   +-- CorruptedStreamError
    |   +-- CurrencyDataMismatchError
    |
    +-- CatalogBootstrapError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | MISSING_ARGUMENT            | Required argument is None
                | INVALID_CURRENCY_CODE       | Code is not 3 upper-case ASCII letters
                | INVALID_NUMERIC_CODE        | Numeric code outside [-1, 999]
                | INVALID_DECIMAL_PLACES      | Decimal places outside allowed range
                | INVALID_COUNTRY_CODE        | Country is not 2 upper-case ASCII letters
                | INVALID_AMOUNT              | Amount is float, NaN, or not numeric
                | INVALID_ROUNDING            | Unknown rounding mode
                | INVALID_SCALE               | Negative or non-integer scale
----------------|-----------------------------|-----------------------------------------
Currency        | UNKNOWN_CURRENCY            | Lookup found no registered currency
                | CURRENCY_ALREADY_REGISTERED | Code, numeric code or country reused
                | CURRENCY_MISMATCH           | Mixed currencies in one operation
----------------|-----------------------------|-----------------------------------------
Exchange Rate   | INVALID_EXCHANGE_RATE       | Rate <= 0, or identity pair with rate != 1
                | NOT_EXCHANGEABLE            | Amount matches neither side of the rate
                | NO_COMMON_CURRENCY          | combine() on rates sharing no currency
                | EXCHANGE_RATE_PARSE_ERROR   | Text is not "<BASE>/<COUNTER> <rate>"
----------------|-----------------------------|-----------------------------------------
Arithmetic      | MONEY_ARITHMETIC_ERROR      | Division by zero, rounding necessary
Parsing         | MONEY_PARSE_ERROR           | Text is not "<CODE> <amount>"
----------------|-----------------------------|-----------------------------------------
Serialization   | CORRUPTED_STREAM            | Unknown type tag, truncated payload
                | CURRENCY_DATA_MISMATCH      | Payload disagrees with local catalog
----------------|-----------------------------|-----------------------------------------
Bootstrap       | CATALOG_BOOTSTRAP_ERROR     | Primary currency data source missing

===============================================================================
DESIGN DECISIONS
===============================================================================

1. WHY INHERIT FROM Exception (not ValueError, etc.)?
   Domain exceptions should be catchable as a group. Inheriting from
   built-in types mixes domain errors with programming errors.

2. WHY code CLASS ATTRIBUTE (not instance)?
   Codes are static per exception type, so they are available without
   instantiation and can be listed for API documentation.

3. WHY STORE ALL CONTEXT AS ATTRIBUTES?
   Exceptions are logged as structured JSON (see logging_config). Structured
   attributes survive serialization; message strings have to be parsed.

===============================================================================
"""

from __future__ import annotations

from typing import Any


class MoneyKernelError(Exception):
    """
    Base exception for all money kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MONEY_KERNEL_ERROR"


# Validation exceptions


class MoneyValidationError(MoneyKernelError):
    """Base exception for arguments rejected at the API boundary."""

    code: str = "VALIDATION_ERROR"


class MissingArgumentError(MoneyValidationError):
    """A required argument was None."""

    code: str = "MISSING_ARGUMENT"

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"{argument} must not be None")


class InvalidCurrencyCodeError(MoneyValidationError):
    """Currency code is not exactly three upper-case ASCII letters."""

    code: str = "INVALID_CURRENCY_CODE"

    def __init__(self, currency_code: Any, reason: str):
        self.currency_code = currency_code
        self.reason = reason
        super().__init__(f"Invalid currency code {currency_code!r}: {reason}")


class InvalidNumericCodeError(MoneyValidationError):
    """Numeric currency code is outside the permitted range or malformed."""

    code: str = "INVALID_NUMERIC_CODE"

    def __init__(self, numeric_code: Any, reason: str = "must be in range [-1, 999]"):
        self.numeric_code = numeric_code
        self.reason = reason
        super().__init__(f"Invalid numeric currency code {numeric_code!r}: {reason}")


class InvalidDecimalPlacesError(MoneyValidationError):
    """Decimal places are outside the permitted range."""

    code: str = "INVALID_DECIMAL_PLACES"

    def __init__(self, decimal_places: Any, minimum: int, maximum: int):
        self.decimal_places = decimal_places
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Invalid number of decimal places {decimal_places!r}: "
            f"must be in range [{minimum}, {maximum}]"
        )


class InvalidCountryCodeError(MoneyValidationError):
    """Country code is not two upper-case ASCII letters."""

    code: str = "INVALID_COUNTRY_CODE"

    def __init__(self, country_code: Any):
        self.country_code = country_code
        super().__init__(
            f"Invalid country code {country_code!r}: must be 2 upper-case ASCII letters"
        )


class InvalidAmountError(MoneyValidationError):
    """
    Amount cannot be used as an exact decimal.

    Floats are always rejected: a binary float cannot represent most decimal
    fractions, so accepting one would import its representation error.
    """

    code: str = "INVALID_AMOUNT"

    def __init__(self, amount: Any, reason: str):
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount!r}: {reason}")


class InvalidRoundingError(MoneyValidationError):
    """Rounding mode is not one of the supported decimal rounding modes."""

    code: str = "INVALID_ROUNDING"

    def __init__(self, rounding: Any):
        self.rounding = rounding
        super().__init__(f"Unsupported rounding mode: {rounding!r}")


class InvalidScaleError(MoneyValidationError):
    """Scale is negative or not an integer."""

    code: str = "INVALID_SCALE"

    def __init__(self, scale: Any):
        self.scale = scale
        super().__init__(f"Scale must be a non-negative integer, got {scale!r}")


# Currency exceptions


class CurrencyError(MoneyKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class UnknownCurrencyError(CurrencyError):
    """No currency registered for the requested key."""

    code: str = "UNKNOWN_CURRENCY"

    def __init__(self, key: Any, index: str = "code"):
        self.key = key
        self.index = index
        if index == "code":
            message = f"Unknown currency: {key}"
        else:
            message = f"Unknown currency for {index.replace('_', ' ')}: {key}"
        super().__init__(message)


class CurrencyAlreadyRegisteredError(CurrencyError):
    """
    Registration would reuse a currency code, numeric code or country code.

    Registration is all-or-nothing: when this is raised the catalog is
    unchanged.
    """

    code: str = "CURRENCY_ALREADY_REGISTERED"

    def __init__(self, currency_code: str, index: str, key: Any):
        self.currency_code = currency_code
        self.index = index
        self.key = key
        super().__init__(
            f"Cannot register {currency_code}: {index.replace('_', ' ')} "
            f"{key!r} is already registered"
        )


class CurrencyMismatchError(CurrencyError):
    """Attempted an operation on amounts in different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, first: Any, second: Any):
        self.first = str(first)
        self.second = str(second)
        super().__init__(f"Currencies differ: {self.first}/{self.second}")


# Exchange rate exceptions


class ExchangeRateError(MoneyKernelError):
    """Base exception for exchange rate related errors."""

    code: str = "EXCHANGE_RATE_ERROR"


class InvalidExchangeRateError(ExchangeRateError):
    """
    Exchange rate value is invalid for its currency pair.

    Rates must be strictly positive, and a rate between a currency and
    itself must be exactly 1.
    """

    code: str = "INVALID_EXCHANGE_RATE"

    def __init__(self, rate_value: str, reason: str):
        self.rate_value = rate_value
        self.reason = reason
        super().__init__(f"Invalid exchange rate value {rate_value}: {reason}")


class NotExchangeableError(ExchangeRateError):
    """The amount's currency is neither the base nor the counter of the rate."""

    code: str = "NOT_EXCHANGEABLE"

    def __init__(self, money: Any, exchange_rate: Any):
        self.money = str(money)
        self.exchange_rate = str(exchange_rate)
        super().__init__(f"{self.money} is not exchangeable using {self.exchange_rate}")


class NoCommonCurrencyError(ExchangeRateError):
    """Two exchange rates share no currency and cannot be combined."""

    code: str = "NO_COMMON_CURRENCY"

    def __init__(self, first: Any, second: Any):
        self.first = str(first)
        self.second = str(second)
        super().__init__(
            f"Exchange rates have no common currency: {self.first} vs {self.second}"
        )


class ExchangeRateParseError(ExchangeRateError):
    """Text is not a valid '<BASE>/<COUNTER> <rate>' exchange rate."""

    code: str = "EXCHANGE_RATE_PARSE_ERROR"

    def __init__(self, text: Any):
        self.text = text
        super().__init__(f"Exchange rate {text!r} cannot be parsed")


# Arithmetic and parsing


class MoneyArithmeticError(MoneyKernelError):
    """Division by zero, or rounding required where none was permitted."""

    code: str = "MONEY_ARITHMETIC_ERROR"

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class MoneyParseError(MoneyKernelError):
    """Text is not a valid '<CODE> <amount>' monetary value."""

    code: str = "MONEY_PARSE_ERROR"

    def __init__(self, text: Any, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Money {text!r} cannot be parsed: {reason}")


# Serialization exceptions


class DeserializationError(MoneyKernelError):
    """Base exception for values that cannot be read back from bytes."""

    code: str = "DESERIALIZATION_ERROR"


class CorruptedStreamError(DeserializationError):
    """The byte stream is structurally invalid."""

    code: str = "CORRUPTED_STREAM"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Serialization input is corrupted: {reason}")


class CurrencyDataMismatchError(DeserializationError):
    """
    Serialized currency data disagrees with the locally registered currency.

    Raised when the numeric code or decimal places written by the sender do
    not match the receiver's catalog entry for the same code.
    """

    code: str = "CURRENCY_DATA_MISMATCH"

    def __init__(self, currency_code: str, field: str, expected: Any, actual: Any):
        self.currency_code = currency_code
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Deserialization found a mismatch in {field} for {currency_code}: "
            f"registered {expected!r}, serialized {actual!r}"
        )


# Bootstrap


class CatalogBootstrapError(MoneyKernelError):
    """A mandatory currency data source could not be loaded."""

    code: str = "CATALOG_BOOTSTRAP_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot bootstrap currency catalog from {source}: {reason}")
