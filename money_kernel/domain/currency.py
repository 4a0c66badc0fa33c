"""Currency -- immutable currency descriptor and its field validators."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Any

from money_kernel.exceptions import (
    InvalidCountryCodeError,
    InvalidCurrencyCodeError,
    InvalidDecimalPlacesError,
    InvalidNumericCodeError,
    MissingArgumentError,
)

_CODE_PATTERN = re.compile(r"[A-Z]{3}")
_COUNTRY_PATTERN = re.compile(r"[A-Z]{2}")

# Range a Currency can carry. The catalog accepts a wider range at its
# boundary and lets the Currency constructor reject the remainder.
MIN_DECIMAL_PLACES = -1
MAX_DECIMAL_PLACES = 3
MAX_REGISTRY_DECIMAL_PLACES = 30


def validate_currency_code(code: Any) -> str:
    if code is None:
        raise MissingArgumentError("currency_code")
    if not isinstance(code, str):
        raise InvalidCurrencyCodeError(code, "must be a string")
    if not _CODE_PATTERN.fullmatch(code):
        raise InvalidCurrencyCodeError(code, "must be 3 upper-case ASCII letters")
    return code


def validate_numeric_code(numeric_code: Any) -> int:
    if numeric_code is None:
        raise MissingArgumentError("numeric_code")
    if isinstance(numeric_code, bool) or not isinstance(numeric_code, int):
        raise InvalidNumericCodeError(numeric_code, "must be an integer")
    if numeric_code < -1 or numeric_code > 999:
        raise InvalidNumericCodeError(numeric_code)
    return numeric_code


def validate_decimal_places(
    decimal_places: Any, maximum: int = MAX_DECIMAL_PLACES
) -> int:
    if decimal_places is None:
        raise MissingArgumentError("decimal_places")
    if (
        isinstance(decimal_places, bool)
        or not isinstance(decimal_places, int)
        or decimal_places < MIN_DECIMAL_PLACES
        or decimal_places > maximum
    ):
        raise InvalidDecimalPlacesError(decimal_places, MIN_DECIMAL_PLACES, maximum)
    return decimal_places


def validate_country_code(country_code: Any) -> str:
    if country_code is None:
        raise MissingArgumentError("country_code")
    if not isinstance(country_code, str) or not _COUNTRY_PATTERN.fullmatch(country_code):
        raise InvalidCountryCodeError(country_code)
    return country_code


@total_ordering
@dataclass(frozen=True, slots=True)
class Currency:
    """
    A unit of currency, as registered in a CurrencyCatalog.

    Contract:
        Carries the three-letter code, the numeric code (-1 when the currency
        has none) and the raw default fraction digits (-1 for a
        pseudo-currency such as XAU). All fields are validated on
        construction.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - Ordered by code
        - decimal_places is never negative; it is the scale of amounts in
          this currency

    Non-goals:
        - Does NOT register itself anywhere; obtain shared instances from a
          CurrencyCatalog so that one object exists per code
        - Does NOT carry display names or symbols
    """

    code: str
    numeric_code: int
    default_fraction_digits: int

    def __post_init__(self) -> None:
        validate_currency_code(self.code)
        validate_numeric_code(self.numeric_code)
        validate_decimal_places(self.default_fraction_digits)

    @property
    def decimal_places(self) -> int:
        """Scale of amounts in this currency (0 for pseudo-currencies)."""
        return max(0, self.default_fraction_digits)

    @property
    def is_pseudo_currency(self) -> bool:
        return self.default_fraction_digits == -1

    @property
    def numeric3_code(self) -> str:
        """Zero-padded numeric code, or an empty string when there is none."""
        if self.numeric_code < 0:
            return ""
        return f"{self.numeric_code:03d}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.code < other.code

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"
