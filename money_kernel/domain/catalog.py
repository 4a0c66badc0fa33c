"""
CurrencyCatalog -- registry of known currencies.

Responsibility:
    Owns the one Currency object per code and the indexes that look it up
    by code, by numeric code and by country.

Architecture position:
    Kernel > Domain. The only shared mutable state in the kernel. Filled by
    money_config at startup, or directly by callers that build their own
    catalog.

Invariants enforced:
    - Exactly one Currency per code; numeric codes (when >= 0) are unique;
      a country maps to at most one currency.
    - Currencies are never removed or replaced.
    - A registration is applied to all three indexes or to none.

Concurrency:
    Registrations are serialised by a single lock. Each one publishes a new
    immutable snapshot with one attribute assignment, so readers never lock
    and never observe a half-registered currency.

Failure modes:
    - MoneyValidationError subclasses for malformed registration input.
    - CurrencyAlreadyRegisteredError for any uniqueness conflict.
    - UnknownCurrencyError when a lookup finds nothing.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NamedTuple

from money_kernel.domain.currency import (
    MAX_REGISTRY_DECIMAL_PLACES,
    Currency,
    validate_country_code,
    validate_currency_code,
    validate_decimal_places,
    validate_numeric_code,
)
from money_kernel.exceptions import (
    CurrencyAlreadyRegisteredError,
    InvalidNumericCodeError,
    MissingArgumentError,
    MoneyValidationError,
    UnknownCurrencyError,
)
from money_kernel.logging_config import get_logger

logger = get_logger("domain.catalog")

_NUMERIC_TEXT = re.compile(r"[0-9]{1,3}")
_LOCALE_SEPARATORS = re.compile(r"[_-]")
_LOCALE_REGION = re.compile(r"[A-Za-z]{2}")


class CatalogEntry(NamedTuple):
    """Arguments of one CurrencyCatalog.register() call."""

    code: str
    numeric_code: int
    decimal_places: int
    country_codes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class _Snapshot:
    by_code: Mapping[str, Currency]
    by_numeric: Mapping[int, Currency]
    by_country: Mapping[str, Currency]


_EMPTY = _Snapshot(
    by_code=MappingProxyType({}),
    by_numeric=MappingProxyType({}),
    by_country=MappingProxyType({}),
)


class CurrencyCatalog:
    """
    Thread-safe registry of currencies.

    Contract:
        register() validates and indexes a currency; resolve*() look one up.
        Lookups return the identical Currency object that register()
        returned.

    Guarantees:
        - Registration is atomic across the code, numeric and country indexes
        - Readers see the snapshot published by the last completed
          registration
        - list() is sorted by code

    Non-goals:
        - Does NOT load currency data; see money_config.bootstrap_catalog
        - Does NOT remove or update currencies
    """

    def __init__(self, name: str = "default"):
        self.name = name
        self._lock = threading.Lock()
        self._snapshot = _EMPTY

    def register(
        self,
        code: str,
        numeric_code: int,
        decimal_places: int,
        country_codes: Iterable[str] = (),
    ) -> Currency:
        """
        Register a currency and return the catalog's Currency object for it.

        Preconditions:
            - code is 3 upper-case ASCII letters
            - numeric_code is in [-1, 999] (-1 means no numeric code)
            - decimal_places is in [-1, 30] (-1 means pseudo-currency), and
              within the range a Currency accepts
            - each country code is 2 upper-case ASCII letters

        Postconditions:
            - resolve(code) returns the new Currency; so do resolve_numeric()
              for a non-negative numeric code and resolve_by_country() for
              each country code

        Raises:
            MoneyValidationError: malformed input (see preconditions).
            CurrencyAlreadyRegisteredError: code, numeric code or a country
                is already registered, or a country is repeated. The catalog
                is unchanged.
        """
        try:
            currency, countries = self._validate(
                code, numeric_code, decimal_places, country_codes
            )
        except MoneyValidationError as exc:
            logger.warning(
                "currency_registration_rejected",
                extra={
                    "catalog": self.name,
                    "currency_code": code,
                    "error_code": exc.code,
                    "reason": str(exc),
                },
            )
            raise

        with self._lock:
            current = self._snapshot
            try:
                self._check_conflicts(
                    current, currency.code, currency.numeric_code, countries
                )
            except CurrencyAlreadyRegisteredError as exc:
                logger.warning(
                    "currency_registration_rejected",
                    extra={
                        "catalog": self.name,
                        "currency_code": code,
                        "error_code": exc.code,
                        "index": exc.index,
                        "key": exc.key,
                    },
                )
                raise

            by_code = dict(current.by_code)
            by_code[currency.code] = currency
            by_numeric = dict(current.by_numeric)
            if currency.numeric_code >= 0:
                by_numeric[currency.numeric_code] = currency
            by_country = dict(current.by_country)
            for country in countries:
                by_country[country] = currency

            self._snapshot = _Snapshot(
                by_code=MappingProxyType(by_code),
                by_numeric=MappingProxyType(by_numeric),
                by_country=MappingProxyType(by_country),
            )

        logger.debug(
            "currency_registered",
            extra={
                "catalog": self.name,
                "currency_code": currency.code,
                "numeric_code": currency.numeric_code,
                "decimal_places": currency.default_fraction_digits,
                "country_codes": list(countries),
            },
        )
        return currency

    def register_many(self, entries: Iterable[CatalogEntry | tuple]) -> list[Currency]:
        """Register entries in order; each registration is individually atomic."""
        return [self.register(*entry) for entry in entries]

    @staticmethod
    def _validate(
        code: Any,
        numeric_code: Any,
        decimal_places: Any,
        country_codes: Any,
    ) -> tuple[Currency, tuple[str, ...]]:
        validate_currency_code(code)
        validate_numeric_code(numeric_code)
        validate_decimal_places(decimal_places, MAX_REGISTRY_DECIMAL_PLACES)
        if country_codes is None:
            raise MissingArgumentError("country_codes")
        if isinstance(country_codes, str):
            country_codes = (country_codes,)
        countries = tuple(validate_country_code(c) for c in country_codes)
        return Currency(code, numeric_code, decimal_places), countries

    def check_available(
        self,
        code: str,
        numeric_code: int,
        country_codes: Iterable[str] = (),
    ) -> None:
        """
        Raise CurrencyAlreadyRegisteredError if register() would conflict.

        Checks the code, the numeric code and each country against the
        current snapshot. Does not validate the format of its arguments.
        """
        self._check_conflicts(self._snapshot, code, numeric_code, tuple(country_codes))

    @staticmethod
    def _check_conflicts(
        snapshot: _Snapshot,
        code: str,
        numeric_code: int,
        countries: tuple[str, ...],
    ) -> None:
        if code in snapshot.by_code:
            raise CurrencyAlreadyRegisteredError(code, "code", code)
        if numeric_code >= 0 and numeric_code in snapshot.by_numeric:
            raise CurrencyAlreadyRegisteredError(code, "numeric_code", numeric_code)
        seen: set[str] = set()
        for country in countries:
            if country in snapshot.by_country or country in seen:
                raise CurrencyAlreadyRegisteredError(code, "country_code", country)
            seen.add(country)

    # -- lookups --------------------------------------------------------------

    def resolve(self, code: str) -> Currency:
        """Return the currency registered under code."""
        if code is None:
            raise MissingArgumentError("currency_code")
        currency = self._snapshot.by_code.get(code)
        if currency is None:
            raise UnknownCurrencyError(code)
        return currency

    def find(self, code: str) -> Currency | None:
        """Like resolve(), but returns None for an unknown code."""
        return self._snapshot.by_code.get(code)

    def resolve_numeric(self, numeric_code: str | int) -> Currency:
        """
        Return the currency with the given numeric code.

        Accepts the numeric code as an int in [0, 999] or as 1-3 digits of
        text, leading zeros allowed ("8", "008" and 8 are the same code).
        """
        if numeric_code is None:
            raise MissingArgumentError("numeric_code")
        if isinstance(numeric_code, str):
            if not _NUMERIC_TEXT.fullmatch(numeric_code):
                raise InvalidNumericCodeError(numeric_code, "must be 1-3 digits")
            key = int(numeric_code)
        elif isinstance(numeric_code, int) and not isinstance(numeric_code, bool):
            if numeric_code < 0 or numeric_code > 999:
                raise InvalidNumericCodeError(numeric_code, "must be in range [0, 999]")
            key = numeric_code
        else:
            raise InvalidNumericCodeError(numeric_code, "must be an int or digit string")

        currency = self._snapshot.by_numeric.get(key)
        if currency is None:
            raise UnknownCurrencyError(numeric_code, "numeric_code")
        return currency

    def resolve_by_country(self, country_code: str) -> Currency:
        """Return the currency of the given ISO 3166 alpha-2 country."""
        validate_country_code(country_code)
        currency = self._snapshot.by_country.get(country_code)
        if currency is None:
            raise UnknownCurrencyError(country_code, "country_code")
        return currency

    def resolve_by_locale(self, locale: str) -> Currency:
        """
        Return the currency of a locale's country.

        Accepts "pl_PL", "en-US", "de_DE.UTF-8" and "zh_Hant_TW" style
        identifiers. The country is the last two-letter component after the
        language; a locale without one (e.g. "pl", "es-419") resolves to
        nothing.
        """
        if locale is None:
            raise MissingArgumentError("locale")
        parts = _LOCALE_SEPARATORS.split(locale.split(".", 1)[0].split("@", 1)[0])
        regions = [p for p in parts[1:] if _LOCALE_REGION.fullmatch(p)]
        if not regions:
            raise UnknownCurrencyError(locale, "locale")
        return self.resolve_by_country(regions[-1].upper())

    def list(self) -> list[Currency]:
        """All registered currencies, sorted by code."""
        return sorted(self._snapshot.by_code.values())

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str):
            return False
        return code in self._snapshot.by_code

    def __len__(self) -> int:
        return len(self._snapshot.by_code)

    def __repr__(self) -> str:
        return f"CurrencyCatalog(name={self.name!r}, currencies={len(self)})"
