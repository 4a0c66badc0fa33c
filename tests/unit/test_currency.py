"""
Tests for the Currency descriptor and its field validators.

A Currency carries its code, numeric code and raw decimal places. The
constructor validates every field; decimal places beyond 3 are rejected
even though the catalog boundary accepts up to 30.
"""

import pytest

from money_kernel.domain.currency import (
    Currency,
    validate_country_code,
    validate_currency_code,
    validate_decimal_places,
    validate_numeric_code,
)
from money_kernel.exceptions import (
    InvalidCountryCodeError,
    InvalidCurrencyCodeError,
    InvalidDecimalPlacesError,
    InvalidNumericCodeError,
    MissingArgumentError,
    MoneyValidationError,
)


class TestCurrencyCodeValidation:
    """Codes are exactly three upper-case ASCII letters."""

    def test_valid_codes_accepted(self):
        for code in ["USD", "EUR", "XAU", "ZZZ"]:
            assert validate_currency_code(code) == code

    @pytest.mark.parametrize("code", ["usd", "US", "USDD", "", "U1D", "ÄBC", " USD"])
    def test_malformed_codes_rejected(self, code):
        with pytest.raises(InvalidCurrencyCodeError):
            validate_currency_code(code)

    def test_lowercase_not_normalized(self):
        """Codes are case-sensitive; lower case is rejected, not upper-cased."""
        with pytest.raises(InvalidCurrencyCodeError, match="3 upper-case ASCII letters"):
            Currency("usd", 840, 2)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidCurrencyCodeError, match="must be a string"):
            validate_currency_code(840)

    def test_none_is_missing_argument(self):
        with pytest.raises(MissingArgumentError):
            validate_currency_code(None)


class TestNumericCodeValidation:

    @pytest.mark.parametrize("numeric", [-1, 0, 8, 840, 999])
    def test_range_accepted(self, numeric):
        assert validate_numeric_code(numeric) == numeric

    @pytest.mark.parametrize("numeric", [-2, 1000, 10_000])
    def test_out_of_range_rejected(self, numeric):
        with pytest.raises(InvalidNumericCodeError):
            validate_numeric_code(numeric)

    def test_bool_and_text_rejected(self):
        with pytest.raises(InvalidNumericCodeError):
            validate_numeric_code(True)
        with pytest.raises(InvalidNumericCodeError):
            validate_numeric_code("840")


class TestDecimalPlacesValidation:

    def test_currency_range(self):
        for dp in (-1, 0, 1, 2, 3):
            assert validate_decimal_places(dp) == dp

    def test_currency_rejects_four(self):
        with pytest.raises(InvalidDecimalPlacesError) as exc_info:
            validate_decimal_places(4)
        assert exc_info.value.minimum == -1
        assert exc_info.value.maximum == 3

    def test_wider_maximum(self):
        assert validate_decimal_places(30, maximum=30) == 30
        with pytest.raises(InvalidDecimalPlacesError):
            validate_decimal_places(31, maximum=30)

    def test_below_minus_one_rejected(self):
        with pytest.raises(InvalidDecimalPlacesError):
            validate_decimal_places(-2)


class TestCountryCodeValidation:

    def test_valid(self):
        assert validate_country_code("PL") == "PL"

    @pytest.mark.parametrize("country", ["pl", "POL", "P", "", "P1"])
    def test_invalid(self, country):
        with pytest.raises(InvalidCountryCodeError):
            validate_country_code(country)


class TestCurrency:
    """Currency value object."""

    def test_fields(self):
        usd = Currency("USD", 840, 2)
        assert usd.code == "USD"
        assert usd.numeric_code == 840
        assert usd.default_fraction_digits == 2
        assert usd.decimal_places == 2
        assert not usd.is_pseudo_currency

    def test_pseudo_currency_has_zero_scale(self):
        xau = Currency("XAU", 959, -1)
        assert xau.is_pseudo_currency
        assert xau.default_fraction_digits == -1
        assert xau.decimal_places == 0

    def test_numeric3_code_zero_padded(self):
        assert Currency("ALL", 8, 2).numeric3_code == "008"
        assert Currency("BHD", 48, 3).numeric3_code == "048"
        assert Currency("USD", 840, 2).numeric3_code == "840"

    def test_numeric3_code_empty_without_numeric(self):
        assert Currency("XYZ", -1, 2).numeric3_code == ""

    def test_constructor_rejects_more_than_three_decimal_places(self):
        with pytest.raises(InvalidDecimalPlacesError):
            Currency("CLF", 990, 4)

    def test_immutable(self):
        usd = Currency("USD", 840, 2)
        with pytest.raises(AttributeError):
            usd.code = "EUR"

    def test_hashable_and_equal_by_value(self):
        assert Currency("USD", 840, 2) == Currency("USD", 840, 2)
        assert len({Currency("USD", 840, 2), Currency("USD", 840, 2)}) == 1

    def test_ordered_by_code(self):
        currencies = [Currency("USD", 840, 2), Currency("EUR", 978, 2), Currency("CHF", 756, 2)]
        assert [c.code for c in sorted(currencies)] == ["CHF", "EUR", "USD"]
        assert Currency("EUR", 978, 2) < Currency("USD", 840, 2)
        assert Currency("USD", 840, 2) >= Currency("EUR", 978, 2)

    def test_str_and_repr(self):
        usd = Currency("USD", 840, 2)
        assert str(usd) == "USD"
        assert repr(usd) == "Currency('USD')"

    def test_validation_errors_share_base(self):
        with pytest.raises(MoneyValidationError):
            Currency("US", 840, 2)
