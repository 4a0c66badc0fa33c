"""
Unit tests for BigMoney.

Verifies:
- Exact arithmetic keeps every digit (no overflow ceiling, no silent rounding)
- Scale rules: plus/minus keep the wider scale, divided_by keeps the scale
- Explicit rounding at every scale-reducing operation
- Currency checking on every binary operation
- Float constructor prohibition
"""

from decimal import ROUND_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

import pytest

from money_kernel.domain.values import BigMoney, Money
from money_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidAmountError,
    InvalidExchangeRateError,
    InvalidScaleError,
    MissingArgumentError,
    MoneyArithmeticError,
    MoneyParseError,
    UnknownCurrencyError,
)
from money_kernel.utils.decimals import ROUND_UNNECESSARY


class TestFactories:

    def test_of_keeps_amount_scale(self, usd):
        money = BigMoney.of(usd, "1.2345")
        assert money.amount == Decimal("1.2345")
        assert money.scale == 4
        assert money.currency is usd

    def test_of_int(self, usd):
        assert BigMoney.of(usd, 5).scale == 0

    def test_of_rejects_float(self, usd):
        with pytest.raises(InvalidAmountError):
            BigMoney.of(usd, 1.5)

    def test_of_requires_currency(self):
        with pytest.raises(MissingArgumentError):
            BigMoney.of(None, "1")

    def test_of_rejects_non_currency(self):
        with pytest.raises(TypeError):
            BigMoney.of("USD", "1")

    def test_of_scale(self, usd):
        money = BigMoney.of_scale(usd, 2595, 2)
        assert str(money) == "USD 25.95"
        with pytest.raises(InvalidScaleError):
            BigMoney.of_scale(usd, 1, -1)

    def test_of_currency_scale(self, usd, jpy):
        assert str(BigMoney.of_currency_scale(usd, "1.5")) == "USD 1.50"
        assert str(BigMoney.of_currency_scale(jpy, "1.6", ROUND_HALF_UP)) == "JPY 2"
        with pytest.raises(MoneyArithmeticError):
            BigMoney.of_currency_scale(usd, "1.234")

    def test_of_major_and_minor(self, usd, bhd):
        assert str(BigMoney.of_major(usd, 25)) == "USD 25"
        assert str(BigMoney.of_minor(usd, 2595)) == "USD 25.95"
        assert str(BigMoney.of_minor(bhd, 1)) == "BHD 0.001"

    def test_of_minor_rejects_non_int(self, usd):
        with pytest.raises(InvalidAmountError):
            BigMoney.of_minor(usd, "25")

    def test_zero(self, usd):
        assert BigMoney.zero(usd).is_zero
        assert BigMoney.zero(usd, 3).scale == 3

    def test_total(self, usd):
        total = BigMoney.total([BigMoney.of(usd, "1.1"), BigMoney.of(usd, "2.22"), Money.of(usd, "3")])
        assert str(total) == "USD 6.32"

    def test_total_rejects_empty(self):
        with pytest.raises(MissingArgumentError):
            BigMoney.total([])

    def test_parse(self, catalog, usd):
        money = BigMoney.parse("USD 25.951", catalog)
        assert money.currency is usd
        assert money.amount == Decimal("25.951")

    def test_parse_negative_and_unspaced(self, catalog):
        assert str(BigMoney.parse("USD -1.5", catalog)) == "USD -1.5"
        assert str(BigMoney.parse("  USD25 ", catalog)) == "USD 25"

    @pytest.mark.parametrize("text", ["USD", "usd 1", "USD 1,5", "USD 1.", "1.00 USD", ""])
    def test_parse_malformed(self, catalog, text):
        with pytest.raises(MoneyParseError):
            BigMoney.parse(text, catalog)

    def test_parse_unknown_currency(self, catalog):
        with pytest.raises(UnknownCurrencyError):
            BigMoney.parse("ABC 1.00", catalog)


class TestQueries:

    def test_scale_and_unscaled(self, usd):
        money = BigMoney.of(usd, "-25.956")
        assert money.scale == 3
        assert money.unscaled_value == -25956

    def test_major_minor(self, usd):
        money = BigMoney.of(usd, "25.956")
        assert money.amount_major == Decimal("25")
        assert money.amount_major_int == 25
        assert money.amount_minor == Decimal("2595")
        assert money.amount_minor_int == 2595
        assert money.minor_part == 95

    def test_negative_major_minor_truncate_toward_zero(self, usd):
        money = BigMoney.of(usd, "-25.956")
        assert money.amount_major_int == -25
        assert money.amount_minor_int == -2595
        assert money.minor_part == -95

    def test_is_currency_scale(self, usd):
        assert BigMoney.of(usd, "1.00").is_currency_scale
        assert not BigMoney.of(usd, "1.0").is_currency_scale

    def test_sign_queries(self, usd):
        positive = BigMoney.of(usd, "0.01")
        negative = BigMoney.of(usd, "-0.01")
        zero = BigMoney.zero(usd)
        assert positive.is_positive and positive.is_positive_or_zero
        assert not positive.is_negative and not positive.is_negative_or_zero
        assert negative.is_negative and negative.is_negative_or_zero
        assert zero.is_zero and zero.is_positive_or_zero and zero.is_negative_or_zero
        assert not zero.is_positive and not zero.is_negative


class TestArithmetic:

    def test_plus_keeps_wider_scale(self, usd):
        result = BigMoney.of(usd, "1.1").plus(BigMoney.of(usd, "2.222"))
        assert str(result) == "USD 3.322"

    def test_plus_decimal_amount(self, usd):
        assert str(BigMoney.of(usd, "1.10").plus(Decimal("0.005"))) == "USD 1.105"

    def test_plus_major_minor(self, usd):
        money = BigMoney.of(usd, "1.10")
        assert str(money.plus_major(2)) == "USD 3.10"
        assert str(money.plus_minor(5)) == "USD 1.15"
        assert str(money.minus_major(2)) == "USD -0.90"
        assert str(money.minus_minor(5)) == "USD 1.05"

    def test_no_overflow_ceiling(self, usd):
        huge = BigMoney.of(usd, "9" * 50 + ".99")
        result = huge.plus(BigMoney.of(usd, "0.01"))
        assert str(result) == "USD 1" + "0" * 50 + ".00"

    def test_plus_currency_mismatch(self, usd, eur):
        with pytest.raises(CurrencyMismatchError) as exc_info:
            BigMoney.of(usd, "1").plus(BigMoney.of(eur, "1"))
        assert exc_info.value.first == "USD"
        assert exc_info.value.second == "EUR"

    def test_minus(self, usd):
        assert str(BigMoney.of(usd, "5").minus(BigMoney.of(usd, "0.25"))) == "USD 4.75"

    def test_multiplied_by_is_exact(self, usd):
        result = BigMoney.of(usd, "1.25").multiplied_by("0.333")
        assert str(result) == "USD 0.41625"

    def test_multiplied_by_rejects_float(self, usd):
        with pytest.raises(InvalidAmountError):
            BigMoney.of(usd, "1").multiplied_by(0.5)

    def test_multiply_retain_scale(self, usd):
        result = BigMoney.of(usd, "1.25").multiply_retain_scale("0.333", ROUND_HALF_EVEN)
        assert str(result) == "USD 0.42"

    def test_divided_by_keeps_scale(self, usd):
        result = BigMoney.of(usd, "10.00").divided_by(3, ROUND_HALF_EVEN)
        assert str(result) == "USD 3.33"

    def test_divided_by_requires_rounding(self, usd):
        with pytest.raises(MissingArgumentError):
            BigMoney.of(usd, "10.00").divided_by(3, None)

    def test_divided_by_zero(self, usd):
        with pytest.raises(MoneyArithmeticError):
            BigMoney.of(usd, "10.00").divided_by(0, ROUND_HALF_EVEN)

    def test_divided_by_unnecessary(self, usd):
        assert str(BigMoney.of(usd, "10.00").divided_by(4, ROUND_UNNECESSARY)) == "USD 2.50"
        with pytest.raises(MoneyArithmeticError):
            BigMoney.of(usd, "10.00").divided_by(3, ROUND_UNNECESSARY)

    def test_negated_and_abs(self, usd):
        money = BigMoney.of(usd, "1.50")
        assert str(money.negated()) == "USD -1.50"
        assert money.negated().abs() == money
        assert money.abs() is money

    def test_negating_zero_keeps_unsigned_zero(self, usd):
        zero = BigMoney.of(usd, "0.00").negated()
        assert str(zero) == "USD 0.00"

    def test_operators(self, usd):
        a = BigMoney.of(usd, "1.50")
        b = BigMoney.of(usd, "0.25")
        assert a + b == BigMoney.of(usd, "1.75")
        assert a - b == BigMoney.of(usd, "1.25")
        assert -a == BigMoney.of(usd, "-1.50")
        assert abs(-a) == a
        assert a * 2 == BigMoney.of(usd, "3.00")
        assert 2 * a == BigMoney.of(usd, "3.00")
        assert a * Decimal("0.5") == BigMoney.of(usd, "0.750")

    def test_add_operator_rejects_plain_numbers(self, usd):
        with pytest.raises(TypeError):
            BigMoney.of(usd, "1") + 1


class TestScale:

    def test_with_scale_widens(self, usd):
        assert str(BigMoney.of(usd, "1.5").with_scale(3)) == "USD 1.500"

    def test_with_scale_rounds(self, usd):
        assert str(BigMoney.of(usd, "1.555").with_scale(2, ROUND_HALF_UP)) == "USD 1.56"
        assert str(BigMoney.of(usd, "1.555").converted_to_scale(1, ROUND_DOWN)) == "USD 1.5"

    def test_with_scale_default_refuses_rounding(self, usd):
        with pytest.raises(MoneyArithmeticError):
            BigMoney.of(usd, "1.555").with_scale(2)

    def test_with_currency_scale(self, usd, jpy):
        assert str(BigMoney.of(usd, "1.5").with_currency_scale()) == "USD 1.50"
        assert str(BigMoney.of(jpy, "1.5").with_currency_scale(ROUND_HALF_EVEN)) == "JPY 2"

    def test_rounded_keeps_scale(self, usd):
        result = BigMoney.of(usd, "1.2345").rounded(2, ROUND_HALF_EVEN)
        assert str(result) == "USD 1.2300"
        assert result.scale == 4

    def test_rounded_to_wider_scale_is_identity(self, usd):
        money = BigMoney.of(usd, "1.23")
        assert money.rounded(5, ROUND_HALF_EVEN) is money

    def test_rounded_rejects_negative_scale(self, usd):
        with pytest.raises(InvalidScaleError):
            BigMoney.of(usd, "1.23").rounded(-1, ROUND_HALF_EVEN)


class TestConversion:

    def test_with_amount_and_currency(self, usd, eur):
        money = BigMoney.of(usd, "1.25")
        assert str(money.with_amount("3")) == "USD 3"
        assert str(money.with_currency(eur)) == "EUR 1.25"

    def test_converted_to(self, usd, eur):
        result = BigMoney.of(usd, "10.00").converted_to(eur, "0.9137")
        assert str(result) == "EUR 9.137000"

    def test_converted_to_rejects_negative_multiplier(self, usd, eur):
        with pytest.raises(InvalidExchangeRateError):
            BigMoney.of(usd, "10").converted_to(eur, "-1")

    def test_converted_to_same_currency_requires_one(self, usd):
        assert BigMoney.of(usd, "10").converted_to(usd, 1) == BigMoney.of(usd, "10")
        with pytest.raises(InvalidExchangeRateError):
            BigMoney.of(usd, "10").converted_to(usd, 2)

    def test_to_money(self, usd):
        assert BigMoney.of(usd, "1.5").to_money() == Money.of(usd, "1.50")
        with pytest.raises(MoneyArithmeticError):
            BigMoney.of(usd, "1.555").to_money()
        assert str(BigMoney.of(usd, "1.555").to_money(ROUND_DOWN)) == "USD 1.55"


class TestEqualityAndComparison:

    def test_equality_includes_scale(self, usd):
        assert BigMoney.of(usd, "1.0") != BigMoney.of(usd, "1.00")
        assert BigMoney.of(usd, "1.00") == BigMoney.of(usd, "1.00")

    def test_is_equal_ignores_scale(self, usd):
        assert BigMoney.of(usd, "1.0").is_equal(BigMoney.of(usd, "1.00"))
        assert BigMoney.of(usd, "1.0").compare_to(BigMoney.of(usd, "1.00")) == 0

    def test_hash_consistent_with_equality(self, usd):
        values = {BigMoney.of(usd, "1.0"), BigMoney.of(usd, "1.00"), BigMoney.of(usd, "1.00")}
        assert len(values) == 2

    def test_different_currency_not_equal(self, usd, eur):
        assert BigMoney.of(usd, "1") != BigMoney.of(eur, "1")

    def test_big_money_not_equal_to_money(self, usd):
        assert BigMoney.of(usd, "1.00") != Money.of(usd, "1.00")

    def test_ordering(self, usd):
        small = BigMoney.of(usd, "1.5")
        large = BigMoney.of(usd, "2")
        assert small < large
        assert large > small
        assert small <= BigMoney.of(usd, "1.50")
        assert small.is_less_than(large)
        assert large.is_greater_than(small)
        assert sorted([large, small]) == [small, large]

    def test_compare_mismatch(self, usd, eur):
        with pytest.raises(CurrencyMismatchError):
            BigMoney.of(usd, "1") < BigMoney.of(eur, "2")

    def test_str_and_repr(self, usd):
        money = BigMoney.of(usd, "25.95")
        assert str(money) == "USD 25.95"
        assert repr(money) == "BigMoney('USD 25.95')"

    def test_str_never_scientific(self, usd):
        assert str(BigMoney.of(usd, "0.0000001")) == "USD 0.0000001"
