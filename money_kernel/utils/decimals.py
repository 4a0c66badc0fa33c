"""
Decimals -- exact decimal helpers shared by the monetary value types.

Responsibility:
    Converts caller input into canonical Decimals and performs the few
    operations whose precision the standard decimal context would otherwise
    limit: exact addition and multiplication, scale changes with an explicit
    rounding mode, and division to a fixed scale.

Architecture position:
    Kernel > Utils -- pure functions, zero I/O. Imported by
    money_kernel.domain.values and money_kernel.domain.exchange.

Invariants enforced:
    - Canonical form: scale is never negative and zero is never negative.
    - No binary floating point: float input is rejected, never converted.
    - Every scale-reducing operation names its rounding mode. The
      ROUND_UNNECESSARY pseudo-mode raises instead of rounding.

Failure modes:
    - InvalidAmountError for float, bool, NaN, infinity or unparseable text.
    - InvalidRoundingError / InvalidScaleError for bad arguments.
    - MoneyArithmeticError on division by zero or on rounding that
      ROUND_UNNECESSARY forbids.
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Context,
    Decimal,
    InvalidOperation,
)
from typing import Any

from money_kernel.exceptions import (
    InvalidAmountError,
    InvalidRoundingError,
    InvalidScaleError,
    MissingArgumentError,
    MoneyArithmeticError,
)

# Raise instead of rounding when the exact result does not fit the scale.
ROUND_UNNECESSARY = "ROUND_UNNECESSARY"

ROUNDING_MODES: frozenset[str] = frozenset({
    ROUND_UP,
    ROUND_DOWN,
    ROUND_CEILING,
    ROUND_FLOOR,
    ROUND_HALF_UP,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_05UP,
    ROUND_UNNECESSARY,
})

# Unbounded context: add, subtract, multiply and quantize never round here.
# Never divide with it.
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

ZERO = Decimal(0)


def _canonical(value: Decimal) -> Decimal:
    if value.as_tuple().exponent > 0:
        value = value.quantize(ZERO, context=_EXACT)
    if value.is_zero() and value.is_signed():
        value = value.copy_abs()
    return value


def to_decimal(value: Any, argument: str = "amount") -> Decimal:
    """
    Convert caller input to a canonical, finite Decimal.

    Accepts Decimal, int and decimal text. Text is stripped of surrounding
    whitespace; scientific notation is accepted and re-expressed with a
    non-negative scale.

    Raises:
        MissingArgumentError: value is None.
        InvalidAmountError: float, bool, NaN, infinity, or unparseable text.
    """
    if value is None:
        raise MissingArgumentError(argument)
    if isinstance(value, bool):
        raise InvalidAmountError(value, "booleans are not amounts")
    if isinstance(value, float):
        raise InvalidAmountError(value, "binary floating point is not accepted")
    if isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, Decimal):
        result = value
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidAmountError(value, "not a decimal number") from exc
    else:
        raise InvalidAmountError(value, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(value, "amount must be finite")
    return _canonical(result)


def validate_rounding(rounding: Any) -> str:
    """Return rounding unchanged if it names a supported mode."""
    if rounding is None:
        raise MissingArgumentError("rounding")
    if rounding not in ROUNDING_MODES:
        raise InvalidRoundingError(rounding)
    return rounding


def validate_scale(scale: Any) -> int:
    """Return scale unchanged if it is a non-negative int."""
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 0:
        raise InvalidScaleError(scale)
    return scale


def scale_of(value: Decimal) -> int:
    """Number of digits after the decimal point."""
    return -value.as_tuple().exponent


def unscaled_value(value: Decimal) -> int:
    """The integer n such that value == n * 10**-scale_of(value)."""
    sign, digits, _ = value.as_tuple()
    n = int("".join(map(str, digits))) if digits else 0
    return -n if sign else n


def from_unscaled(unscaled: int, scale: int) -> Decimal:
    """Build the Decimal unscaled * 10**-scale without rounding."""
    digits = tuple(int(c) for c in str(abs(unscaled)))
    return Decimal((1 if unscaled < 0 else 0, digits, -scale))


def add(a: Decimal, b: Decimal) -> Decimal:
    """Exact sum; the result has the wider of the two scales."""
    return _canonical(_EXACT.add(a, b))


def subtract(a: Decimal, b: Decimal) -> Decimal:
    """Exact difference; the result has the wider of the two scales."""
    return _canonical(_EXACT.subtract(a, b))


def multiply(a: Decimal, b: Decimal) -> Decimal:
    """Exact product; the result scale is the sum of both scales."""
    return _canonical(_EXACT.multiply(a, b))


def set_scale(value: Decimal, scale: int, rounding: str) -> Decimal:
    """
    Re-express value at exactly scale digits after the decimal point.

    Widening is always exact. Narrowing rounds with the given mode; with
    ROUND_UNNECESSARY it raises MoneyArithmeticError if digits would be lost.
    """
    validate_scale(scale)
    validate_rounding(rounding)
    quantum = from_unscaled(1, scale)
    if rounding == ROUND_UNNECESSARY:
        result = value.quantize(quantum, rounding=ROUND_DOWN, context=_EXACT)
        if result != value:
            raise MoneyArithmeticError(
                "set_scale",
                f"rounding necessary to express {value} at scale {scale}",
            )
        return _canonical(result)
    return _canonical(value.quantize(quantum, rounding=rounding, context=_EXACT))


def divide(dividend: Decimal, divisor: Decimal, scale: int, rounding: str) -> Decimal:
    """
    Divide to exactly scale digits, rounding with the given mode.

    Works on the unscaled integers so the quotient is never limited by a
    context precision. The integer quotient is extended with the next digit
    and a sticky digit for any remainder beyond it; quantizing that
    approximation gives the same result as rounding the exact quotient for
    every rounding mode.
    """
    validate_scale(scale)
    validate_rounding(rounding)
    if divisor.is_zero():
        raise MoneyArithmeticError("divide", "division by zero")

    shift = scale_of(divisor) - scale_of(dividend) + scale
    numerator = unscaled_value(dividend)
    denominator = unscaled_value(divisor)
    if shift >= 0:
        numerator *= 10 ** shift
    else:
        denominator *= 10 ** -shift
    if denominator < 0:
        numerator, denominator = -numerator, -denominator

    negative = numerator < 0
    quotient, remainder = divmod(abs(numerator), denominator)
    if remainder == 0:
        return from_unscaled(-quotient if negative else quotient, scale)
    if rounding == ROUND_UNNECESSARY:
        raise MoneyArithmeticError(
            "divide",
            f"rounding necessary to express {dividend}/{divisor} at scale {scale}",
        )

    next_digit, rest = divmod(remainder * 10, denominator)
    approximation = quotient * 100 + next_digit * 10 + (1 if rest else 0)
    rounded = from_unscaled(
        -approximation if negative else approximation, 2
    ).quantize(ZERO, rounding=rounding, context=_EXACT)
    return from_unscaled(unscaled_value(rounded), scale)


def strip_trailing_zeros(value: Decimal) -> Decimal:
    """Remove trailing fractional zeros, never producing a negative scale."""
    return _canonical(value.normalize(_EXACT))


def to_plain_string(value: Decimal) -> str:
    """Plain notation, never scientific: Decimal('1.50') -> '1.50'."""
    return format(value, "f")
