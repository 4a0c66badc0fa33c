"""
Codec -- compact binary form of currencies and monetary values.

Wire format (all integers big-endian):

    value    := tag payload
    tag      := b"C" (Currency) | b"M" (Money) | b"B" (BigMoney)
    currency := u16 code-length, UTF-8 code, i16 numeric code,
                i16 raw decimal places
    money    := currency, i32 amount-length, amount bytes (minimal two's
                complement of the unscaled value), i32 scale

Reading re-resolves the code through the receiving CurrencyCatalog, so a
decoded value carries the receiver's Currency object. The numeric code and
decimal places written by the sender must match that Currency, which
catches stale or inconsistent currency data on either side.

Failure modes:
    - CorruptedStreamError for an unknown tag, truncated input, a negative
      length or scale, or bytes left over after decode().
    - DeserializationError for a code the receiving catalog does not know.
    - CurrencyDataMismatchError when the numeric code or decimal places
      differ from the registered Currency, or a Money payload is not at the
      currency scale.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from money_kernel.domain.catalog import CurrencyCatalog
from money_kernel.domain.currency import Currency
from money_kernel.domain.values import BigMoney, Money
from money_kernel.exceptions import (
    CorruptedStreamError,
    CurrencyDataMismatchError,
    DeserializationError,
    MissingArgumentError,
    UnknownCurrencyError,
)
from money_kernel.logging_config import get_logger
from money_kernel.utils.decimals import from_unscaled, scale_of

logger = get_logger("domain.codec")

TAG_CURRENCY = b"C"
TAG_MONEY = b"M"
TAG_BIG_MONEY = b"B"

_U16 = struct.Struct(">H")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")

Serializable = Currency | Money | BigMoney


def _signed_bytes(n: int) -> bytes:
    """Minimal big-endian two's complement, at least one byte."""
    length = (n + (n < 0)).bit_length() // 8 + 1
    return n.to_bytes(length, "big", signed=True)


class MoneyCodec:
    """
    Reads and writes Currency, Money and BigMoney in the tagged binary format.

    Contract:
        encode()/decode() work on bytes; write()/read() on binary streams.
        A decoded value is equal to the encoded one and references the
        receiving catalog's Currency object.

    Non-goals:
        - Does NOT version the format
        - Does NOT register currencies it has not seen
    """

    def __init__(self, catalog: CurrencyCatalog):
        if catalog is None:
            raise MissingArgumentError("catalog")
        self.catalog = catalog

    # -- writing --------------------------------------------------------------

    def encode(self, value: Serializable) -> bytes:
        buffer = io.BytesIO()
        self.write(value, buffer)
        return buffer.getvalue()

    def write(self, value: Serializable, stream: BinaryIO) -> None:
        if isinstance(value, Currency):
            stream.write(TAG_CURRENCY)
            self._write_currency(value, stream)
        elif isinstance(value, Money):
            stream.write(TAG_MONEY)
            self._write_money(value, stream)
        elif isinstance(value, BigMoney):
            stream.write(TAG_BIG_MONEY)
            self._write_money(value, stream)
        elif value is None:
            raise MissingArgumentError("value")
        else:
            raise TypeError(f"Cannot serialize {type(value).__name__}")

    @staticmethod
    def _write_currency(currency: Currency, stream: BinaryIO) -> None:
        code = currency.code.encode("utf-8")
        stream.write(_U16.pack(len(code)))
        stream.write(code)
        stream.write(_I16.pack(currency.numeric_code))
        stream.write(_I16.pack(currency.default_fraction_digits))

    def _write_money(self, money: Money | BigMoney, stream: BinaryIO) -> None:
        self._write_currency(money.currency, stream)
        unscaled = _signed_bytes(money.unscaled_value)
        stream.write(_I32.pack(len(unscaled)))
        stream.write(unscaled)
        stream.write(_I32.pack(money.scale))

    # -- reading --------------------------------------------------------------

    def decode(self, data: bytes) -> Serializable:
        """Decode exactly one value; trailing bytes are an error."""
        if data is None:
            raise MissingArgumentError("data")
        stream = io.BytesIO(data)
        value = self.read(stream)
        leftover = len(data) - stream.tell()
        if leftover:
            self._corrupted(f"{leftover} trailing bytes after value")
        return value

    def read(self, stream: BinaryIO) -> Serializable:
        tag = self._read_exact(stream, 1)
        if tag == TAG_CURRENCY:
            return self._read_currency(stream)
        if tag == TAG_MONEY:
            currency, amount = self._read_money(stream)
            if scale_of(amount) != currency.decimal_places:
                self._mismatch(currency.code, "scale", currency.decimal_places, scale_of(amount))
            return Money(currency, amount)
        if tag == TAG_BIG_MONEY:
            currency, amount = self._read_money(stream)
            return BigMoney(currency, amount)
        self._corrupted(f"unknown type tag {tag!r}")

    def _read_currency(self, stream: BinaryIO) -> Currency:
        (length,) = _U16.unpack(self._read_exact(stream, _U16.size))
        raw_code = self._read_exact(stream, length)
        (numeric_code,) = _I16.unpack(self._read_exact(stream, _I16.size))
        (decimal_places,) = _I16.unpack(self._read_exact(stream, _I16.size))
        try:
            code = raw_code.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("codec_stream_corrupted", extra={"reason": "currency code is not UTF-8"})
            raise CorruptedStreamError("currency code is not UTF-8") from exc

        try:
            currency = self.catalog.resolve(code)
        except UnknownCurrencyError as exc:
            logger.warning(
                "codec_currency_mismatch",
                extra={"currency_code": code, "field": "code", "catalog": self.catalog.name},
            )
            raise DeserializationError(
                f"Serialized currency {code} is not registered in catalog {self.catalog.name}"
            ) from exc

        if currency.numeric_code != numeric_code:
            self._mismatch(code, "numeric_code", currency.numeric_code, numeric_code)
        if currency.default_fraction_digits != decimal_places:
            self._mismatch(
                code, "decimal_places", currency.default_fraction_digits, decimal_places
            )
        return currency

    def _read_money(self, stream: BinaryIO):
        currency = self._read_currency(stream)
        (length,) = _I32.unpack(self._read_exact(stream, _I32.size))
        if length <= 0:
            self._corrupted(f"invalid amount length {length}")
        unscaled = int.from_bytes(self._read_exact(stream, length), "big", signed=True)
        (scale,) = _I32.unpack(self._read_exact(stream, _I32.size))
        if scale < 0:
            self._corrupted(f"invalid scale {scale}")
        return currency, from_unscaled(unscaled, scale)

    @staticmethod
    def _read_exact(stream: BinaryIO, size: int) -> bytes:
        data = stream.read(size)
        if len(data) != size:
            MoneyCodec._corrupted(f"expected {size} bytes, got {len(data)}")
        return data

    @staticmethod
    def _corrupted(reason: str):
        logger.warning("codec_stream_corrupted", extra={"reason": reason})
        raise CorruptedStreamError(reason)

    def _mismatch(self, code: str, field: str, expected: int, actual: int):
        logger.warning(
            "codec_currency_mismatch",
            extra={
                "currency_code": code,
                "field": field,
                "expected": expected,
                "actual": actual,
                "catalog": self.catalog.name,
            },
        )
        raise CurrencyDataMismatchError(code, field, expected, actual)
