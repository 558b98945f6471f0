"""Exact text codecs for script numbers.

- signed 32-bit integers: plain decimal, optional leading ``-``
- unsigned 32-bit integers: exactly 8 lowercase hex digits
- 256-bit identifiers: exactly 64 lowercase hex digits, read as four
  16-digit chunks, most significant first

None of these are locale-sensitive and none accept a ``+`` sign,
uppercase hex, or surrounding whitespace.
"""

from __future__ import annotations

from tasrecord.errors import DecodeError
from tasrecord.script.tokens import Token

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
UINT32_MAX = 2**32 - 1
UINT256_MAX = 2**256 - 1

UINT32_DIGITS = 8
CHUNK_DIGITS = 16
UINT256_CHUNKS = 4

_HEX_DIGITS = "0123456789abcdef"


def format_int(value: int) -> str:
    """Encode a signed 32-bit integer as decimal."""
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"value out of int32 range: {value}")
    return str(value)


def format_uint32(value: int) -> str:
    """Encode an unsigned 32-bit integer as 8 lowercase hex digits."""
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"value out of uint32 range: {value}")
    return f"{value:08x}"


def format_uint256(value: int) -> str:
    """Encode a 256-bit identifier as 64 lowercase hex digits."""
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"value out of uint256 range: {value}")
    return "".join(f"{chunk:016x}" for chunk in uint256_chunks(value))


def uint256_chunks(value: int) -> tuple[int, ...]:
    """Split a 256-bit value into four 64-bit chunks, most significant first."""
    mask = (1 << 64) - 1
    return tuple(
        (value >> (64 * (UINT256_CHUNKS - 1 - i))) & mask
        for i in range(UINT256_CHUNKS)
    )


def parse_int(token: Token) -> int:
    """Decode a signed 32-bit decimal integer.

    The magnitude limit depends on the sign, so ``-2147483648`` decodes
    while ``2147483648`` overflows.

    Raises:
        DecodeError: On a missing digit, a non-digit, or overflow
    """
    text = token.text
    index = 0
    negative = text.startswith("-")
    if negative:
        index = 1
    if len(text) == index:
        raise DecodeError(token.column_at(index), "expected decimal digits")

    limit = -INT32_MIN if negative else INT32_MAX
    magnitude = 0
    for offset in range(index, len(text)):
        char = text[offset]
        if not "0" <= char <= "9":
            raise DecodeError(token.column_at(offset), "expected decimal digit")
        magnitude = magnitude * 10 + (ord(char) - ord("0"))
        if magnitude > limit:
            raise DecodeError(token.column_at(offset), "integer overflow")
    return -magnitude if negative else magnitude


def _parse_nibble(token: Token, offset: int) -> int:
    nibble = _HEX_DIGITS.find(token.text[offset])
    if nibble < 0:
        raise DecodeError(token.column_at(offset), "hex digit out of range [0-9a-f]")
    return nibble


def _parse_hex(token: Token, start: int, count: int) -> int:
    value = 0
    for offset in range(start, start + count):
        value = (value << 4) | _parse_nibble(token, offset)
    return value


def parse_uint32(token: Token) -> int:
    """Decode exactly 8 lowercase hex digits.

    Raises:
        DecodeError: On a wrong length or a digit outside [0-9a-f]
    """
    if len(token.text) != UINT32_DIGITS:
        raise DecodeError(token.column, "expected hex uint32")
    return _parse_hex(token, 0, UINT32_DIGITS)


def parse_uint256(token: Token) -> int:
    """Decode exactly 64 lowercase hex digits as four 64-bit chunks.

    Raises:
        DecodeError: On a wrong length or a digit outside [0-9a-f]
    """
    if len(token.text) != CHUNK_DIGITS * UINT256_CHUNKS:
        raise DecodeError(token.column, "expected hex uint256")
    value = 0
    for chunk in range(UINT256_CHUNKS):
        value = (value << 64) | _parse_hex(token, chunk * CHUNK_DIGITS, CHUNK_DIGITS)
    return value
