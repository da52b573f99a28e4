"""Lenient decoding of the scalar values found in JSON test fixtures."""

from __future__ import annotations

import re
from typing import Any

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_DEC_RE = re.compile(r"[0-9]+")

U256_MAX = (1 << 256) - 1
U64_MASK = (1 << 64) - 1


class FormatError(ValueError):
    """Raised when a fixture value cannot be decoded."""


def _is_hex(text: str) -> bool:
    return _HEX_RE.fullmatch(text) is not None


def parse_uint(value: Any) -> int:
    """Decode a 256-bit unsigned integer given as a JSON number, hex or decimal string.

    The empty string and a bare ``"0x"`` both mean zero.
    """
    if isinstance(value, bool):
        raise FormatError(f"invalid type: boolean {value!r}, expected a hex encoded or decimal uint")
    if isinstance(value, int):
        if value < 0 or value > U64_MASK:
            raise FormatError(f"invalid value: integer {value}, expected a hex encoded or decimal uint")
        return value
    if not isinstance(value, str):
        raise FormatError(f"invalid type: {type(value).__name__}, expected a hex encoded or decimal uint")

    if value in ("", "0x"):
        return 0
    if value.startswith("0x"):
        if len(value) > 66:
            raise FormatError(f"Invalid hex value {value}: value too big")
        digits = value[2:]
        if not _is_hex(digits):
            raise FormatError(f"Invalid hex value {value}: invalid hex character")
        return int(digits, 16)
    if _DEC_RE.fullmatch(value) is None:
        raise FormatError(f"Invalid decimal value {value}: InvalidCharacter")
    number = int(value)
    if number > U256_MAX:
        raise FormatError(f"Invalid decimal value {value}: InvalidLength")
    return number


def parse_non_zero(value: Any) -> int:
    """Decode a uint and require it to be non-zero."""
    number = parse_uint(value)
    if number == 0:
        raise FormatError("invalid value: integer `0`, expected a non-zero value")
    return number


def parse_optional_non_zero(value: Any) -> int | None:
    """Decode an optional uint; when present it must be non-zero."""
    if value is None:
        return None
    return parse_non_zero(value)


def uint_to_json(value: int) -> str:
    """Render a uint the way fixtures are written out: as a decimal string."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0 or value > U256_MAX:
        raise FormatError(f"not a 256-bit unsigned integer: {value!r}")
    return str(value)


def low_u64(value: int) -> int:
    """Return the low 64 bits of a uint."""
    return value & U64_MASK


def parse_bytes(value: Any) -> bytes:
    """Decode a byte string given as hex, with or without a ``0x`` prefix.

    A ``0x``-prefixed value of odd length is padded with a leading zero nibble.
    """
    if not isinstance(value, str):
        raise FormatError(f"invalid type: {type(value).__name__}, expected a hex encoded string")
    if value.startswith("0x"):
        digits = value[2:]
        if len(digits) % 2:
            digits = "0" + digits
    else:
        digits = value
    if len(digits) % 2 or not _is_hex(digits):
        raise FormatError(f"Invalid hex value {value}")
    return bytes.fromhex(digits)


def parse_hash(value: Any, size: int) -> bytes:
    """Decode a fixed-size hash of ``size`` bytes given as hex.

    The empty string and a bare ``"0x"`` both mean the all-zero hash.
    """
    if not isinstance(value, str):
        raise FormatError(f"invalid type: {type(value).__name__}, expected a hex encoded hash")
    if value in ("", "0x"):
        return bytes(size)
    digits = value[2:] if value.startswith("0x") else value
    if len(digits) != size * 2 or not _is_hex(digits):
        raise FormatError(f"Invalid hash value {value}: expected {size} hex encoded bytes")
    return bytes.fromhex(digits)


def parse_address(value: Any) -> bytes:
    """Decode a 20-byte address."""
    return parse_hash(value, 20)