import json

import pytest

from evmfixtures.values import (
    FormatError,
    low_u64,
    parse_address,
    parse_bytes,
    parse_hash,
    parse_non_zero,
    parse_optional_non_zero,
    parse_uint,
    uint_to_json,
)


def test_uint_deserialization():
    raw = json.loads('["0xa", "10", "", "0x", 0]')
    assert [parse_uint(v) for v in raw] == [10, 10, 0, 0, 0]


def test_uint_deserialization_error_for_hex_too_large():
    hex_value = "0x" + "1" * 65
    with pytest.raises(FormatError) as info:
        parse_uint(hex_value)
    assert str(info.value) == f"Invalid hex value {hex_value}: value too big"


def test_uint_into():
    assert parse_uint("0x0a") == 10


def test_hex_max_value_fits():
    assert parse_uint("0x" + "f" * 64) == (1 << 256) - 1


def test_decimal_too_large():
    with pytest.raises(FormatError):
        parse_uint(str(1 << 256))


@pytest.mark.parametrize("bad", ["0xzz", "12a", "-1", -1, True, 1.5, None, [1]])
def test_invalid_uints(bad):
    with pytest.raises(FormatError):
        parse_uint(bad)


def test_non_zero():
    assert parse_non_zero("0x0800") == 0x0800
    with pytest.raises(FormatError, match="a non-zero value"):
        parse_non_zero("0x0")


def test_optional_non_zero():
    assert parse_optional_non_zero(None) is None
    assert parse_optional_non_zero("0x0200") == 0x0200
    with pytest.raises(FormatError, match="a non-zero value"):
        parse_optional_non_zero(0)


def test_uint_to_json_round_trip():
    value = 0x0DE0B6B3A7640000
    assert parse_uint(uint_to_json(value)) == value
    assert uint_to_json(10) == "10"
    with pytest.raises(FormatError):
        uint_to_json(-1)


def test_low_u64():
    assert low_u64(0x0DE0B6B3A7640000) == 0x0DE0B6B3A7640000
    assert low_u64((1 << 64) + 5) == 5


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0x1234", b"\x12\x34"),
        ("1234", b"\x12\x34"),
        ("0x", b""),
        ("", b""),
        ("0xabc", b"\x0a\xbc"),
    ],
)
def test_parse_bytes(text, expected):
    assert parse_bytes(text) == expected


@pytest.mark.parametrize("bad", ["0xzz", "123", 5])
def test_parse_bytes_invalid(bad):
    with pytest.raises(FormatError):
        parse_bytes(bad)


def test_parse_hash():
    assert parse_hash("0x", 32) == bytes(32)
    assert parse_hash("", 8) == bytes(8)
    nonce = parse_hash("0x00006d6f7264656e", 8)
    assert nonce == bytes.fromhex("00006d6f7264656e")
    with pytest.raises(FormatError):
        parse_hash("0x1234", 32)


def test_parse_address():
    text = "2adc25665018aa1fe0e6bc666dac8fc2697ff9ba"
    assert parse_address(text) == bytes.fromhex(text)
    assert parse_address("0x" + text) == bytes.fromhex(text)
    with pytest.raises(FormatError):
        parse_address("0x12")