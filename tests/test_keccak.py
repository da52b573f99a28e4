import pytest

from evmfixtures.keccak import keccak256


def test_empty_input():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_empty_rlp_string_hash():
    assert keccak256(b"\x80").hex() == (
        "56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
    )


def test_empty_rlp_list_hash():
    assert keccak256(b"\xc0").hex() == (
        "1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
    )


def test_digest_length():
    assert len(keccak256(b"cake" * 100)) == 32


def test_bytes_like_inputs_agree():
    data = b"\x01\x02\x03"
    assert keccak256(bytearray(data)) == keccak256(data)
    assert keccak256(memoryview(data)) == keccak256(data)


def test_different_inputs_differ():
    assert keccak256(b"pie") != keccak256(b"candy")


def test_str_rejected():
    with pytest.raises(TypeError):
        keccak256("cake")