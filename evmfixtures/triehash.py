"""RLP encoding and Keccak-flavoured Merkle Patricia trie roots."""

from __future__ import annotations

from itertools import groupby
from typing import Iterable, Union

from .keccak import keccak256

RlpItem = Union[bytes, list]


def _as_bytes(value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected bytes-like value, got {type(value).__name__}")


def _length_prefix(length: int, offset: int) -> bytes:
    if length < 56:
        return bytes([offset + length])
    encoded = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([offset + 55 + len(encoded)]) + encoded


def rlp_encode(item) -> bytes:
    """RLP-encode bytes, non-negative integers and (nested) lists of them."""
    if isinstance(item, bool):
        raise TypeError("cannot RLP-encode a boolean")
    if isinstance(item, int):
        if item < 0:
            raise ValueError("cannot RLP-encode a negative integer")
        item = item.to_bytes((item.bit_length() + 7) // 8, "big")
    if isinstance(item, (bytes, bytearray, memoryview)):
        data = bytes(item)
        if len(data) == 1 and data[0] < 0x80:
            return data
        return _length_prefix(len(data), 0x80) + data
    if isinstance(item, (list, tuple)):
        payload = b"".join(rlp_encode(element) for element in item)
        return _length_prefix(len(payload), 0xC0) + payload
    raise TypeError(f"cannot RLP-encode {type(item).__name__}")


def _read_length(data: bytes, pos: int, size: int, limit: int) -> int:
    if pos + size > limit:
        raise ValueError("RLP length prefix runs past the end of the input")
    if data[pos] == 0:
        raise ValueError("RLP length prefix has a leading zero")
    length = int.from_bytes(data[pos:pos + size], "big")
    if length < 56:
        raise ValueError("RLP long form used for a short payload")
    return length


def _decode(data: bytes, pos: int, limit: int) -> tuple[RlpItem, int]:
    if pos >= limit:
        raise ValueError("unexpected end of RLP input")
    prefix = data[pos]
    if prefix < 0x80:
        return data[pos:pos + 1], pos + 1
    if prefix <= 0xBF:
        if prefix <= 0xB7:
            start, length = pos + 1, prefix - 0x80
        else:
            size = prefix - 0xB7
            length = _read_length(data, pos + 1, size, limit)
            start = pos + 1 + size
        end = start + length
        if end > limit:
            raise ValueError("RLP string runs past the end of the input")
        if length == 1 and data[start] < 0x80:
            raise ValueError("single byte below 0x80 must not carry a prefix")
        return data[start:end], end
    if prefix <= 0xF7:
        start, length = pos + 1, prefix - 0xC0
    else:
        size = prefix - 0xF7
        length = _read_length(data, pos + 1, size, limit)
        start = pos + 1 + size
    end = start + length
    if end > limit:
        raise ValueError("RLP list runs past the end of the input")
    items = []
    cursor = start
    while cursor < end:
        element, cursor = _decode(data, cursor, end)
        items.append(element)
    return items, end


def rlp_decode(data) -> RlpItem:
    """Decode one canonical RLP item into bytes or a nested list of bytes."""
    raw = _as_bytes(data)
    item, end = _decode(raw, 0, len(raw))
    if end != len(raw):
        raise ValueError("trailing bytes after RLP item")
    return item


def _nibbles(key: bytes) -> tuple[int, ...]:
    return tuple(n for byte in key for n in (byte >> 4, byte & 0x0F))


def _hex_prefix(nibbles: tuple[int, ...], leaf: bool) -> bytes:
    flag = 2 if leaf else 0
    if len(nibbles) % 2:
        first = ((flag + 1) << 4) | nibbles[0]
        rest = nibbles[1:]
    else:
        first = flag << 4
        rest = nibbles
    packed = bytes((hi << 4) | lo for hi, lo in zip(rest[0::2], rest[1::2]))
    return bytes([first]) + packed


def _shared_prefix_length(items: list, depth: int) -> int:
    first = items[0][0]
    length = len(first) - depth
    for key, _ in items[1:]:
        length = min(length, len(key) - depth)
        for offset in range(length):
            if key[depth + offset] != first[depth + offset]:
                length = offset
                break
    return length


def _reference(node: list):
    encoded = rlp_encode(node)
    return node if len(encoded) < 32 else keccak256(encoded)


def _build(items: list, depth: int) -> list:
    if len(items) == 1:
        key, value = items[0]
        return [_hex_prefix(key[depth:], True), value]

    shared = _shared_prefix_length(items, depth)
    if shared:
        path = items[0][0][depth:depth + shared]
        return [_hex_prefix(path, False), _reference(_build(items, depth + shared))]

    branch_value = b""
    if len(items[0][0]) == depth:
        branch_value = items[0][1]
        items = items[1:]
    children: list = [b""] * 16
    for nibble, group in groupby(items, key=lambda item: item[0][depth]):
        children[nibble] = _reference(_build(list(group), depth + 1))
    return children + [branch_value]


def trie_root(items: Iterable) -> bytes:
    """Root hash of a trie holding the given (key, value) pairs.

    When a key repeats, the last value given for it wins.
    """
    entries = {_as_bytes(key): _as_bytes(value) for key, value in items}
    if not entries:
        return keccak256(rlp_encode(b""))
    nodes = sorted((_nibbles(key), value) for key, value in entries.items())
    return keccak256(rlp_encode(_build(nodes, 0)))


def sec_trie_root(items: Iterable) -> bytes:
    """Root hash of a secure trie: every key is replaced by its Keccak-256 hash."""
    return trie_root((keccak256(_as_bytes(key)), value) for key, value in items)


def ordered_trie_root(values: Iterable) -> bytes:
    """Root hash of a trie keyed by the RLP encoding of each value's position."""
    return trie_root((rlp_encode(index), value) for index, value in enumerate(values))