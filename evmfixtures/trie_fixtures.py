"""Trie test fixtures: key/value inputs and the root hash they should produce."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any

from .fixtures import load_tests
from .values import FormatError, parse_bytes, parse_hash


def _decode_text(value: Any, what: str) -> bytes:
    """Hex when ``0x``-prefixed, otherwise the raw UTF-8 bytes of the text."""
    if not isinstance(value, str):
        raise FormatError(f"invalid type: {type(value).__name__}, expected a string {what}")
    if value.startswith("0x"):
        return parse_bytes(value)
    return value.encode("utf-8")


def _decode_value(value: Any) -> bytes | None:
    return None if value is None else _decode_text(value, "value")


@dataclass(frozen=True)
class Input:
    """Trie test input: keys mapped to values, where a value of None removes the key."""

    data: dict[bytes, bytes | None] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> "Input":
        """Decode an input given as an object or as a list of ``[key, value]`` pairs."""
        result: dict[bytes, bytes | None] = {}
        if isinstance(data, dict):
            for key, value in data.items():
                result[_decode_text(key, "key")] = _decode_value(value)
        elif isinstance(data, list):
            for pair in data:
                if not isinstance(pair, list):
                    raise FormatError(
                        f"invalid type: {type(pair).__name__}, expected a key value pair"
                    )
                if len(pair) != 2:
                    raise FormatError("Invalid key value pair.")
                key, value = pair
                if key is None:
                    break
                result[_decode_text(key, "key")] = _decode_value(value)
        else:
            raise FormatError(
                f"invalid type: {type(data).__name__}, expected a map of bytes into bytes"
            )
        return cls(data=dict(sorted(result.items())))


@dataclass(frozen=True)
class Trie:
    """A trie test: its input and the expected root hash."""

    input: Input
    root: bytes

    @classmethod
    def from_json(cls, data: Any) -> "Trie":
        if not isinstance(data, dict):
            raise FormatError(f"invalid type: {type(data).__name__}, expected trie test object")
        for key in ("in", "root"):
            if key not in data:
                raise FormatError(f"missing field `{key}` in trie test")
        return cls(input=Input.from_json(data["in"]), root=parse_hash(data["root"], 32))


def load_trie_tests(fp: IO[str]) -> dict[str, Trie]:
    """Read a file of named trie tests."""
    return load_tests(fp, Trie.from_json)