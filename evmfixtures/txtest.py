"""Transaction test fixtures: an RLP-encoded transaction and its expected result per fork."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import IO, Any

from .fixtures import load_tests
from .values import FormatError, parse_address, parse_bytes, parse_hash


class ForkSpec(enum.IntEnum):
    """Fork names used in fixtures, ordered as they are declared."""

    EIP150 = 1
    EIP158 = 2
    Frontier = 3
    Homestead = 4
    Byzantium = 5
    Constantinople = 6
    ConstantinopleFix = 7
    Istanbul = 8
    Berlin = 9
    London = 10
    EIP158ToByzantiumAt5 = 11
    FrontierToHomesteadAt5 = 12
    HomesteadToDaoAt5 = 13
    HomesteadToEIP150At5 = 14
    ByzantiumToConstantinopleFixAt5 = 15
    ConstantinopleFixToIstanbulAt5 = 16

    @classmethod
    def parse(cls, name: Any) -> "ForkSpec":
        """Look a fork up by its fixture name."""
        if not isinstance(name, str) or name not in cls.__members__:
            raise FormatError(f"unknown variant `{name}`, expected a fork name")
        return cls[name]


@dataclass(frozen=True)
class PostState:
    """The expected sender and hash of a transaction under one fork."""

    sender: bytes | None = None
    hash: bytes | None = None

    @classmethod
    def from_json(cls, data: Any) -> "PostState":
        if not isinstance(data, dict):
            raise FormatError(f"invalid type: {type(data).__name__}, expected post state object")
        for key in data:
            if key not in ("sender", "hash"):
                raise FormatError(f"unknown field `{key}`, expected `sender` or `hash`")
        sender = data.get("sender")
        tx_hash = data.get("hash")
        return cls(
            sender=None if sender is None else parse_address(sender),
            hash=None if tx_hash is None else parse_hash(tx_hash, 32),
        )


@dataclass(frozen=True)
class TransactionTest:
    """A transaction test: the raw transaction and the expected outcome per fork."""

    rlp: bytes
    post_state: dict[ForkSpec, PostState] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> "TransactionTest":
        if not isinstance(data, dict):
            raise FormatError(
                f"invalid type: {type(data).__name__}, expected transaction test object"
            )
        for key in ("rlp", "_info"):
            if key not in data:
                raise FormatError(f"missing field `{key}` in transaction test")
        post_state = {
            ForkSpec.parse(name): PostState.from_json(value)
            for name, value in data.items()
            if name not in ("rlp", "_info")
        }
        return cls(rlp=parse_bytes(data["rlp"]), post_state=dict(sorted(post_state.items())))


def load_transaction_tests(fp: IO[str]) -> dict[str, TransactionTest]:
    """Read a file of named transaction tests."""
    return load_tests(fp, TransactionTest.from_json)