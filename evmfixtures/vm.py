"""VM test fixtures: the environment and transaction a test runs, and what it expects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .accounts import State
from .values import FormatError, parse_address, parse_bytes, parse_hash, parse_uint


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise FormatError(f"invalid type: {type(data).__name__}, expected {what} object")
    return data


def _required(data: dict, key: str, what: str, parse: Callable[[Any], Any]) -> Any:
    if key not in data:
        raise FormatError(f"missing field `{key}` in {what}")
    return parse(data[key])


def _optional(data: dict, key: str, parse: Callable[[Any], Any]) -> Any:
    value = data.get(key)
    return None if value is None else parse(value)


def _defaulted(data: dict, key: str, parse: Callable[[Any], Any], default: Any) -> Any:
    if key not in data:
        return default
    return parse(data[key])


def _maybe_address(value: Any) -> bytes | None:
    """An address that may be given as the empty string, meaning no address."""
    if value == "":
        return None
    return parse_address(value)


@dataclass(frozen=True)
class Call:
    """A contract call or creation made during execution."""

    data: bytes
    destination: bytes | None
    gas_limit: int
    value: int

    @classmethod
    def from_json(cls, data: Any) -> "Call":
        data = _object(data, "call")
        return cls(
            data=_required(data, "data", "call", parse_bytes),
            destination=_required(data, "destination", "call", _maybe_address),
            gas_limit=_required(data, "gasLimit", "call", parse_uint),
            value=_required(data, "value", "call", parse_uint),
        )


@dataclass(frozen=True)
class Transaction:
    """The transaction a VM test executes."""

    address: bytes
    sender: bytes
    code: bytes
    data: bytes
    gas: int
    gas_price: int
    origin: bytes
    value: int
    code_version: int = 0

    @classmethod
    def from_json(cls, data: Any) -> "Transaction":
        data = _object(data, "exec")
        what = "exec"
        return cls(
            address=_required(data, "address", what, parse_address),
            sender=_required(data, "caller", what, parse_address),
            code=_required(data, "code", what, parse_bytes),
            data=_required(data, "data", what, parse_bytes),
            gas=_required(data, "gas", what, parse_uint),
            gas_price=_required(data, "gasPrice", what, parse_uint),
            origin=_required(data, "origin", what, parse_address),
            value=_required(data, "value", what, parse_uint),
            code_version=_defaulted(data, "codeVersion", parse_uint, 0),
        )


@dataclass(frozen=True)
class Env:
    """The block environment of a VM test."""

    author: bytes
    difficulty: int
    gas_limit: int
    number: int
    timestamp: int
    block_base_fee_per_gas: int = 0

    @classmethod
    def from_json(cls, data: Any) -> "Env":
        data = _object(data, "env")
        what = "env"
        return cls(
            author=_required(data, "currentCoinbase", what, parse_address),
            difficulty=_required(data, "currentDifficulty", what, parse_uint),
            gas_limit=_required(data, "currentGasLimit", what, parse_uint),
            number=_required(data, "currentNumber", what, parse_uint),
            timestamp=_required(data, "currentTimestamp", what, parse_uint),
            block_base_fee_per_gas=_defaulted(data, "currentBaseFee", parse_uint, 0),
        )


def _calls(value: Any) -> list[Call]:
    if not isinstance(value, list):
        raise FormatError(f"invalid type: {type(value).__name__}, expected a list of calls")
    return [Call.from_json(item) for item in value]


@dataclass(frozen=True)
class Vm:
    """A VM test: the state before and the expected results after execution."""

    env: Env
    transaction: Transaction
    pre_state: State
    calls: list[Call] | None = None
    gas_left: int | None = None
    logs: bytes | None = None
    output: bytes | None = None
    post_state: State | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Vm":
        data = _object(data, "vm test")
        what = "vm test"
        return cls(
            env=_required(data, "env", what, Env.from_json),
            transaction=_required(data, "exec", what, Transaction.from_json),
            pre_state=_required(data, "pre", what, State.from_json),
            calls=_optional(data, "callcreates", _calls),
            gas_left=_optional(data, "gas", parse_uint),
            logs=_optional(data, "logs", lambda value: parse_hash(value, 32)),
            output=_optional(data, "out", parse_bytes),
            post_state=_optional(data, "post", State.from_json),
        )

    def out_of_gas(self) -> bool:
        """True if the transaction ran out of gas."""
        return self.calls is None