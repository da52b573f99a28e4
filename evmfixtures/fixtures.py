"""Loading collections of named test fixtures, skip lists and difficulty tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import IO, Any, Callable, TypeVar

from .values import FormatError, parse_hash, parse_uint
from .vm import Vm

T = TypeVar("T")


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise FormatError(f"invalid type: {type(data).__name__}, expected {what} object")
    return data


def _required(data: dict, key: str, what: str) -> Any:
    if key not in data:
        raise FormatError(f"missing field `{key}` in {what}")
    return data[key]


def _string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise FormatError(f"invalid value for `{key}`: {value!r}, expected a string")
    return value


def _list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise FormatError(f"invalid value for `{key}`: {value!r}, expected a list")
    return value


def load_tests(fp: IO[str], parse: Callable[[Any], T]) -> dict[str, T]:
    """Read a JSON object of named tests, parse each one, and return them sorted by name."""
    data = _object(json.load(fp), "test collection")
    return {name: parse(data[name]) for name in sorted(data)}


def load_vm_tests(fp: IO[str]) -> dict[str, Vm]:
    """Read a file of named VM tests."""
    return load_tests(fp, Vm.from_json)


@dataclass
class StateSkipSubStates:
    """State subtests to skip: their numbers (or ``*`` for all) on one chain."""

    subnumbers: list[str]
    chain: str


@dataclass
class SkipBlockchainTest:
    """A blockchain test to skip while an issue is open."""

    reference: str
    failing: str
    subtests: list[str]


@dataclass
class SkipStateTest:
    """A state test to skip while an issue is open."""

    reference: str
    failing: str
    subtests: dict[str, StateSkipSubStates]


def _sub_states(data: Any) -> StateSkipSubStates:
    data = _object(data, "skipped subtest")
    what = "skipped subtest"
    return StateSkipSubStates(
        subnumbers=[_string(item, "subnumbers") for item in _list(_required(data, "subnumbers", what), "subnumbers")],
        chain=_string(_required(data, "chain", what), "chain"),
    )


def _blockchain_skip(data: Any) -> SkipBlockchainTest:
    data = _object(data, "skipped block test")
    what = "skipped block test"
    return SkipBlockchainTest(
        reference=_string(_required(data, "reference", what), "reference"),
        failing=_string(_required(data, "failing", what), "failing"),
        subtests=[_string(item, "subtests") for item in _list(_required(data, "subtests", what), "subtests")],
    )


def _state_skip(data: Any) -> SkipStateTest:
    data = _object(data, "skipped state test")
    what = "skipped state test"
    subtests = _object(_required(data, "subtests", what), "subtests")
    return SkipStateTest(
        reference=_string(_required(data, "reference", what), "reference"),
        failing=_string(_required(data, "failing", what), "failing"),
        subtests={name: _sub_states(subtests[name]) for name in sorted(subtests)},
    )


@dataclass
class SkipTests:
    """Tests to skip, grouped by kind."""

    block: list[SkipBlockchainTest] = field(default_factory=list)
    state: list[SkipStateTest] = field(default_factory=list)
    legacy_block: list[SkipBlockchainTest] = field(default_factory=list)
    legacy_state: list[SkipStateTest] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "SkipTests":
        data = _object(data, "skip list")
        what = "skip list"

        def entries(key: str, parse: Callable[[Any], Any]) -> list:
            return [parse(item) for item in _list(_required(data, key, what), key)]

        return cls(
            block=entries("block", _blockchain_skip),
            state=entries("state", _state_skip),
            legacy_block=entries("legacy_block", _blockchain_skip),
            legacy_state=entries("legacy_state", _state_skip),
        )

    @classmethod
    def empty(cls) -> "SkipTests":
        """A skip list that skips nothing."""
        return cls()

    @classmethod
    def load(cls, fp: IO[str]) -> "SkipTests":
        """Read a skip list from a JSON file."""
        return cls.from_json(json.load(fp))


@dataclass(frozen=True)
class DifficultyTestCase:
    """A difficulty calculation test case."""

    parent_timestamp: int
    parent_difficulty: int
    parent_uncles: bytes
    current_timestamp: int
    current_difficulty: int
    current_block_number: int

    @classmethod
    def from_json(cls, data: Any) -> "DifficultyTestCase":
        data = _object(data, "difficulty test")
        what = "difficulty test"
        return cls(
            parent_timestamp=parse_uint(_required(data, "parentTimestamp", what)),
            parent_difficulty=parse_uint(_required(data, "parentDifficulty", what)),
            parent_uncles=parse_hash(_required(data, "parentUncles", what), 32),
            current_timestamp=parse_uint(_required(data, "currentTimestamp", what)),
            current_difficulty=parse_uint(_required(data, "currentDifficulty", what)),
            current_block_number=parse_uint(_required(data, "currentBlockNumber", what)),
        )


def load_difficulty_tests(fp: IO[str]) -> dict[str, DifficultyTestCase]:
    """Read a file of named difficulty tests."""
    return load_tests(fp, DifficultyTestCase.from_json)