"""Blockchain test fixtures: headers, blocks and whole chains with their states."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import IO, Any, Callable

from .accounts import State
from .fixtures import load_tests
from .txtest import ForkSpec
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


def _list_of(parse: Callable[[Any], Any], what: str) -> Callable[[Any], list]:
    def parse_list(value: Any) -> list:
        if not isinstance(value, list):
            raise FormatError(f"invalid type: {type(value).__name__}, expected a list of {what}")
        return [parse(item) for item in value]

    return parse_list


def _h256(value: Any) -> bytes:
    return parse_hash(value, 32)


def _h64(value: Any) -> bytes:
    return parse_hash(value, 8)


def _bloom(value: Any) -> bytes:
    return parse_hash(value, 256)


def _raw_transaction(value: Any) -> dict:
    return _object(value, "transaction")


class SealEngine(enum.Enum):
    """The seal engine a blockchain test runs with."""

    Ethash = "Ethash"
    NoProof = "NoProof"

    @classmethod
    def parse(cls, name: Any) -> "SealEngine":
        """Look an engine up by its fixture name."""
        if not isinstance(name, str) or name not in cls.__members__:
            raise FormatError(f"unknown variant `{name}`, expected `Ethash` or `NoProof`")
        return cls[name]


@dataclass(frozen=True)
class EthereumSeal:
    """Proof-of-work seal: nonce and mix hash."""

    nonce: bytes
    mix_hash: bytes


@dataclass(frozen=True)
class Genesis:
    """A genesis block description compatible with chain specs."""

    seal: EthereumSeal
    difficulty: int
    gas_limit: int
    author: bytes | None = None
    timestamp: int | None = None
    parent_hash: bytes | None = None
    transactions_root: bytes | None = None
    receipts_root: bytes | None = None
    state_root: bytes | None = None
    gas_used: int | None = None
    extra_data: bytes | None = None


@dataclass(frozen=True)
class Header:
    """A block header from a blockchain test."""

    bloom: bytes
    author: bytes
    difficulty: int
    extra_data: bytes
    gas_limit: int
    gas_used: int
    hash: bytes
    mix_hash: bytes
    nonce: bytes
    number: int
    parent_hash: bytes
    receipts_root: bytes
    state_root: bytes
    timestamp: int
    transactions_root: bytes
    uncles_hash: bytes

    @classmethod
    def from_json(cls, data: Any) -> "Header":
        data = _object(data, "header")
        what = "header"
        return cls(
            bloom=_required(data, "bloom", what, _bloom),
            author=_required(data, "coinbase", what, parse_address),
            difficulty=_required(data, "difficulty", what, parse_uint),
            extra_data=_required(data, "extraData", what, parse_bytes),
            gas_limit=_required(data, "gasLimit", what, parse_uint),
            gas_used=_required(data, "gasUsed", what, parse_uint),
            hash=_required(data, "hash", what, _h256),
            mix_hash=_required(data, "mixHash", what, _h256),
            nonce=_required(data, "nonce", what, _h64),
            number=_required(data, "number", what, parse_uint),
            parent_hash=_required(data, "parentHash", what, _h256),
            receipts_root=_required(data, "receiptTrie", what, _h256),
            state_root=_required(data, "stateRoot", what, _h256),
            timestamp=_required(data, "timestamp", what, parse_uint),
            transactions_root=_required(data, "transactionsTrie", what, _h256),
            uncles_hash=_required(data, "uncleHash", what, _h256),
        )


@dataclass(frozen=True)
class Block:
    """A block from a blockchain test; transactions are kept as raw JSON objects."""

    rlp: bytes
    header: Header | None = None
    transactions: list[dict] | None = None
    uncles: list[Header] | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Block":
        data = _object(data, "block")
        return cls(
            rlp=_required(data, "rlp", "block", parse_bytes),
            header=_optional(data, "blockHeader", Header.from_json),
            transactions=_optional(data, "transactions", _list_of(_raw_transaction, "transactions")),
            uncles=_optional(data, "uncleHeaders", _list_of(Header.from_json, "headers")),
        )

    def rlp_bytes(self) -> bytes:
        """The block's RLP encoding."""
        return self.rlp


@dataclass(frozen=True)
class BlockChain:
    """A blockchain test: genesis, blocks, and the states before and after."""

    genesis_block: Header
    blocks: list[Block]
    pre_state: State
    best_block: bytes
    network: ForkSpec
    genesis_rlp: bytes | None = None
    post_state: State | None = None
    engine: SealEngine = SealEngine.Ethash
    extra: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: Any) -> "BlockChain":
        data = _object(data, "blockchain test")
        what = "blockchain test"
        engine = SealEngine.parse(data["sealEngine"]) if "sealEngine" in data else SealEngine.Ethash
        return cls(
            genesis_block=_required(data, "genesisBlockHeader", what, Header.from_json),
            blocks=_required(data, "blocks", what, _list_of(Block.from_json, "blocks")),
            pre_state=_required(data, "pre", what, State.from_json),
            best_block=_required(data, "lastblockhash", what, _h256),
            network=_required(data, "network", what, ForkSpec.parse),
            genesis_rlp=_optional(data, "genesisRLP", parse_bytes),
            post_state=_optional(data, "postState", State.from_json),
            engine=engine,
        )

    def blocks_rlp(self) -> list[bytes]:
        """The RLP encoding of every block, in order."""
        return [block.rlp_bytes() for block in self.blocks]

    def genesis(self) -> Genesis:
        """A spec-compatible genesis built from the genesis block header."""
        header = self.genesis_block
        return Genesis(
            seal=EthereumSeal(nonce=header.nonce, mix_hash=header.mix_hash),
            difficulty=header.difficulty,
            gas_limit=header.gas_limit,
            author=header.author,
            timestamp=header.timestamp,
            parent_hash=header.parent_hash,
            transactions_root=header.transactions_root,
            receipts_root=header.receipts_root,
            state_root=header.state_root,
            gas_used=header.gas_used,
            extra_data=header.extra_data,
        )


def load_blockchain_tests(fp: IO[str]) -> dict[str, BlockChain]:
    """Read a file of named blockchain tests."""
    return load_tests(fp, BlockChain.from_json)