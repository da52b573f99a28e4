"""In-memory account state and its Merkle Patricia state root."""

from __future__ import annotations

from dataclasses import dataclass, field

from .accounts import Account, State
from .keccak import keccak256
from .triehash import rlp_decode, rlp_encode, sec_trie_root
from .values import U256_MAX, FormatError


class StateMismatchError(AssertionError):
    """Raised when a computed state does not match the expected one."""

    def __init__(self, message: str, expected=None, actual=None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class MemoryAccount:
    """An account as held by an in-memory backend."""

    nonce: int
    balance: int
    storage: dict[bytes, bytes] = field(default_factory=dict)
    code: bytes = b""


def u256_to_h256(value: int) -> bytes:
    """Big-endian 32-byte form of a 256-bit unsigned integer."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U256_MAX:
        raise FormatError(f"not a 256-bit unsigned integer: {value!r}")
    return value.to_bytes(32, "big")


def unwrap_to_account(account: Account) -> MemoryAccount:
    """Turn a fixture account into a memory account; zero storage values are dropped."""
    for name in ("balance", "nonce", "code", "storage"):
        if getattr(account, name) is None:
            raise FormatError(f"account has no {name}")
    return MemoryAccount(
        nonce=account.nonce,
        balance=account.balance,
        storage={
            u256_to_h256(key): u256_to_h256(value)
            for key, value in account.storage.items()
            if value != 0
        },
        code=account.code,
    )


def unwrap_to_state(state: State) -> dict[bytes, MemoryAccount]:
    """Turn a fixture account map into memory accounts keyed by address."""
    if state.accounts is None:
        raise FormatError("Hash can not be converted.")
    return {address: unwrap_to_account(account) for address, account in state}


def _decode_uint(item) -> int:
    if not isinstance(item, bytes):
        raise ValueError("expected an RLP string for an integer")
    if len(item) > 32:
        raise ValueError("RLP integer is longer than 32 bytes")
    if item[:1] == b"\x00":
        raise ValueError("RLP integer has a leading zero")
    return int.from_bytes(item, "big")


def _decode_h256(item) -> bytes:
    if not isinstance(item, bytes) or len(item) != 32:
        raise ValueError("expected a 32-byte RLP string for a hash")
    return item


@dataclass(frozen=True)
class TrieAccount:
    """An account as stored in the state trie."""

    nonce: int
    balance: int
    storage_root: bytes
    code_hash: bytes
    code_version: int = 0

    def encode(self) -> bytes:
        """RLP encoding; the code version is left out when it is zero."""
        fields = [self.nonce, self.balance, self.storage_root, self.code_hash]
        if self.code_version != 0:
            fields.append(self.code_version)
        return rlp_encode(fields)

    @classmethod
    def decode(cls, data: bytes) -> "TrieAccount":
        item = rlp_decode(data)
        if not isinstance(item, list) or len(item) not in (4, 5):
            raise ValueError("RlpIncorrectListLen")
        return cls(
            nonce=_decode_uint(item[0]),
            balance=_decode_uint(item[1]),
            storage_root=_decode_h256(item[2]),
            code_hash=_decode_h256(item[3]),
            code_version=_decode_uint(item[4]) if len(item) == 5 else 0,
        )


def _trie_account(account: MemoryAccount) -> TrieAccount:
    storage_root = sec_trie_root(
        (key, rlp_encode(int.from_bytes(value, "big"))) for key, value in account.storage.items()
    )
    return TrieAccount(
        nonce=account.nonce,
        balance=account.balance,
        storage_root=storage_root,
        code_hash=keccak256(account.code),
    )


def state_root(accounts: dict[bytes, MemoryAccount]) -> bytes:
    """Secure-trie root of the given accounts."""
    return sec_trie_root(
        (address, _trie_account(account).encode()) for address, account in accounts.items()
    )


def assert_valid_hash(expected: bytes, accounts: dict[bytes, MemoryAccount]) -> None:
    """Raise StateMismatchError unless the accounts hash to ``expected``."""
    root = state_root(accounts)
    if root != expected:
        raise StateMismatchError(
            f"Hash not equal; calculated: 0x{root.hex()}, expect: 0x{bytes(expected).hex()}\n"
            f"State: {accounts!r}",
            expected=expected,
            actual=root,
        )


def assert_valid_state(state: State, accounts: dict[bytes, MemoryAccount]) -> None:
    """Raise StateMismatchError unless the accounts match the expected fixture state."""
    if state.accounts is None:
        assert_valid_hash(state.root, accounts)
        return
    expected = unwrap_to_state(state)
    if expected != accounts:
        raise StateMismatchError(
            f"State not equal; expected: {expected!r}, actual: {accounts!r}",
            expected=expected,
            actual=accounts,
        )