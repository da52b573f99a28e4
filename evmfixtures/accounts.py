"""Spec accounts, builtin contract pricing and account-state maps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Union

from .values import FormatError, low_u64, parse_address, parse_bytes, parse_hash, parse_uint

_U64_MAX = (1 << 64) - 1


def _expect_object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise FormatError(f"invalid type: {type(data).__name__}, expected {what} object")
    return data


def _check_fields(data: dict, allowed: tuple[str, ...], what: str) -> None:
    unknown = [key for key in data if key not in allowed]
    if unknown:
        raise FormatError(
            f"unknown field `{unknown[0]}` in {what}, expected one of {', '.join(allowed)}"
        )


def _require(data: dict, key: str, what: str) -> Any:
    if key not in data:
        raise FormatError(f"missing field `{key}` in {what}")
    return data[key]


def _u64(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise FormatError(f"invalid value for `{key}`: {value!r}, expected u64")
    return value


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise FormatError(f"invalid value for `{key}`: {value!r}, expected a boolean")
    return value


@dataclass(frozen=True)
class Linear:
    """Linear pricing: a base price plus a price per word."""

    base: int
    word: int


@dataclass(frozen=True)
class Modexp:
    """Pricing for modular exponentiation."""

    divisor: int
    is_eip_2565: bool


@dataclass(frozen=True)
class AltBn128ConstOperations:
    """Pricing for constant alt_bn128 operations (ECADD and ECMUL)."""

    price: int


@dataclass(frozen=True)
class AltBn128Pairing:
    """Pricing for alt_bn128 pairing."""

    base: int
    pair: int


@dataclass(frozen=True)
class Bls12Pairing:
    """Pricing for the bls12_381 pairing operation."""

    base: int
    pair: int


@dataclass(frozen=True)
class Bls12ConstOperations:
    """Pricing for constant-price bls12_381 operations."""

    price: int


@dataclass(frozen=True)
class Bls12G1Multiexp:
    """Pricing for bls12_381 multiexp in G1."""

    base: int


@dataclass(frozen=True)
class Bls12G2Multiexp:
    """Pricing for bls12_381 multiexp in G2."""

    base: int


@dataclass(frozen=True)
class Blake2F:
    """Pricing for the Blake2 compression function: a price per round."""

    gas_per_round: int


Pricing = Union[
    Blake2F,
    Linear,
    Modexp,
    AltBn128Pairing,
    AltBn128ConstOperations,
    Bls12ConstOperations,
    Bls12Pairing,
    Bls12G1Multiexp,
    Bls12G2Multiexp,
]

_PRICING: dict[str, tuple[type, dict[str, Callable[[Any, str], Any]]]] = {
    "blake2_f": (Blake2F, {"gas_per_round": _u64}),
    "linear": (Linear, {"base": _u64, "word": _u64}),
    "modexp": (Modexp, {"divisor": _u64, "is_eip_2565": _bool}),
    "alt_bn128_pairing": (AltBn128Pairing, {"base": _u64, "pair": _u64}),
    "alt_bn128_const_operations": (AltBn128ConstOperations, {"price": _u64}),
    "bls12_const_operations": (Bls12ConstOperations, {"price": _u64}),
    "bls12_pairing": (Bls12Pairing, {"base": _u64, "pair": _u64}),
    "bls12_g1_multiexp": (Bls12G1Multiexp, {"base": _u64}),
    "bls12_g2_multiexp": (Bls12G2Multiexp, {"base": _u64}),
}


def parse_pricing(data: Any) -> Pricing:
    """Decode a pricing object such as ``{"linear": {"base": 3000, "word": 0}}``."""
    data = _expect_object(data, "pricing")
    if len(data) != 1:
        raise FormatError(f"invalid pricing: expected exactly one variant, got {len(data)}")
    (tag, body), = data.items()
    if tag not in _PRICING:
        raise FormatError(f"unknown variant `{tag}`, expected one of {', '.join(_PRICING)}")
    cls, fields = _PRICING[tag]
    body = _expect_object(body, tag)
    _check_fields(body, tuple(fields), tag)
    return cls(**{key: convert(_require(body, key, tag), key) for key, convert in fields.items()})


@dataclass(frozen=True)
class PricingAt:
    """A builtin price together with an optional description of its activation."""

    info: str | None
    price: Pricing

    @classmethod
    def from_json(cls, data: Any) -> "PricingAt":
        data = _expect_object(data, "pricing entry")
        _check_fields(data, ("info", "price"), "pricing entry")
        info = data.get("info")
        if info is not None and not isinstance(info, str):
            raise FormatError(f"invalid value for `info`: {info!r}, expected a string")
        return cls(info=info, price=parse_pricing(_require(data, "price", "pricing entry")))


@dataclass(frozen=True)
class BuiltinCompat:
    """A builtin as written in specs: a single pricing or a map of activation blocks."""

    name: str
    pricing: Pricing | dict[int, PricingAt]
    activate_at: int | None = None

    @classmethod
    def from_json(cls, data: Any) -> "BuiltinCompat":
        data = _expect_object(data, "builtin")
        _check_fields(data, ("name", "pricing", "activate_at"), "builtin")
        name = _require(data, "name", "builtin")
        if not isinstance(name, str):
            raise FormatError(f"invalid value for `name`: {name!r}, expected a string")
        activate_at = data.get("activate_at")
        return cls(
            name=name,
            pricing=_parse_pricing_compat(_require(data, "pricing", "builtin")),
            activate_at=None if activate_at is None else parse_uint(activate_at),
        )


def _parse_pricing_compat(data: Any) -> Pricing | dict[int, PricingAt]:
    try:
        return parse_pricing(data)
    except FormatError:
        pass
    try:
        entries = _expect_object(data, "pricing map")
        return dict(
            sorted((parse_uint(key), PricingAt.from_json(value)) for key, value in entries.items())
        )
    except FormatError:
        raise FormatError("data did not match any variant of untagged enum PricingCompat") from None


@dataclass(frozen=True)
class Builtin:
    """A builtin contract with its prices keyed by activation block."""

    name: str
    pricing: dict[int, PricingAt] = field(default_factory=dict)

    @classmethod
    def from_compat(cls, compat: BuiltinCompat) -> "Builtin":
        if isinstance(compat.pricing, dict):
            pricing = dict(sorted((low_u64(block), at) for block, at in compat.pricing.items()))
        else:
            block = low_u64(compat.activate_at or 0)
            pricing = {block: PricingAt(info=None, price=compat.pricing)}
        return cls(name=compat.name, pricing=pricing)

    @classmethod
    def from_json(cls, data: Any) -> "Builtin":
        return cls.from_compat(BuiltinCompat.from_json(data))


_ACCOUNT_FIELDS = ("builtin", "balance", "nonce", "code", "version", "storage", "constructor")


@dataclass(frozen=True)
class Account:
    """A spec account; every part of it is optional."""

    builtin: BuiltinCompat | None = None
    balance: int | None = None
    nonce: int | None = None
    code: bytes | None = None
    version: int | None = None
    storage: dict[int, int] | None = None
    constructor: bytes | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Account":
        data = _expect_object(data, "account")
        _check_fields(data, _ACCOUNT_FIELDS, "account")

        def optional(key: str, parse: Callable[[Any], Any]) -> Any:
            value = data.get(key)
            return None if value is None else parse(value)

        def storage(value: Any) -> dict[int, int]:
            entries = _expect_object(value, "storage")
            return dict(sorted((parse_uint(k), parse_uint(v)) for k, v in entries.items()))

        return cls(
            builtin=optional("builtin", BuiltinCompat.from_json),
            balance=optional("balance", parse_uint),
            nonce=optional("nonce", parse_uint),
            code=optional("code", parse_bytes),
            version=optional("version", parse_uint),
            storage=optional("storage", storage),
            constructor=optional("constructor", parse_bytes),
        )

    def is_empty(self) -> bool:
        """True if the account has no nonce, balance, code or storage."""
        return (
            self.balance is None
            and self.nonce is None
            and self.code is None
            and self.storage is None
        )


@dataclass(frozen=True)
class State:
    """An account state given either as a root hash or as a full map of accounts."""

    root: bytes | None = None
    accounts: dict[bytes, Account] | None = None

    def __post_init__(self) -> None:
        if (self.root is None) == (self.accounts is None):
            raise ValueError("a state holds either a root hash or an account map")

    @classmethod
    def from_json(cls, data: Any) -> "State":
        if isinstance(data, str):
            try:
                return cls(root=parse_hash(data, 32))
            except FormatError:
                pass
        elif isinstance(data, dict):
            try:
                accounts = sorted(
                    (parse_address(address), Account.from_json(account))
                    for address, account in data.items()
                )
            except FormatError:
                pass
            else:
                return cls(accounts=dict(accounts))
        raise FormatError("data did not match any variant of untagged enum HashOrMap")

    def builtins(self) -> dict[bytes, Builtin]:
        """All builtin contracts in the state, by address."""
        return {
            address: Builtin.from_compat(account.builtin)
            for address, account in self
            if account.builtin is not None
        }

    def constructors(self) -> dict[bytes, bytes]:
        """All constructor codes in the state, by address."""
        return {
            address: account.constructor
            for address, account in self
            if account.constructor is not None
        }

    def __iter__(self) -> Iterator[tuple[bytes, Account]]:
        if self.accounts is None:
            return iter(())
        return iter(sorted(self.accounts.items(), key=lambda item: item[0]))