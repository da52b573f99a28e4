"""Keccak-256 hashing."""

from __future__ import annotations

from Crypto.Hash import keccak


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    if isinstance(data, str):
        raise TypeError("keccak256 takes bytes, not str")
    digest = keccak.new(digest_bits=256)
    digest.update(bytes(data))
    return digest.digest()