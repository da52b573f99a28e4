"""Readers for Ethereum JSON test fixtures, with RLP, Keccak trie roots and state-hash checks."""

__version__ = "0.1.0"

__all__ = [
    "values",
    "keccak",
    "triehash",
    "accounts",
    "statehash",
    "vm",
    "fixtures",
    "trie_fixtures",
    "txtest",
    "blockchain",
]