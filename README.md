# evmfixtures

`evmfixtures` reads the JSON fixture files that EVM test suites use. It covers
VM tests, blockchain tests, transaction tests, trie tests, difficulty tests and
skip lists. It also has the RLP, Keccak-256 and Merkle Patricia trie functions
that you need to check an account state against an expected state root.

## Installation

```
pip install evmfixtures
```

The only runtime dependency is `pycryptodome`, which supplies Keccak-256.

## Modules

- `evmfixtures.values` decodes the lenient scalar encodings that fixtures use.
  - `parse_uint` accepts JSON integers and hex or decimal strings, such as
    `"0xa"` and `"10"`. Both `""` and `"0x"` decode to zero. A hex string with
    more than 64 digits raises `FormatError`, as does a decimal value above
    2^256 - 1.
  - `parse_non_zero` and `parse_optional_non_zero` also reject zero.
  - `parse_bytes`, `parse_hash` and `parse_address` decode hex byte strings and
    fixed-size hashes.
  - `uint_to_json` and `low_u64` are small helpers.
- `evmfixtures.keccak.keccak256` returns the 32-byte Keccak-256 digest of a byte
  string.
- `evmfixtures.triehash` holds RLP and trie-root functions.
  - `rlp_encode` and `rlp_decode` are a canonical RLP encoder and decoder.
  - `trie_root`, `sec_trie_root` and `ordered_trie_root` compute Merkle Patricia
    trie roots.
- `evmfixtures.accounts` holds the spec accounts and states.
  - `Account` is a spec account.
  - `State` holds either a root hash or a map of accounts keyed by address. It
    offers `builtins()` and `constructors()`.
  - Builtin pricing is described by `Builtin`, `BuiltinCompat`, `PricingAt`
    and `parse_pricing`, with one pricing class per scheme, for example
    `Linear`, `Modexp` and `Blake2F`.
- `evmfixtures.statehash` converts fixture states and checks them.
  - `unwrap_to_state` and `unwrap_to_account` turn fixture accounts into
    `MemoryAccount` values. Zero storage values are dropped.
  - `state_root` computes the secure-trie state root of those accounts.
  - `assert_valid_hash` and `assert_valid_state` raise `StateMismatchError`,
    a subclass of `AssertionError`, when the accounts differ from what is
    expected.
  - `TrieAccount` encodes and decodes the RLP form of an account.
- `evmfixtures.vm` holds the VM test records `Vm`, `Env`, `Transaction` and
  `Call`. `Vm.out_of_gas()` is true when the test has no `callcreates`.
- `evmfixtures.fixtures` has the general loaders and the skip lists.
  - `load_tests(fp, parse)` reads a JSON object of named tests and parses each
    one. The result is sorted by name.
  - `load_vm_tests` and `load_difficulty_tests` are ready-made loaders.
  - `SkipTests.load` and `SkipTests.empty` create skip lists.
- `evmfixtures.trie_fixtures` reads trie tests through `Input`, `Trie` and
  `load_trie_tests`. An input can be an object or a list of pairs. A key or
  value is hex when it starts with `0x` and UTF-8 text otherwise.
- `evmfixtures.txtest` reads transaction tests through `ForkSpec`, `PostState`,
  `TransactionTest` and `load_transaction_tests`.
- `evmfixtures.blockchain` reads blockchain tests through `Header`, `Block`,
  `BlockChain` and `load_blockchain_tests`. `BlockChain.genesis()` builds a
  `Genesis` from the genesis header. Block transactions are kept as raw JSON
  objects.

Malformed input raises `evmfixtures.values.FormatError`, which is a
`ValueError`.

## Examples

Load a file of VM tests:

```python
from evmfixtures.fixtures import load_vm_tests

with open("vmArithmeticTest.json") as fp:
    tests = load_vm_tests(fp)

for name, vm in tests.items():
    print(name, vm.env.gas_limit, vm.out_of_gas())
```

Check a state against a root hash:

```python
from evmfixtures.statehash import assert_valid_hash, state_root, unwrap_to_state

accounts = unwrap_to_state(vm.pre_state)
root = state_root(accounts)
assert_valid_hash(root, accounts)  # raises StateMismatchError on a difference
```

Compute a trie root directly:

```python
from evmfixtures.triehash import trie_root

print(trie_root([(b"A", b"a" * 50)]).hex())
```

## What this package does not do

The package reads fixtures and computes hashes, and that is all. It has:

- no EVM or interpreter, so it cannot execute the transactions in a VM test;
- no precompiled contracts;
- no runner that executes whole test directories;
- no command-line program.

General state test files, with a `post` section for each fork, have no reader
here.

## Running the tests

```
pip install -e ".[test]"
pytest
```