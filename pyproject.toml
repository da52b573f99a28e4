[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evmfixtures"
version = "0.1.0"
description = "Readers for Ethereum JSON test fixtures, with Keccak trie roots and state-hash checks"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = ["ethereum", "evm", "fixtures", "json", "trie", "rlp", "keccak"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Testing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["evmfixtures"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
