import pytest

from evmfixtures.accounts import Account, State
from evmfixtures.values import FormatError
from evmfixtures.vm import Call, Env, Transaction, Vm

CONTRACT = "0f572e5295c57f15886f9b263e2f6d2d6c7b5ec6"
CALLER = "cd1722f2947def4cf144679da39c4c32bdc35681"
COINBASE = "2adc25665018aa1fe0e6bc666dac8fc2697ff9ba"
EMPTY_LIST_HASH = "1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"
ONE_ETHER = 0x0DE0B6B3A7640000

# Two PUSH32 of the maximum word, ADD, then SSTORE at slot 0.
PUSH_MAX = "7f" + "ff" * 32
TEST_CODE = PUSH_MAX * 2 + "01600055"
STORED_WORD = "ff" * 31 + "fe"


def account_json(storage):
    return {
        "balance": hex(ONE_ETHER),
        "code": "0x" + TEST_CODE,
        "nonce": "0x00",
        "storage": storage,
    }


def vm_json():
    env = {
        "currentCoinbase": COINBASE,
        "currentDifficulty": "0x0100",
        "currentGasLimit": "0x0f4240",
        "currentNumber": "0x00",
        "currentTimestamp": "0x01",
    }
    execution = {
        "address": CONTRACT,
        "caller": CALLER,
        "code": "0x" + TEST_CODE,
        "data": "0x",
        "gas": "0x0186a0",
        "gasPrice": "0x5af3107a4000",
        "origin": CALLER,
        "value": hex(ONE_ETHER),
    }
    return {
        "callcreates": [],
        "env": env,
        "exec": execution,
        "gas": "0x013874",
        "logs": "0x" + EMPTY_LIST_HASH,
        "out": "0x",
        "post": {CONTRACT: account_json({"0x00": "0x" + STORED_WORD})},
        "pre": {CONTRACT: account_json({})},
    }


def addr(text):
    return bytes.fromhex(text)


def expected_account(storage):
    return Account(
        builtin=None,
        balance=ONE_ETHER,
        code=bytes.fromhex(TEST_CODE),
        constructor=None,
        nonce=0,
        storage=storage,
        version=None,
    )


def test_vm_deserialization():
    vm = Vm.from_json(vm_json())
    assert vm.calls == []
    assert vm.env == Env(
        author=addr(COINBASE),
        difficulty=0x0100,
        gas_limit=0x0F4240,
        number=0,
        timestamp=1,
        block_base_fee_per_gas=0,
    )
    assert vm.transaction == Transaction(
        address=addr(CONTRACT),
        sender=addr(CALLER),
        code=bytes.fromhex(TEST_CODE),
        code_version=0,
        data=b"",
        gas=0x0186A0,
        gas_price=0x5AF3107A4000,
        origin=addr(CALLER),
        value=ONE_ETHER,
    )
    assert vm.gas_left == 0x013874
    assert vm.logs == bytes.fromhex(EMPTY_LIST_HASH)
    assert vm.output == b""
    assert vm.pre_state == State(accounts={addr(CONTRACT): expected_account({})})
    assert vm.post_state == State(
        accounts={addr(CONTRACT): expected_account({0: int(STORED_WORD, 16)})}
    )
    assert vm.out_of_gas() is False


CALL_DATA = "".join(digit * 4 for digit in "1234567890abcdef")


def test_call_deserialization_empty_dest():
    call = Call.from_json(
        {
            "data": "0x" + CALL_DATA,
            "destination": "",
            "gasLimit": "0x1748766aa5",
            "value": "0x00",
        }
    )
    assert len(call.data) == 32
    assert call.data[:4] == b"\x11\x11\x22\x22"
    assert call.data[-4:] == b"\xee\xee\xff\xff"
    assert call.data == bytes.fromhex(CALL_DATA)
    assert call.destination is None
    assert call.gas_limit == 0x1748766AA5
    assert call.value == 0


def test_call_deserialization_full_dest():
    destination = "5a39ed1020c04d4d84539975b893a4e7c53eab6c"
    call = Call.from_json(
        {
            "data": "0x1234",
            "destination": destination,
            "gasLimit": "0x1748766aa5",
            "value": "0x00",
        }
    )
    assert call.data == b"\x12\x34"
    assert call.destination == addr(destination)
    assert call.gas_limit == 0x1748766AA5
    assert call.value == 0


def test_missing_callcreates_means_out_of_gas():
    data = vm_json()
    for key in ("callcreates", "gas", "out", "post"):
        del data[key]
    vm = Vm.from_json(data)
    assert vm.out_of_gas() is True
    assert vm.output is None
    assert vm.post_state is None
    assert vm.gas_left is None


def test_optional_fields_given_explicitly():
    data = vm_json()
    data["exec"]["codeVersion"] = "0x1"
    data["env"]["currentBaseFee"] = "7"
    vm = Vm.from_json(data)
    assert vm.transaction.code_version == 1
    assert vm.env.block_base_fee_per_gas == 7


def test_missing_required_field_raises():
    data = vm_json()
    del data["exec"]["caller"]
    with pytest.raises(FormatError, match="caller"):
        Vm.from_json(data)


def test_missing_pre_state_raises():
    data = vm_json()
    del data["pre"]
    with pytest.raises(FormatError, match="pre"):
        Vm.from_json(data)


def test_non_object_env_raises():
    with pytest.raises(FormatError):
        Env.from_json(["not", "an", "object"])