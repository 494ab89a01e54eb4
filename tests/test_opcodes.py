import pytest

from evmkit.opcodes import (
    Opcode,
    identifier_of,
    is_defined,
    is_push,
    push_data_size,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0x00, "stop"),
        (0x5B, "jumpdest"),
        (0x7F, "push<32>"),
        (0xFF, "selfdestruct"),
    ],
)
def test_documented_opcode_values(value, expected):
    assert is_defined(value) is True
    assert identifier_of(value) == expected


@pytest.mark.parametrize(
    "op, expected",
    [
        (Opcode.STOP, "stop"),
        (Opcode.AND, "and_"),
        (Opcode.RETURN, "return_"),
        (Opcode.PUSH1, "push<1>"),
        (Opcode.PUSH32, "push<32>"),
        (Opcode.DUP16, "dup<16>"),
        (Opcode.SWAP1, "swap<1>"),
        (Opcode.LOG0, "log<0>"),
        (Opcode.KECCAK256, "keccak256"),
        (Opcode.PUSH0, "push0"),
    ],
)
def test_identifier_of_known(op, expected):
    assert identifier_of(op) == expected


@pytest.mark.parametrize("value", [0x0C, 0x1E, 0x21, 0x49, 0x5C, 0xA5, 0xB4, 0xEF, 0xF6, 0xFC])
def test_undefined_opcodes(value):
    assert is_defined(value) is False
    with pytest.raises(ValueError):
        identifier_of(value)


def test_is_defined_matches_enum():
    members = {int(op) for op in Opcode}
    for value in range(256):
        assert is_defined(value) == (value in members)


def test_identifiers_are_unique():
    names = [identifier_of(op) for op in Opcode]
    assert len(names) == len(set(names))


@pytest.mark.parametrize("value", [-1, 256, 1000])
def test_out_of_range_rejected(value):
    with pytest.raises(ValueError):
        is_defined(value)
    with pytest.raises(ValueError):
        is_push(value)
    with pytest.raises(ValueError):
        push_data_size(value)


def test_push_classification():
    assert is_push(Opcode.PUSH1)
    assert is_push(Opcode.PUSH32)
    assert not is_push(Opcode.PUSH0)
    assert not is_push(Opcode.DUP1)
    assert not is_push(Opcode.JUMPDEST)


def test_push_data_size_matches_name():
    for op in Opcode:
        if is_push(op):
            assert push_data_size(op) == int(op.name[len("PUSH"):])
        else:
            assert push_data_size(op) == 0


def test_push_data_size_undefined_is_zero():
    assert push_data_size(0x0C) == 0
    assert push_data_size(Opcode.PUSH0) == 0