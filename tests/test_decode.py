import pytest

from denvm.decode import (
    Instruction,
    Opcode,
    OperandType,
    TruncatedInstructionError,
    decode,
    opcode_known,
    opcode_name,
    opcode_operand_type,
)

HEADER = bytes([0x4E, 0x56, 0x4D, 0x30])


def test_empty_bytecode():
    assert decode(HEADER) == []


def test_single_halt():
    insns = decode(HEADER + bytes([0x00]))
    assert len(insns) == 1
    insn = insns[0]
    assert insn.opcode == Opcode.HALT
    assert insn.offset == 4
    assert insn.size == 1
    assert insn.operand_type is OperandType.NONE
    assert insn.known is True


def test_push_big_endian():
    insns = decode(HEADER + bytes([0x02, 0xDE, 0xAD, 0xBE, 0xEF]))
    assert len(insns) == 1
    assert insns[0].opcode == Opcode.PUSH
    assert insns[0].operand == 0xDEADBEEF
    assert insns[0].size == 5
    assert insns[0].operand_type is OperandType.U32


def test_push_zero():
    insns = decode(HEADER + bytes([0x02, 0x00, 0x00, 0x00, 0x00]))
    assert len(insns) == 1
    assert insns[0].operand == 0


def test_u8_operand_syscall():
    insns = decode(HEADER + bytes([0x50, 0x0E]))
    assert len(insns) == 1
    assert insns[0].opcode == Opcode.SYSCALL
    assert insns[0].operand == 0x0E
    assert insns[0].size == 2
    assert insns[0].operand_type is OperandType.U8


def test_enter_operand():
    insns = decode(HEADER + bytes([0x35, 0x03]))
    assert len(insns) == 1
    assert insns[0].opcode == Opcode.ENTER
    assert insns[0].operand == 3
    assert insns[0].operand_type is OperandType.U8


def test_multi_instruction_sequence():
    code = bytes([0x02, 0x00, 0x00, 0x00, 0x48, 0x50, 0x0E, 0x00])
    insns = decode(HEADER + code)
    assert [(i.opcode, i.offset, i.operand) for i in insns] == [
        (Opcode.PUSH, 4, 0x48),
        (Opcode.SYSCALL, 9, 0x0E),
        (Opcode.HALT, 11, 0),
    ]


def test_unknown_opcode():
    insns = decode(HEADER + bytes([0xFF]))
    assert len(insns) == 1
    assert insns[0].known is False
    assert insns[0].size == 1
    assert insns[0].operand_type is OperandType.NONE


def test_truncated_push():
    with pytest.raises(TruncatedInstructionError) as info:
        decode(HEADER + bytes([0x02, 0x00, 0x01]))
    partial = info.value.instructions
    assert partial == [Instruction(4, 0x02, 1, 0, OperandType.U32, True)]


def test_truncated_syscall():
    with pytest.raises(TruncatedInstructionError) as info:
        decode(HEADER + bytes([0x50]))
    assert info.value.instructions[-1].size == 1
    assert info.value.instructions[-1].opcode == Opcode.SYSCALL


def test_truncated_after_valid_instructions_keeps_them():
    with pytest.raises(TruncatedInstructionError) as info:
        decode(HEADER + bytes([0x00, 0x01, 0x30, 0x00]))
    assert [i.opcode for i in info.value.instructions] == [0x00, 0x01, 0x30]


def test_all_no_operand_opcodes():
    opcodes = [
        Opcode.HALT, Opcode.NOP, Opcode.POP, Opcode.DUP, Opcode.SWAP,
        Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV, Opcode.MOD,
        Opcode.CMP, Opcode.EQ, Opcode.NEQ, Opcode.GT, Opcode.LT,
        Opcode.RET, Opcode.LEAVE, Opcode.LOAD_ABS, Opcode.STORE_ABS, Opcode.BREAK,
    ]
    insns = decode(HEADER + bytes(opcodes))
    assert len(insns) == len(opcodes)
    for insn in insns:
        assert insn.operand_type is OperandType.NONE
        assert insn.size == 1
        assert insn.known is True


def test_jmp_offset():
    insns = decode(HEADER + bytes([0x30, 0x00, 0x00, 0x00, 0x10]))
    assert len(insns) == 1
    assert insns[0].opcode == Opcode.JMP
    assert insns[0].operand == 0x10
    assert insns[0].operand_type is OperandType.U32


def test_opcode_names():
    assert opcode_name(Opcode.HALT) == "halt"
    assert opcode_name(Opcode.PUSH) == "push"
    assert opcode_name(Opcode.SYSCALL) == "syscall"
    assert opcode_name(Opcode.CALL) == "call"
    assert opcode_name(Opcode.LOAD_ARG) == "load_arg"
    assert opcode_name(Opcode.STORE_REL) == "store_rel"
    assert opcode_name(0xFF) is None


def test_mnemonic_property():
    assert decode(HEADER + bytes([0x51]))[0].mnemonic == "break"


@pytest.mark.parametrize(
    "opcode, expected",
    [
        (Opcode.HALT, True),
        (Opcode.PUSH, True),
        (Opcode.BREAK, True),
        (0x03, False),
        (0xFF, False),
        (0x07, False),
    ],
)
def test_opcode_known(opcode, expected):
    assert opcode_known(opcode) is expected


@pytest.mark.parametrize(
    "opcode, expected",
    [
        (Opcode.HALT, OperandType.NONE),
        (Opcode.NOP, OperandType.NONE),
        (Opcode.PUSH, OperandType.U32),
        (Opcode.JMP, OperandType.U32),
        (Opcode.JZ, OperandType.U32),
        (Opcode.JNZ, OperandType.U32),
        (Opcode.CALL, OperandType.U32),
        (Opcode.SYSCALL, OperandType.U8),
        (Opcode.ENTER, OperandType.U8),
        (Opcode.LOAD, OperandType.U8),
        (Opcode.STORE, OperandType.U8),
        (Opcode.LOAD_REL, OperandType.U8),
        (Opcode.STORE_REL, OperandType.U8),
        (Opcode.LOAD_ARG, OperandType.U8),
        (Opcode.STORE_ARG, OperandType.U8),
        (Opcode.LOAD_ABS, OperandType.NONE),
        (Opcode.STORE_ABS, OperandType.NONE),
        (0xFF, OperandType.NONE),
    ],
)
def test_operand_types(opcode, expected):
    assert opcode_operand_type(opcode) is expected


def test_instruction_sizes_cover_code():
    code = bytes([0x02, 0, 0, 0, 1, 0x35, 2, 0x99, 0x33, 0, 0, 0, 4, 0x00])
    insns = decode(HEADER + code)
    assert sum(i.size for i in insns) == len(code)
    assert all(a.offset + a.size == b.offset for a, b in zip(insns, insns[1:]))