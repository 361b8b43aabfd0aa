"""Decoding of NVM bytecode into instructions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

NVM_MAGIC = b"NVM0"
HEADER_SIZE = len(NVM_MAGIC)


class Opcode(IntEnum):
    """Opcodes understood by the NVM."""

    HALT = 0x00
    NOP = 0x01
    PUSH = 0x02
    POP = 0x04
    DUP = 0x05
    SWAP = 0x06
    ADD = 0x10
    SUB = 0x11
    MUL = 0x12
    DIV = 0x13
    MOD = 0x14
    CMP = 0x20
    EQ = 0x21
    NEQ = 0x22
    GT = 0x23
    LT = 0x24
    JMP = 0x30
    JZ = 0x31
    JNZ = 0x32
    CALL = 0x33
    RET = 0x34
    ENTER = 0x35
    LEAVE = 0x36
    LOAD_ARG = 0x37
    STORE_ARG = 0x38
    LOAD = 0x40
    STORE = 0x41
    LOAD_REL = 0x42
    STORE_REL = 0x43
    LOAD_ABS = 0x44
    STORE_ABS = 0x45
    SYSCALL = 0x50
    BREAK = 0x51


class OperandType(Enum):
    """Kind of immediate operand that follows an opcode."""

    NONE = 0
    U8 = 1
    U32 = 2

    @property
    def width(self) -> int:
        """Number of operand bytes."""
        return {OperandType.NONE: 0, OperandType.U8: 1, OperandType.U32: 4}[self]


_U8_OPERAND = {
    Opcode.ENTER,
    Opcode.LOAD_ARG,
    Opcode.STORE_ARG,
    Opcode.LOAD,
    Opcode.STORE,
    Opcode.LOAD_REL,
    Opcode.STORE_REL,
    Opcode.SYSCALL,
}

_U32_OPERAND = {
    Opcode.PUSH,
    Opcode.JMP,
    Opcode.JZ,
    Opcode.JNZ,
    Opcode.CALL,
}


def _lookup(opcode: int) -> Opcode | None:
    try:
        return Opcode(opcode)
    except ValueError:
        return None


def opcode_name(opcode: int) -> str | None:
    """Return the mnemonic of an opcode, or None if it is unknown."""
    known = _lookup(opcode)
    return known.name.lower() if known is not None else None


def opcode_known(opcode: int) -> bool:
    """Tell whether the opcode is defined by the NVM."""
    return _lookup(opcode) is not None


def opcode_operand_type(opcode: int) -> OperandType:
    """Return the operand type of an opcode; unknown opcodes take none."""
    known = _lookup(opcode)
    if known in _U8_OPERAND:
        return OperandType.U8
    if known in _U32_OPERAND:
        return OperandType.U32
    return OperandType.NONE


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction."""

    offset: int
    opcode: int
    size: int
    operand: int = 0
    operand_type: OperandType = OperandType.NONE
    known: bool = True

    @property
    def mnemonic(self) -> str | None:
        return opcode_name(self.opcode)


class TruncatedInstructionError(ValueError):
    """The bytecode ends in the middle of an instruction's operand.

    ``instructions`` holds everything decoded so far, ending with the
    truncated instruction (size 1, operand 0).
    """

    def __init__(self, instructions: list[Instruction]) -> None:
        super().__init__("truncated instruction at end of bytecode")
        self.instructions = instructions


def decode(bytecode: bytes) -> list[Instruction]:
    """Decode the code following the header into a list of instructions.

    Raises TruncatedInstructionError if the last instruction is cut short.
    """
    data = bytes(bytecode)
    size = len(data)
    instructions: list[Instruction] = []
    ip = HEADER_SIZE

    while ip < size:
        offset = ip
        opcode = data[ip]
        ip += 1
        known = opcode_known(opcode)
        operand_type = opcode_operand_type(opcode)
        width = operand_type.width

        if size - ip < width:
            instructions.append(
                Instruction(offset, opcode, 1, 0, operand_type, known)
            )
            raise TruncatedInstructionError(instructions)

        operand = int.from_bytes(data[ip:ip + width], "big") if width else 0
        ip += width
        instructions.append(
            Instruction(offset, opcode, 1 + width, operand, operand_type, known)
        )

    return instructions