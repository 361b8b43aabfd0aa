"""Text rendering of headers, disassembly listings and hex dumps."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

from denvm.decode import HEADER_SIZE, Instruction, Opcode, OperandType, opcode_name
from denvm.loader import NvmBinary
from denvm.xref import XrefTable, XrefType

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_MAGENTA = "\033[35m"
_RED = "\033[31m"
_BLUE = "\033[34m"

_HEX_COLUMNS = 6
_COMMENT_COLUMN = 14


class Syscall(IntEnum):
    """System calls reachable through the syscall instruction."""

    EXIT = 0x00
    SPAWN = 0x01
    OPEN = 0x02
    READ = 0x03
    WRITE = 0x04
    MSG_SEND = 0x07
    MSG_RECEIVE = 0x08
    PORT_IN_BYTE = 0x0C
    PORT_OUT_BYTE = 0x0D
    PRINT = 0x0E


_SYSCALL_CAPS = {
    Syscall.SPAWN: "requires CAP_FS_READ",
    Syscall.OPEN: "requires CAP_FS_READ",
    Syscall.READ: "requires CAP_FS_READ",
    Syscall.WRITE: "requires CAP_FS_WRITE",
    Syscall.PORT_IN_BYTE: "requires CAP_DRV_ACCESS",
    Syscall.PORT_OUT_BYTE: "requires CAP_DRV_ACCESS",
}

_MNEMONIC_STYLES = {
    Opcode.HALT: _BOLD + _RED,
    Opcode.BREAK: _BOLD + _RED,
    Opcode.CALL: _BOLD + _CYAN,
    Opcode.RET: _BOLD + _CYAN,
    Opcode.JMP: _CYAN,
    Opcode.JZ: _CYAN,
    Opcode.JNZ: _CYAN,
    Opcode.SYSCALL: _MAGENTA,
}

_JUMPS = {Opcode.JMP, Opcode.JZ, Opcode.JNZ}


@dataclass(frozen=True)
class OutputOptions:
    """Switches that shape the listing."""

    show_hex: bool = False
    show_offsets: bool = True
    show_comments: bool = True
    color: bool = False


def _syscall(number: int) -> Syscall | None:
    try:
        return Syscall(number)
    except ValueError:
        return None


def _paint(text: str, style: str, color: bool) -> str:
    return f"{style}{text}{_RESET}" if color else text


def _reference(target: int, kind: XrefType, color: bool) -> str:
    if kind is XrefType.CALL:
        return _paint(f"sub_{target:04x}", _BOLD + _GREEN, color)
    return _paint(f"loc_{target:04x}", _BOLD + _YELLOW, color)


def _comment(text: str, color: bool) -> str:
    return _paint(f"; {text}", _DIM, color)


def _hex_bytes(data: bytes, insn: Instruction) -> str:
    chunk = data[insn.offset:insn.offset + insn.size]
    cells = "".join(f"{byte:02x} " for byte in chunk)
    return cells + "   " * max(_HEX_COLUMNS - len(chunk), 0)


def _operand(insn: Instruction, options: OutputOptions) -> tuple[str, str]:
    """Return the rendered operand and the comment text for an instruction."""
    color = options.color
    comments = options.show_comments
    value = insn.operand

    if insn.operand_type is OperandType.U8:
        if insn.opcode == Opcode.SYSCALL:
            call = _syscall(value)
            if call is None:
                return f"0x{value:02x}", "unknown syscall" if comments else ""
            cap = _SYSCALL_CAPS.get(call, "") if comments else ""
            return _paint(call.name.lower(), _MAGENTA, color), cap
        note = ""
        if comments and insn.opcode == Opcode.ENTER:
            note = f"{value} local slot{'' if value == 1 else 's'}"
        return f"{value:<4d}", note

    if insn.operand_type is OperandType.U32:
        if insn.opcode in _JUMPS:
            return _reference(value, XrefType.JUMP, color), ""
        if insn.opcode == Opcode.CALL:
            return _reference(value, XrefType.CALL, color), ""
        note = ""
        if comments and insn.opcode == Opcode.PUSH:
            if 0x20 <= value <= 0x7E:
                note = f"'{chr(value)}'"
            elif value == 0:
                note = "null"
        return _paint(f"0x{value:08x}", _BLUE, color), note

    return "", ""


def _render_instruction(
    binary: NvmBinary, insn: Instruction, options: OutputOptions
) -> str:
    color = options.color
    parts = []

    if options.show_offsets:
        parts.append(f"  {_paint(f'0x{insn.offset:04x}', _DIM, color)}  ")
    else:
        parts.append("  ")

    if options.show_hex:
        parts.append(_hex_bytes(binary.data, insn) + " ")

    if not insn.known:
        parts.append(f"{_paint('.db', _RED, color)}     0x{insn.opcode:02x}")
        if options.show_comments:
            parts.append("  " + _comment("unknown opcode", color))
        return "".join(parts)

    mnemonic = f"{opcode_name(insn.opcode):<12}"
    style = _MNEMONIC_STYLES.get(insn.opcode)
    parts.append(_paint(mnemonic, style, color) if style else mnemonic)

    operand, note = _operand(insn, options)
    parts.append(operand)

    if options.show_comments and note:
        parts.append(" " * max(_COMMENT_COLUMN - len(note), 2))
        parts.append(_comment(note, color))

    return "".join(parts)


def write_disassembly(
    stream: TextIO,
    binary: NvmBinary,
    instructions: Iterable[Instruction],
    xrefs: XrefTable,
    options: OutputOptions,
) -> None:
    """Write a labelled listing of the instructions."""
    for index, insn in enumerate(instructions):
        if xrefs.is_target(insn.offset):
            if index:
                stream.write("\n")
            kind = xrefs.target_type(insn.offset)
            stream.write(f"{_reference(insn.offset, kind, options.color)}:\n")
        stream.write(_render_instruction(binary, insn, options) + "\n")


def write_hex_dump(stream: TextIO, binary: NvmBinary) -> None:
    """Write the whole file as a hex dump, sixteen bytes per row."""
    data = binary.data
    for start in range(0, len(data), 16):
        row = data[start:start + 16]
        cells = []
        for column in range(16):
            cells.append(f"{row[column]:02x} " if column < len(row) else "   ")
            if column == 7:
                cells.append(" ")
        text = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in row)
        stream.write(f"  {start:04x}  {''.join(cells)} |{text}|\n")


def write_header_info(
    stream: TextIO, binary: NvmBinary, options: OutputOptions
) -> None:
    """Write a short summary of the file."""
    label = _paint("File:", _BOLD, options.color)
    stream.write(f"{label}    {binary.path}\n")
    stream.write(f"Size:    {binary.size} bytes\n")
    stream.write("Magic:   NVM0 (valid)\n")
    if binary.size > HEADER_SIZE:
        stream.write(
            f"Code:    {binary.size - HEADER_SIZE} bytes "
            f"(0x{HEADER_SIZE:04x} - 0x{binary.size - 1:04x})\n"
        )
    else:
        stream.write("Code:    empty\n")
    stream.write("\n")