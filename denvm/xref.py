"""Cross-reference analysis of branch and call targets."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from denvm.decode import Instruction, Opcode


class XrefType(Enum):
    """How a target is reached."""

    JUMP = 0
    CALL = 1


@dataclass(frozen=True)
class Xref:
    """A reference from an instruction to a code offset."""

    source: int
    target: int
    type: XrefType


@dataclass
class XrefTable:
    """All cross-references found in a program, in instruction order."""

    entries: list[Xref] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Xref]:
        return iter(self.entries)

    def is_target(self, offset: int) -> bool:
        """Tell whether any reference points at the offset."""
        return any(entry.target == offset for entry in self.entries)

    def is_call_target(self, offset: int) -> bool:
        """Tell whether a call points at the offset."""
        return any(
            entry.target == offset and entry.type is XrefType.CALL
            for entry in self.entries
        )

    def target_type(self, offset: int) -> XrefType:
        """Return CALL if any call reaches the offset, otherwise JUMP."""
        return XrefType.CALL if self.is_call_target(offset) else XrefType.JUMP


_JUMPS = {Opcode.JMP, Opcode.JZ, Opcode.JNZ}


def build_xrefs(instructions: Iterable[Instruction]) -> XrefTable:
    """Collect jump and call references from decoded instructions."""
    entries = []
    for insn in instructions:
        if insn.opcode in _JUMPS:
            entries.append(Xref(insn.offset, insn.operand, XrefType.JUMP))
        elif insn.opcode == Opcode.CALL:
            entries.append(Xref(insn.offset, insn.operand, XrefType.CALL))
    return XrefTable(entries)