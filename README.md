# denvm

`denvm` turns NVM bytecode files into readable assembly listings. An NVM file
begins with the four-byte magic `NVM0`, followed by the instruction stream.
Multi-byte operands are big-endian.

## Installation

```
pip install .
```

## Command line

```
denvm [options] <file.nvm>
```

The same entry point can be run as `python -m denvm.cli`.

| Option             | Effect                                        |
|--------------------|-----------------------------------------------|
| `-h`, `--help`     | Print usage to stderr and exit                |
| `-V`, `--version`  | Print version information and exit            |
| `-x`, `--hex`      | Show each instruction's bytes next to it      |
| `-d`, `--dump`     | Print a hex dump of the whole file instead    |
| `-n`, `--no-color` | Turn off ANSI colours                         |
| `--no-comments`    | Leave out inline comments                     |
| `--no-offsets`     | Leave out byte offsets                        |
| `-o <file>`        | Write the output to a file, not stdout        |

Colours are used only when the output goes to a terminal. The command exits
with status 0 on success and 1 on a usage error, an unwritable output file or
a file that cannot be loaded.

Jump targets (`jmp`, `jz`, `jnz`) are labelled `loc_XXXX` and call targets
`sub_XXXX`; an address that is both jumped to and called gets the `sub_`
label. Opcodes the decoder does not know appear as `.db 0xNN`. Syscall
operands are shown by name, with a comment naming the capability they need
where one applies. If the last instruction is cut short, the listing is still
written and a warning goes to stderr.

Example output:

```
File:    hello.nvm
Size:    12 bytes
Magic:   NVM0 (valid)
Code:    8 bytes (0x0004 - 0x000b)

  0x0004  push        0x00000048           ; 'H'
  0x0009  syscall     print
  0x000b  halt
```

## Library use

```python
import sys

from denvm.loader import load_binary
from denvm.decode import decode, TruncatedInstructionError
from denvm.xref import build_xrefs
from denvm.output import OutputOptions, write_header_info, write_disassembly

binary = load_binary("hello.nvm")
try:
    instructions = decode(binary.data)
except TruncatedInstructionError as exc:
    instructions = exc.instructions

xrefs = build_xrefs(instructions)
options = OutputOptions()
write_header_info(sys.stdout, binary, options)
write_disassembly(sys.stdout, binary, instructions, xrefs, options)
```

- `denvm.loader.load_binary(path)` returns an `NvmBinary` (`path`, `data`,
  `size`). It raises `LoaderError` when the file cannot be opened or read,
  is shorter than four bytes, or lacks the `NVM0` magic.
- `denvm.decode.decode(bytecode)` returns a list of `Instruction` objects
  (`offset`, `opcode`, `size`, `operand`, `operand_type`, `known`,
  `mnemonic`). A cut-short final instruction raises
  `TruncatedInstructionError`, whose `instructions` holds everything decoded
  up to and including it. `opcode_name`, `opcode_known` and
  `opcode_operand_type` describe single opcodes; `Opcode` and `OperandType`
  are the enums behind them.
- `denvm.xref.build_xrefs(instructions)` returns an `XrefTable` of `Xref`
  entries (`source`, `target`, `type`). Its `is_target`, `is_call_target` and
  `target_type` methods answer questions about an offset.
- `denvm.output` holds `OutputOptions` (`show_hex`, `show_offsets`,
  `show_comments`, `color`), the `Syscall` enum, and the writers
  `write_header_info`, `write_disassembly` and `write_hex_dump`, which write
  to any text stream.

## What it does not do

`denvm` only reads and lists bytecode. It does not assemble, run or modify
NVM programs.