"""Command line entry point of the disassembler."""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Sequence

from denvm.decode import TruncatedInstructionError, decode
from denvm.loader import LoaderError, load_binary
from denvm.output import (
    OutputOptions,
    write_disassembly,
    write_header_info,
    write_hex_dump,
)
from denvm.xref import build_xrefs

VERSION = "1.0.0"
PROG = "denvm"

_USAGE = f"""\
Usage: {PROG} [options] <file.nvm>

Options:
  -h, --help         Show this help message
  -V, --version      Show version information
  -x, --hex          Show hex bytes alongside disassembly
  -d, --dump         Show hex dump of the entire file
  -n, --no-color     Disable ANSI color output
  --no-comments      Disable inline comments
  --no-offsets       Hide byte offsets
  -o <file>          Write output to file (default: stdout)

{PROG} {VERSION} - NVM Bytecode Decompiler
"""

_VERSION_TEXT = f"{PROG} {VERSION}\nNVM Bytecode Decompiler\n"


class _UsageError(Exception):
    def __init__(self, message: str, hint: bool = False) -> None:
        super().__init__(message)
        self.hint = hint


def _is_tty(stream) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def main(argv: Sequence[str] | None = None) -> int:
    """Run the disassembler and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    input_path = None
    output_path = None
    show_hex = show_dump = no_color = no_comments = no_offsets = False

    try:
        remaining = iter(args)
        for arg in remaining:
            if arg in ("-h", "--help"):
                sys.stderr.write(_USAGE)
                return 0
            if arg in ("-V", "--version"):
                sys.stdout.write(_VERSION_TEXT)
                return 0
            if arg in ("-x", "--hex"):
                show_hex = True
            elif arg in ("-d", "--dump"):
                show_dump = True
            elif arg in ("-n", "--no-color"):
                no_color = True
            elif arg == "--no-comments":
                no_comments = True
            elif arg == "--no-offsets":
                no_offsets = True
            elif arg == "-o":
                output_path = next(remaining, None)
                if output_path is None:
                    raise _UsageError("-o requires a filename argument")
            elif arg.startswith("-"):
                raise _UsageError(f"unknown option: {arg}", hint=True)
            elif input_path is not None:
                raise _UsageError("multiple input files specified")
            else:
                input_path = arg
        if input_path is None:
            raise _UsageError("no input file specified", hint=True)
    except _UsageError as exc:
        sys.stderr.write(f"error: {exc}\n")
        if exc.hint:
            sys.stderr.write(f"Run '{PROG} --help' for usage.\n")
        return 1

    with contextlib.ExitStack() as stack:
        out = sys.stdout
        if output_path is not None:
            try:
                out = stack.enter_context(open(output_path, "w"))
            except OSError:
                sys.stderr.write(f"error: cannot open output file: {output_path}\n")
                return 1

        options = OutputOptions(
            show_hex=show_hex,
            show_offsets=not no_offsets,
            show_comments=not no_comments,
            color=not no_color and _is_tty(out),
        )

        try:
            binary = load_binary(input_path)
        except LoaderError as exc:
            sys.stderr.write(f"error: {input_path}: {exc.message}\n")
            return 1

        if show_dump:
            write_header_info(out, binary, options)
            write_hex_dump(out, binary)
            return 0

        try:
            instructions = decode(binary.data)
        except TruncatedInstructionError as exc:
            instructions = exc.instructions
            sys.stderr.write(
                f"warning: {input_path}: truncated instruction near end of file\n"
            )

        xrefs = build_xrefs(instructions)
        write_header_info(out, binary, options)
        write_disassembly(out, binary, instructions, xrefs, options)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())