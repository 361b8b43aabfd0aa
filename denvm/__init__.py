"""Disassembler for NVM bytecode files: loading, decoding, cross-references and listings."""

__version__ = "1.0.0"