"""Loading of NVM binary files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from denvm.decode import HEADER_SIZE, NVM_MAGIC


class LoaderError(Exception):
    """An NVM binary could not be loaded."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


@dataclass(frozen=True)
class NvmBinary:
    """The contents of an NVM binary file."""

    path: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def load_binary(path: str | os.PathLike[str]) -> NvmBinary:
    """Read an NVM binary and check its magic signature."""
    name = os.fspath(path)
    try:
        with Path(name).open("rb") as fp:
            data = fp.read()
    except OSError as exc:
        raise LoaderError(name, "cannot open file") from exc

    if len(data) < HEADER_SIZE:
        raise LoaderError(name, "file too small (minimum 4 bytes)")
    if data[:HEADER_SIZE] != NVM_MAGIC:
        raise LoaderError(name, "invalid NVM0 magic signature")

    return NvmBinary(path=name, data=data)