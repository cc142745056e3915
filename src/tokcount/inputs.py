"""
Input resolution.

Turns command-line path arguments into an ordered list of input sources.
With no arguments, standard input is the only source. The argument "-"
also stands for standard input, as with other Unix text tools.
"""

import dataclasses as _dataclasses
import os as _os
import pathlib as _pathlib
import typing as _typing

import tokcount.constants as constants

SourceKind = _typing.Literal["file", "stdin"]


@_dataclasses.dataclass(frozen=True)
class InputSource:
    """One thing to count: a named file or standard input."""

    kind: SourceKind
    label: str
    """Display name: the path as given, or "-" for standard input."""
    path: _pathlib.Path | None = None

    @classmethod
    def file(cls, path: str | _os.PathLike[str]) -> "InputSource":
        return cls(kind="file", label=_os.fspath(path), path=_pathlib.Path(path))

    @classmethod
    def stdin(cls) -> "InputSource":
        return cls(kind="stdin", label=constants.STDIN_LABEL)

    @property
    def is_stdin(self) -> bool:
        return self.kind == "stdin"


def resolve_inputs(paths: _typing.Sequence[str | _os.PathLike[str]]) -> list[InputSource]:
    """
    Build the input list for a run, preserving command-line order.

    Args:
        paths: Path arguments. Empty means read standard input.
    """
    if not paths:
        return [InputSource.stdin()]
    return [
        InputSource.stdin() if _os.fspath(p) == constants.STDIN_LABEL else InputSource.file(p)
        for p in paths
    ]
