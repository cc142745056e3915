"""
Error taxonomy for tokcount.

Two families of errors exist:

- TokenizerLoadError: no tokenizer could be built. Fatal to the whole run
  and reported once, before any input is read.
- InputError: one input could not be read (InputReadError) or could not be
  interpreted as text (InputEncodingError). Isolated to that input; the
  remaining inputs are still processed and the exit status reflects the
  failure.
"""

import pathlib as _pathlib
import typing as _typing


class TokcountError(Exception):
    """Base class for all tokcount errors."""


class TokenizerLoadError(TokcountError):
    """Raised when a tokenizer definition is missing, unreadable or malformed."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"failed to load tokenizer from {source}: {reason}")


class TokenizerNotFoundError(TokenizerLoadError):
    """Raised when a named tokenizer is not present on the search path."""

    def __init__(self, name: str, searched: _typing.Sequence[_pathlib.Path]) -> None:
        self.name = name
        self.searched = list(searched)
        locations = "\n  ".join(str(p) for p in self.searched)
        super().__init__(
            repr(name),
            f"tokenizer '{name}' not found. Searched in:\n  {locations}",
        )

    def __str__(self) -> str:
        return self.reason


class InputError(TokcountError):
    """Base class for errors confined to a single input."""

    def __init__(self, label: str, reason: str) -> None:
        self.label = label
        self.reason = reason
        super().__init__(f"{label}: {reason}")


class InputReadError(InputError):
    """Raised when an input cannot be opened or fully read."""

    def __init__(self, label: str, error: OSError) -> None:
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(label, reason)


class InputEncodingError(InputError):
    """Raised when an input is not valid UTF-8 or the tokenizer rejects it.

    The byte count is kept for diagnostics only; no statistics row is
    produced for an input that fails here.
    """

    def __init__(
        self,
        label: str,
        reason: str,
        *,
        byte_count: int | None = None,
        offset: int | None = None,
    ) -> None:
        self.byte_count = byte_count
        self.offset = offset
        super().__init__(label, reason)
