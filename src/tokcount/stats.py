"""
Token, line and byte statistics.

Each input is read fully into memory and counted in one go:

- bytes: length of the raw buffer, before any decoding,
- lines: number of newline bytes (an unterminated last line is not counted,
  exactly like `wc -l`),
- tokens: length of the id sequence the tokenizer produces for the text.

Counting is atomic per input: if the buffer is not valid UTF-8, no
statistics are returned at all and InputEncodingError is raised.
"""

import dataclasses as _dataclasses
import io as _io
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import tokcount.constants as constants
import tokcount.errors as errors
import tokcount.tokenizer as tokenizer_mod

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class TokenStats:
    """Counts for one input (or the sum over several)."""

    tokens: int = 0
    lines: int = 0
    bytes: int = 0

    @classmethod
    def zero(cls) -> "TokenStats":
        """Additive identity."""
        return cls(tokens=0, lines=0, bytes=0)

    def __add__(self, other: "TokenStats") -> "TokenStats":
        if not isinstance(other, TokenStats):
            return NotImplemented
        return TokenStats(
            tokens=self.tokens + other.tokens,
            lines=self.lines + other.lines,
            bytes=self.bytes + other.bytes,
        )

    def to_dict(self) -> dict[str, int]:
        """Plain dict for JSON output."""
        return _dataclasses.asdict(self)


def sum_stats(items: _typing.Iterable[TokenStats]) -> TokenStats:
    """Field-wise sum of a sequence of stats."""
    total = TokenStats.zero()
    for item in items:
        total = total + item
    return total


def _decode(data: bytes, label: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise errors.InputEncodingError(
            label,
            f"invalid UTF-8 at byte {e.start}",
            byte_count=len(data),
            offset=e.start,
        ) from e


def _encode(text: str, label: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates, e.g. from a surrogateescape text stream
        raise errors.InputEncodingError(
            label,
            f"invalid text at character {e.start}",
            offset=e.start,
        ) from e


def count_tokens(
    text: str | bytes,
    tokenizer: tokenizer_mod.TokenEncoder,
    *,
    label: str = constants.STDIN_LABEL,
) -> int:
    """
    Count the tokens in a piece of text.

    Args:
        text: Text to count. Bytes are decoded as strict UTF-8.
        tokenizer: Anything with an `encode(str)` method.
        label: Input name used in error messages.

    Returns:
        Exactly len(tokenizer.encode(text)). Empty text is 0 tokens.

    Raises:
        InputEncodingError: If bytes are not valid UTF-8, or the tokenizer
            fails on the text.
    """
    if isinstance(text, bytes):
        text = _decode(text, label)
    if not text:
        return 0
    try:
        return len(tokenizer.encode(text))
    except Exception as e:  # noqa: BLE001 - tokenizers raises bare Exception
        raise errors.InputEncodingError(label, f"failed to encode text: {e}") from e


def count_stats(
    text: bytes | str,
    tokenizer: tokenizer_mod.TokenEncoder,
    *,
    label: str = constants.STDIN_LABEL,
) -> TokenStats:
    """
    Count tokens, lines and bytes in already-read content.

    Args:
        text: Raw content. A str is measured by its UTF-8 encoding.
        tokenizer: Anything with an `encode(str)` method.
        label: Input name used in error messages.

    Raises:
        InputEncodingError: If the content cannot be decoded or encoded.
    """
    data = _encode(text, label) if isinstance(text, str) else bytes(text)
    tokens = count_tokens(data, tokenizer, label=label)
    return TokenStats(
        tokens=tokens,
        lines=data.count(constants.LINE_TERMINATOR),
        bytes=len(data),
    )


def read_file(path: str | _pathlib.Path, *, label: str | None = None) -> bytes:
    """
    Read a whole file as bytes.

    Raises:
        InputReadError: If the file cannot be opened or read.
    """
    path = _pathlib.Path(path)
    label = label if label is not None else str(path)
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise errors.InputReadError(label, e) from e


def read_all(reader: _typing.IO[_typing.Any], *, label: str = constants.STDIN_LABEL) -> bytes:
    """
    Drain a readable stream into memory.

    Binary streams are returned as-is; text streams are re-encoded as UTF-8.

    Raises:
        InputReadError: If reading fails.
        InputEncodingError: If a text stream yields text that is not
            valid Unicode.
    """
    try:
        data = reader.read()
    except OSError as e:
        raise errors.InputReadError(label, e) from e
    except UnicodeDecodeError as e:
        # A text-mode reader decodes before we see the bytes
        raise errors.InputEncodingError(
            label, f"invalid UTF-8 at byte {e.start}", offset=e.start
        ) from e
    if isinstance(data, str):
        return _encode(data, label)
    return bytes(data)


def count_tokens_in_file(
    path: str | _pathlib.Path,
    tokenizer: tokenizer_mod.TokenEncoder,
    *,
    label: str | None = None,
) -> TokenStats:
    """
    Count tokens, lines and bytes in a file.

    Raises:
        InputReadError: If the file cannot be opened or read.
        InputEncodingError: If the content is not valid UTF-8.
    """
    label = label if label is not None else str(path)
    data = read_file(path, label=label)
    stats = count_stats(data, tokenizer, label=label)
    _logger.debug("Counted %s: %s", label, stats)
    return stats


def count_tokens_from_reader(
    reader: _typing.IO[_typing.Any] | _io.BufferedIOBase,
    tokenizer: tokenizer_mod.TokenEncoder,
    *,
    label: str = constants.STDIN_LABEL,
) -> TokenStats:
    """
    Count tokens, lines and bytes in everything a reader produces (e.g. stdin).

    Raises:
        InputReadError: If reading fails.
        InputEncodingError: If the content is not valid UTF-8.
    """
    data = read_all(reader, label=label)
    stats = count_stats(data, tokenizer, label=label)
    _logger.debug("Counted %s: %s", label, stats)
    return stats
