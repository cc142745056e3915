"""
Report aggregation.

Runs every input through the statistics accumulator in command-line order,
keeping a tagged result (stats or error) per input. A failure on one input
never stops the others; it only makes the run's exit status non-zero.
"""

import dataclasses as _dataclasses
import logging as _logging
import sys as _sys
import typing as _typing

import tokcount.errors as errors
import tokcount.inputs as inputs
import tokcount.stats as token_stats
import tokcount.tokenizer as tokenizer_mod

_logger = _logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL_FAILURE = 1


@_dataclasses.dataclass(frozen=True)
class InputResult:
    """Outcome for a single input: statistics on success, an error otherwise."""

    source: inputs.InputSource
    stats: token_stats.TokenStats | None = None
    error: errors.InputError | None = None

    def __post_init__(self) -> None:
        if (self.stats is None) == (self.error is None):
            raise ValueError("InputResult needs exactly one of stats or error")

    @property
    def label(self) -> str:
        return self.source.label

    @property
    def ok(self) -> bool:
        return self.error is None


@_dataclasses.dataclass
class Report:
    """Ordered per-input results for one run."""

    results: list[InputResult] = _dataclasses.field(default_factory=list)

    @property
    def rows(self) -> list[tuple[str, token_stats.TokenStats]]:
        """(label, stats) for every successful input, in order."""
        return [(r.label, r.stats) for r in self.results if r.stats is not None]

    @property
    def failures(self) -> list[tuple[str, errors.InputError]]:
        """(label, error) for every failed input, in order."""
        return [(r.label, r.error) for r in self.results if r.error is not None]

    @property
    def total(self) -> token_stats.TokenStats | None:
        """
        Field-wise sum of the successful inputs.

        None unless more than one input succeeded: a single row already
        is the whole result.
        """
        rows = self.rows
        if len(rows) <= 1:
            return None
        return token_stats.sum_stats(s for _, s in rows)

    @property
    def has_failures(self) -> bool:
        return any(not r.ok for r in self.results)

    @property
    def exit_code(self) -> int:
        return EXIT_PARTIAL_FAILURE if self.has_failures else EXIT_OK

    @property
    def is_stdin_only(self) -> bool:
        return len(self.results) == 1 and self.results[0].source.is_stdin


def count_source(
    source: inputs.InputSource,
    tokenizer: tokenizer_mod.TokenEncoder,
    stdin: _typing.IO[_typing.Any] | None = None,
) -> InputResult:
    """
    Count one input, turning per-input errors into a failure result.

    Read and encoding errors are logged and captured; anything else
    propagates.
    """
    try:
        if source.is_stdin:
            if stdin is None:
                stdin = _sys.stdin.buffer
            result = token_stats.count_tokens_from_reader(stdin, tokenizer, label=source.label)
        else:
            assert source.path is not None
            result = token_stats.count_tokens_in_file(source.path, tokenizer, label=source.label)
    except errors.InputError as e:
        _logger.warning("Skipping %s: %s", source.label, e.reason)
        return InputResult(source=source, error=e)
    return InputResult(source=source, stats=result)


def build_report(
    sources: _typing.Iterable[inputs.InputSource],
    tokenizer: tokenizer_mod.TokenEncoder,
    *,
    stdin: _typing.IO[_typing.Any] | None = None,
) -> Report:
    """
    Count every input in order and collect the results.

    Args:
        sources: Inputs to process, in command-line order.
        tokenizer: Tokenizer shared by all inputs.
        stdin: Stream used for stdin sources. Defaults to sys.stdin's
            binary buffer.
    """
    report = Report()
    for source in sources:
        report.results.append(count_source(source, tokenizer, stdin))
    return report
