"""
Output formatting.

Rows are wc-style: each selected count right-aligned in a fixed-width
column, columns separated by a single space, followed by the input name.
"""

import dataclasses as _dataclasses
import json as _json
import typing as _typing

import tokcount.constants as constants
import tokcount.report as report_mod
import tokcount.stats as token_stats


@_dataclasses.dataclass(frozen=True)
class OutputConfig:
    """Which columns to print and how wide."""

    show_tokens: bool = True
    show_lines: bool = True
    show_bytes: bool = True
    width: int = constants.DEFAULT_COLUMN_WIDTH

    @classmethod
    def from_flags(
        cls,
        *,
        tokens_only: bool = False,
        lines: bool = False,
        bytes_: bool = False,
        width: int = constants.DEFAULT_COLUMN_WIDTH,
    ) -> "OutputConfig":
        """
        Build from command-line flags.

        With no column flag, every column is shown. Otherwise only the
        requested ones are.
        """
        nothing_specified = not (tokens_only or lines or bytes_)
        return cls(
            show_tokens=tokens_only or nothing_specified,
            show_lines=lines or nothing_specified,
            show_bytes=bytes_ or nothing_specified,
            width=width,
        )

    @property
    def columns(self) -> list[str]:
        """Names of the selected columns, in output order."""
        selected = [
            ("tokens", self.show_tokens),
            ("lines", self.show_lines),
            ("bytes", self.show_bytes),
        ]
        return [name for name, shown in selected if shown]

    def format_stats(self, stats: token_stats.TokenStats, label: str | None = None) -> str:
        """Render one row; the label is omitted when None."""
        counts = " ".join(f"{getattr(stats, column):{self.width}}" for column in self.columns)
        if label is None:
            return counts
        return f"{counts} {label}"


def format_error(label: str, reason: str) -> str:
    """Message line for an input that could not be counted."""
    return f"{constants.PROG_NAME}: {label}: {reason}"


def render_rows(
    report: report_mod.Report,
    config: OutputConfig,
) -> _typing.Iterator[tuple[str, bool]]:
    """
    Yield (line, is_error) pairs for a report, in input order.

    Error lines belong on stderr, the rest on stdout. The total row comes
    last, when the report has one. A lone stdin input is printed without
    a label.
    """
    hide_label = report.is_stdin_only
    for result in report.results:
        if result.error is not None:
            yield format_error(result.label, result.error.reason), True
        elif result.stats is not None:
            label = None if hide_label else result.label
            yield config.format_stats(result.stats, label), False

    total = report.total
    if total is not None:
        yield config.format_stats(total, constants.TOTAL_LABEL), False


def report_to_dict(
    report: report_mod.Report,
    *,
    tokenizer_name: str | None = None,
) -> dict[str, _typing.Any]:
    """Machine-readable form of a report."""
    total = report.total
    return {
        "tokenizer": tokenizer_name,
        "inputs": [{"name": label, **stats.to_dict()} for label, stats in report.rows],
        "errors": [{"name": label, "error": error.reason} for label, error in report.failures],
        "total": total.to_dict() if total is not None else None,
    }


def render_json(
    report: report_mod.Report,
    *,
    tokenizer_name: str | None = None,
) -> str:
    """Render a report as an indented JSON document."""
    return _json.dumps(report_to_dict(report, tokenizer_name=tokenizer_name), indent=2)
