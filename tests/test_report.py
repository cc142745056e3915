"""
Tests for report aggregation.

These tests verify:
1. Inputs are processed in order, each independently
2. The total row exists only when more than one input succeeded
3. Failures are recorded per input and drive the exit code
"""

import io as _io
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import tokcount.errors as errors
import tokcount.inputs as inputs
import tokcount.report as report
import tokcount.stats as stats
import tokcount.tokenizer as tokenizer_mod


class TestInputResult:
    """Tests for the tagged per-input result."""

    def test_requires_exactly_one_outcome(self) -> None:
        source = inputs.InputSource.stdin()
        with _pytest.raises(ValueError):
            report.InputResult(source=source)
        with _pytest.raises(ValueError):
            report.InputResult(
                source=source,
                stats=stats.TokenStats.zero(),
                error=errors.InputEncodingError("-", "bad"),
            )

    def test_ok_flag(self) -> None:
        source = inputs.InputSource.file("a.txt")
        good = report.InputResult(source=source, stats=stats.TokenStats.zero())
        bad = report.InputResult(source=source, error=errors.InputEncodingError("a.txt", "bad"))
        assert good.ok
        assert not bad.ok
        assert good.label == "a.txt"


class TestBuildReport:
    """Tests for build_report()."""

    def test_single_file_has_no_total(
        self,
        write_file: _typing.Any,
        byte_bpe: tokenizer_mod.Tokenizer,
    ) -> None:
        path = write_file("hello.txt", "Hello, world!")
        result = report.build_report(inputs.resolve_inputs([str(path)]), byte_bpe)
        assert result.rows == [(str(path), stats.TokenStats(tokens=4, lines=0, bytes=13))]
        assert result.total is None
        assert result.exit_code == 0

    def test_total_is_field_wise_sum(
        self,
        write_file: _typing.Any,
        byte_bpe: tokenizer_mod.Tokenizer,
    ) -> None:
        paths = [
            write_file("a.txt", "Hello, world!\n"),
            write_file("b.txt", "the cat\nsat on the mat\n"),
            write_file("c.txt", ""),
        ]
        result = report.build_report(inputs.resolve_inputs([str(p) for p in paths]), byte_bpe)

        per_file = [s for _, s in result.rows]
        assert len(per_file) == 3
        assert result.total == stats.TokenStats(
            tokens=sum(s.tokens for s in per_file),
            lines=sum(s.lines for s in per_file),
            bytes=sum(s.bytes for s in per_file),
        )
        assert result.total.lines == 3
        assert result.exit_code == 0

    def test_rows_follow_input_order(
        self,
        write_file: _typing.Any,
        char_encoder: _typing.Any,
    ) -> None:
        names = ["z.txt", "a.txt", "m.txt"]
        paths = [str(write_file(name, name)) for name in names]
        result = report.build_report(inputs.resolve_inputs(paths), char_encoder)
        assert [label for label, _ in result.rows] == paths

    def test_partial_failure(
        self,
        tmp_path: _pathlib.Path,
        write_file: _typing.Any,
        byte_bpe: tokenizer_mod.Tokenizer,
    ) -> None:
        """A missing file is reported; the valid one still counts."""
        good = write_file("good.txt", "Hello, world!")
        missing = tmp_path / "missing.txt"
        result = report.build_report(
            inputs.resolve_inputs([str(good), str(missing)]),
            byte_bpe,
        )

        assert result.rows == [(str(good), stats.TokenStats(tokens=4, lines=0, bytes=13))]
        assert len(result.failures) == 1
        label, error = result.failures[0]
        assert label == str(missing)
        assert isinstance(error, errors.InputReadError)
        # Only one input succeeded, so there is no total row
        assert result.total is None
        assert result.has_failures
        assert result.exit_code == 1

    def test_total_covers_only_successes(
        self,
        tmp_path: _pathlib.Path,
        write_file: _typing.Any,
        char_encoder: _typing.Any,
    ) -> None:
        a = write_file("a.txt", "abc\n")
        b = write_file("b.txt", "de\n")
        bad = write_file("bad.bin", b"\xff\xfe")
        paths = [str(a), str(tmp_path / "gone.txt"), str(bad), str(b)]
        result = report.build_report(inputs.resolve_inputs(paths), char_encoder)

        assert [label for label, _ in result.rows] == [str(a), str(b)]
        assert [type(e) for _, e in result.failures] == [
            errors.InputReadError,
            errors.InputEncodingError,
        ]
        assert result.total == stats.TokenStats(tokens=7, lines=2, bytes=7)
        assert result.exit_code == 1

    def test_all_failed(self, tmp_path: _pathlib.Path, char_encoder: _typing.Any) -> None:
        paths = [str(tmp_path / "x"), str(tmp_path / "y")]
        result = report.build_report(inputs.resolve_inputs(paths), char_encoder)
        assert result.rows == []
        assert result.total is None
        assert result.exit_code == 1

    def test_stdin_only(self, byte_bpe: tokenizer_mod.Tokenizer) -> None:
        stdin = _io.BytesIO(b"Hello, world!")
        result = report.build_report(inputs.resolve_inputs([]), byte_bpe, stdin=stdin)
        assert result.is_stdin_only
        assert result.rows == [("-", stats.TokenStats(tokens=4, lines=0, bytes=13))]
        assert result.total is None

    def test_empty_stdin(self, byte_bpe: tokenizer_mod.Tokenizer) -> None:
        result = report.build_report(
            inputs.resolve_inputs([]),
            byte_bpe,
            stdin=_io.BytesIO(b""),
        )
        assert result.rows == [("-", stats.TokenStats.zero())]
        assert result.exit_code == 0

    def test_stdin_mixed_with_files(
        self,
        write_file: _typing.Any,
        char_encoder: _typing.Any,
    ) -> None:
        path = write_file("a.txt", "abc")
        result = report.build_report(
            inputs.resolve_inputs([str(path), "-"]),
            char_encoder,
            stdin=_io.BytesIO(b"xy\n"),
        )
        assert not result.is_stdin_only
        assert result.rows[1] == ("-", stats.TokenStats(tokens=3, lines=1, bytes=3))
        assert result.total == stats.TokenStats(tokens=6, lines=1, bytes=6)

    def test_unexpected_errors_propagate(self, write_file: _typing.Any) -> None:
        """Only per-input errors are captured; bugs are not swallowed."""

        class _Broken:
            def encode(self, text: str) -> list[int]:
                raise RuntimeError("tokenizer exploded")

        path = write_file("a.txt", "abc")
        # Encoder failures are per-input encoding errors
        result = report.build_report(inputs.resolve_inputs([str(path)]), _Broken())
        assert isinstance(result.failures[0][1], errors.InputEncodingError)

        def _explode(*args: _typing.Any, **kwargs: _typing.Any) -> stats.TokenStats:
            raise KeyError("bug")

        with _pytest.MonkeyPatch.context() as mp:
            mp.setattr(stats, "count_tokens_in_file", _explode)
            with _pytest.raises(KeyError):
                report.build_report(inputs.resolve_inputs([str(path)]), _Broken())

    def test_second_dash_reads_drained_stdin(self, char_encoder: _typing.Any) -> None:
        result = report.build_report(
            inputs.resolve_inputs(["-", "-"]),
            char_encoder,
            stdin=_io.BytesIO(b"abc"),
        )
        assert [s for _, s in result.rows] == [
            stats.TokenStats(tokens=3, lines=0, bytes=3),
            stats.TokenStats.zero(),
        ]

    def test_surrogate_text_stdin_is_isolated(
        self,
        write_file: _typing.Any,
        char_encoder: _typing.Any,
    ) -> None:
        """A surrogateescape text stream fails only its own input."""
        path = write_file("a.txt", "abc")
        stdin = _io.TextIOWrapper(_io.BytesIO(b"ok\xff\n"), errors="surrogateescape")
        result = report.build_report(
            inputs.resolve_inputs(["-", str(path)]),
            char_encoder,
            stdin=stdin,
        )
        assert result.rows == [(str(path), stats.TokenStats(tokens=3, lines=0, bytes=3))]
        label, error = result.failures[0]
        assert label == "-"
        assert isinstance(error, errors.InputEncodingError)
        assert result.exit_code == 1


class TestCountSource:
    """count_source() goes through the accumulator entry points."""

    def test_file_uses_count_tokens_in_file(
        self,
        monkeypatch: _pytest.MonkeyPatch,
        char_encoder: _typing.Any,
    ) -> None:
        calls: list[tuple[_typing.Any, str]] = []

        def _record(path: _typing.Any, tokenizer: _typing.Any, *, label: str) -> stats.TokenStats:
            calls.append((path, label))
            return stats.TokenStats(tokens=1)

        monkeypatch.setattr(stats, "count_tokens_in_file", _record)
        result = report.count_source(inputs.InputSource.file("x.txt"), char_encoder)
        assert calls == [(_pathlib.Path("x.txt"), "x.txt")]
        assert result.stats == stats.TokenStats(tokens=1)

    def test_stdin_uses_count_tokens_from_reader(
        self,
        monkeypatch: _pytest.MonkeyPatch,
        char_encoder: _typing.Any,
    ) -> None:
        stdin = _io.BytesIO(b"abc")
        readers: list[_typing.Any] = []

        def _record(reader: _typing.Any, tokenizer: _typing.Any, *, label: str) -> stats.TokenStats:
            readers.append(reader)
            return stats.TokenStats(tokens=2)

        monkeypatch.setattr(stats, "count_tokens_from_reader", _record)
        result = report.count_source(inputs.InputSource.stdin(), char_encoder, stdin)
        assert readers == [stdin]
        assert result.ok
