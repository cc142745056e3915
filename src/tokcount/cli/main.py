"""
Main CLI entry point for tokcount.

Provides the command-line interface using Click. Behaves like `wc`, with
LLM tokens in place of words:

    tokcount README.md src/*.py      # tokens, lines, bytes per file + total
    cat notes.txt | tokcount -l      # lines only, from stdin
"""

import json as _json
import logging as _logging
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import tokcount
import tokcount.config as config
import tokcount.constants as constants
import tokcount.errors as errors
import tokcount.formatting as formatting
import tokcount.inputs as inputs
import tokcount.report as report_mod
import tokcount.tokenizer as tokenizer_mod

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

EXIT_USAGE = 2
"""Exit status for configuration problems (click uses 2 for usage errors too)."""


_verbose_handler: _logging.Handler | None = None


def _configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the package logger when verbose."""
    global _verbose_handler

    package_logger = _logging.getLogger(tokcount.__name__)
    if _verbose_handler is not None:
        package_logger.removeHandler(_verbose_handler)
        _verbose_handler = None
    if not verbose:
        package_logger.setLevel(_logging.NOTSET)
        return

    # Bound to the stderr of this invocation
    _verbose_handler = _logging.StreamHandler(_sys.stderr)
    _verbose_handler.setFormatter(_logging.Formatter("%(name)s: %(levelname)s: %(message)s"))
    package_logger.addHandler(_verbose_handler)
    package_logger.setLevel(_logging.DEBUG)


def _load_settings() -> config.Settings:
    """Load settings, exiting with a readable message on bad configuration."""
    try:
        return config.Settings()
    except config.ConfigFileError as e:
        _click.echo(f"{constants.PROG_NAME}: {e}", err=True)
        raise SystemExit(EXIT_USAGE) from None
    except _pydantic.ValidationError as e:
        _click.echo(f"{constants.PROG_NAME}: invalid configuration:\n{e}", err=True)
        raise SystemExit(EXIT_USAGE) from None


def _show_tokenizers(settings: config.Settings, json_output: bool) -> None:
    """Print every tokenizer reachable by name."""
    available = tokenizer_mod.list_available_tokenizers(settings)

    if json_output:
        _click.echo(_json.dumps({
            "default": settings.default_tokenizer,
            "tokenizers": [
                {"name": info.name, "origin": info.origin, "path": str(info.path)}
                for info in available
            ],
        }, indent=2))
        return

    import rich.console as _rich_console
    import rich.table as _rich_table

    table = _rich_table.Table(title="Available tokenizers")
    table.add_column("Name", no_wrap=True)
    table.add_column("Origin", no_wrap=True)
    table.add_column("Path", overflow="fold")
    for info in available:
        name = info.name
        if name == settings.default_tokenizer:
            name = f"{name} (default)"
        table.add_row(name, info.origin, str(info.path))

    console = _rich_console.Console(file=_sys.stdout)
    console.print(table)


@_click.command(context_settings=CONTEXT_SETTINGS)
@_click.version_option(tokcount.__version__, "-v", "--version", prog_name=constants.PROG_NAME)
@_click.argument("files", nargs=-1, type=_click.Path(dir_okay=True, allow_dash=True))
@_click.option(
    "-t",
    "--tokenizer-path",
    type=_click.Path(dir_okay=False),
    default=None,
    metavar="PATH",
    help="Path to a tokenizer JSON file",
)
@_click.option(
    "-n",
    "--tokenizer-name",
    type=str,
    default=None,
    metavar="NAME",
    help="Named tokenizer to use (see --list-tokenizers)",
)
@_click.option(
    "--tokens-only",
    is_flag=True,
    help="Show only the token count",
)
@_click.option(
    "-l",
    "--lines",
    is_flag=True,
    help="Show the line count",
)
@_click.option(
    "-c",
    "--bytes",
    "bytes_",
    is_flag=True,
    help="Show the byte count",
)
@_click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format",
)
@_click.option(
    "--list-tokenizers",
    is_flag=True,
    help="List tokenizers available by name and exit",
)
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging on stderr",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    files: tuple[str, ...],
    tokenizer_path: str | None,
    tokenizer_name: str | None,
    tokens_only: bool,
    lines: bool,
    bytes_: bool,
    json_output: bool,
    list_tokenizers: bool,
    verbose: bool,
) -> None:
    """
    Count LLM tokens, lines and bytes in FILEs (like wc, for tokens).

    With no FILE, or when FILE is -, read standard input. With more than
    one FILE, a total row follows.

    \b
    Examples:
        tokcount notes.md                   # tokens, lines, bytes
        tokcount --tokens-only *.py         # token column only
        tokcount -n wordpiece essay.txt     # shipped WordPiece tokenizer
        tokcount -t ./tokenizer.json a b    # custom tokenizer file
        git diff | tokcount                 # read stdin
    """
    # Must precede settings load, which logs the config layers it reads
    _configure_logging(verbose)
    settings = _load_settings()
    if settings.verbose and not verbose:
        _configure_logging(True)
    _logger.debug("Settings: %s", settings.to_dict())

    for key in settings.get_extra_fields():
        _click.echo(f"{constants.PROG_NAME}: warning: unknown config key '{key}'", err=True)

    if tokenizer_path is not None and tokenizer_name is not None:
        raise _click.UsageError("--tokenizer-path and --tokenizer-name are mutually exclusive")

    if list_tokenizers:
        _show_tokenizers(settings, json_output)
        return

    # Tokenizer load failure is fatal and reported before any input is read
    try:
        tokenizer = tokenizer_mod.resolve_tokenizer(
            path=tokenizer_path,
            name=tokenizer_name,
            settings=settings,
        )
    except errors.TokenizerLoadError as e:
        _click.echo(f"{constants.PROG_NAME}: {e}", err=True)
        raise SystemExit(1) from None
    _logger.debug("Using tokenizer %r", tokenizer)

    sources = inputs.resolve_inputs(files)
    stdin = _sys.stdin.buffer
    if any(source.is_stdin for source in sources) and stdin.isatty():
        _click.echo(
            f"{constants.PROG_NAME}: reading from stdin (use --help for usage information)",
            err=True,
        )

    report = report_mod.build_report(sources, tokenizer, stdin=stdin)

    if json_output:
        for label, error in report.failures:
            _click.echo(formatting.format_error(label, error.reason), err=True)
        _click.echo(formatting.render_json(report, tokenizer_name=tokenizer.name))
    else:
        output = formatting.OutputConfig.from_flags(
            tokens_only=tokens_only,
            lines=lines,
            bytes_=bytes_,
            width=settings.column_width,
        )
        for line, is_error in formatting.render_rows(report, output):
            _click.echo(line, err=is_error)

    ctx.exit(report.exit_code)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name=constants.PROG_NAME)


if __name__ == "__main__":
    main()
