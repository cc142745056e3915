"""
Shared pytest fixtures for tokcount tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import importlib as _importlib
import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest

import tokcount.config as config
import tokcount.tokenizer as tokenizer_mod

# tokcount.cli re-exports the ``main`` function, which shadows the submodule
# attribute, so load the module itself explicitly.
cli_main = _importlib.import_module("tokcount.cli.main")

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: _pytest.TempPathFactory,
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[_pathlib.Path]:
    """
    Point the user config directory at an empty temp dir for every test.

    Also clears any TOKCOUNT_* variables from the real environment so a
    developer's own configuration never leaks into test results.
    """
    for key in list(_os.environ):
        if key.startswith("TOKCOUNT_"):
            monkeypatch.delenv(key)
    config_dir = tmp_path_factory.mktemp("tokcount-config")
    monkeypatch.setenv("TOKCOUNT_CONFIG_DIR", str(config_dir))
    yield config_dir
    # A --verbose run leaves a handler bound to that run's stderr
    cli_main._configure_logging(False)


@_pytest.fixture
def settings() -> config.Settings:
    """Settings built from the built-in defaults only."""
    return config.Settings.construct_without_dotenv()


# =============================================================================
# Tokenizers
# =============================================================================


@_pytest.fixture(scope="session")
def byte_bpe() -> tokenizer_mod.Tokenizer:
    """The default shipped tokenizer, loaded once per session."""
    return tokenizer_mod.load_shipped_tokenizer("byte-bpe")


@_pytest.fixture(scope="session")
def shipped_json() -> bytes:
    """Raw JSON of the default shipped tokenizer."""
    return (tokenizer_mod.SHIPPED_TOKENIZERS_DIR / "byte-bpe.json").read_bytes()


class CharEncoder:
    """Deterministic stand-in tokenizer: one token per character."""

    name = "chars"

    def encode(self, text: str) -> list[int]:
        return [ord(c) for c in text]


@_pytest.fixture
def char_encoder() -> CharEncoder:
    return CharEncoder()


# =============================================================================
# Files and CLI
# =============================================================================


@_pytest.fixture
def write_file(tmp_path: _pathlib.Path) -> _typing.Callable[[str, str | bytes], _pathlib.Path]:
    """
    Factory writing a file under tmp_path and returning its path.

    Usage:
        def test_something(write_file):
            path = write_file("a.txt", "hello\\n")
    """

    def _write(name: str, content: str | bytes) -> _pathlib.Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_bytes(content.encode("utf-8"))
        else:
            path.write_bytes(content)
        return path

    return _write


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """Click test runner; stdout and stderr are available separately."""
    return _click_testing.CliRunner()
