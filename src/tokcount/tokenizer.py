"""
Tokenizer loading and lookup.

The tokenizer algorithm itself is provided by the Hugging Face `tokenizers`
library; this module only turns a serialized tokenizer definition (JSON, as
written by `Tokenizer.save()`) into an object with a single `encode`
operation, and finds definitions by name.

Three kinds of tokenizer source are supported:

- an explicit file path (`load_tokenizer`),
- an in-memory buffer (`load_tokenizer_from_bytes`), used for the
  definitions shipped inside the package,
- a short name, resolved through the tokenizer search path
  (`find_tokenizer_by_name`).

Nothing is fetched from the network and nothing is cached between runs.
"""

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import tokenizers as _tokenizers

import tokcount.config as config
import tokcount.constants as constants
import tokcount.errors as errors

_logger = _logging.getLogger(__name__)

SHIPPED_TOKENIZERS_DIR = _pathlib.Path(__file__).parent / "assets" / "tokenizers"
"""Directory holding the tokenizer definitions bundled with the package."""


class TokenEncoder(_typing.Protocol):
    """Anything that can turn text into a sequence of token ids."""

    def encode(self, text: str) -> _typing.Sequence[int]: ...


class Tokenizer:
    """
    A loaded, read-only tokenizer.

    Wraps a `tokenizers.Tokenizer`. Special tokens (e.g. BERT's [CLS]/[SEP])
    are never added, so the count reflects the text alone.
    """

    def __init__(
        self,
        backend: _tokenizers.Tokenizer,
        *,
        name: str,
        source: str = constants.EMBEDDED_SOURCE,
    ) -> None:
        self._backend = backend
        self.name = name
        self.source = source

    def encode(self, text: str) -> list[int]:
        """Encode text into token ids."""
        return list(self._backend.encode(text, add_special_tokens=False).ids)

    @property
    def vocab_size(self) -> int:
        """Number of entries in the vocabulary, including added tokens."""
        return self._backend.get_vocab_size(with_added_tokens=True)

    def __repr__(self) -> str:
        return f"Tokenizer(name={self.name!r}, source={self.source!r})"


@_dataclasses.dataclass(frozen=True)
class TokenizerInfo:
    """A tokenizer definition reachable through the search path."""

    name: str
    path: _pathlib.Path
    origin: str
    """Which search location provided it ("shipped", "user", "config", "system")."""


def load_tokenizer(path: str | _pathlib.Path) -> Tokenizer:
    """
    Load a tokenizer from a JSON file.

    Args:
        path: Path to the tokenizer JSON file.

    Returns:
        Ready-to-use Tokenizer named after the file stem.

    Raises:
        TokenizerLoadError: If the file is missing, unreadable or malformed.
    """
    path = _pathlib.Path(path)
    if not path.exists():
        raise errors.TokenizerLoadError(str(path), "no such file")
    if not path.is_file():
        raise errors.TokenizerLoadError(str(path), "not a regular file")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise errors.TokenizerLoadError(str(path), e.strerror or str(e)) from e
    tokenizer = _build(data, name=path.stem, source=str(path))
    _logger.debug("Loaded tokenizer %r from %s", tokenizer.name, path)
    return tokenizer


def load_tokenizer_from_bytes(
    data: bytes,
    *,
    name: str = "embedded",
) -> Tokenizer:
    """
    Load a tokenizer from an in-memory JSON buffer.

    Args:
        data: Tokenizer JSON document as bytes.
        name: Display name for the tokenizer.

    Raises:
        TokenizerLoadError: If the buffer is not a valid tokenizer definition.
    """
    return _build(data, name=name, source=constants.EMBEDDED_SOURCE)


def _build(data: bytes, *, name: str, source: str) -> Tokenizer:
    if not data.strip():
        raise errors.TokenizerLoadError(source, "tokenizer definition is empty")
    try:
        backend = _tokenizers.Tokenizer.from_buffer(data)
    except Exception as e:  # noqa: BLE001 - tokenizers raises bare Exception
        raise errors.TokenizerLoadError(source, f"malformed tokenizer JSON: {e}") from e
    return Tokenizer(backend, name=name, source=source)


# =============================================================================
# Shipped tokenizers and the name search path
# =============================================================================


def shipped_tokenizer_names() -> list[str]:
    """Names of the tokenizers bundled with the package, sorted."""
    return sorted(p.stem for p in SHIPPED_TOKENIZERS_DIR.glob(f"*{constants.TOKENIZER_SUFFIX}"))


def load_shipped_tokenizer(name: str) -> Tokenizer:
    """
    Load one of the bundled tokenizers by name.

    Raises:
        TokenizerNotFoundError: If no shipped tokenizer has that name.
    """
    path = SHIPPED_TOKENIZERS_DIR / f"{name}{constants.TOKENIZER_SUFFIX}"
    if not path.is_file():
        raise errors.TokenizerNotFoundError(name, [path])
    return load_tokenizer_from_bytes(path.read_bytes(), name=name)


def get_search_path(settings: config.Settings) -> list[tuple[str, _pathlib.Path]]:
    """
    Directories consulted, in order, when a tokenizer is selected by name.

    Returns:
        List of (origin, directory) tuples, highest priority first.
    """
    search: list[tuple[str, _pathlib.Path]] = [
        ("config", directory) for directory in settings.tokenizer_dirs
    ]
    search.append(("user", settings.user_tokenizers_dir))
    search.append(("shipped", SHIPPED_TOKENIZERS_DIR))
    search.append(("system", _pathlib.Path(_sys.prefix) / "share" / "tokcount" / "tokenizers"))
    return search


def _validate_name(name: str) -> None:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise errors.TokenizerLoadError(
            repr(name),
            "tokenizer names cannot be empty or contain path separators "
            "(use --tokenizer-path for files)",
        )


def find_tokenizer_by_name(name: str, settings: config.Settings) -> TokenizerInfo:
    """
    Find a named tokenizer on the search path.

    Args:
        name: Tokenizer name, without the .json suffix.
        settings: Settings providing the configured directories.

    Returns:
        The first matching definition.

    Raises:
        TokenizerLoadError: If the name is not a plain file name.
        TokenizerNotFoundError: If no directory holds <name>.json.
    """
    _validate_name(name)
    filename = f"{name}{constants.TOKENIZER_SUFFIX}"

    searched: list[_pathlib.Path] = []
    for origin, directory in get_search_path(settings):
        candidate = directory / filename
        searched.append(candidate)
        if candidate.is_file():
            _logger.debug("Found tokenizer %r at %s (%s)", name, candidate, origin)
            return TokenizerInfo(name=name, path=candidate, origin=origin)

    raise errors.TokenizerNotFoundError(name, searched)


def load_tokenizer_by_name(name: str, settings: config.Settings) -> Tokenizer:
    """Find and load a named tokenizer."""
    info = find_tokenizer_by_name(name, settings)
    if info.origin == "shipped":
        return load_shipped_tokenizer(name)
    return load_tokenizer(info.path)


def list_available_tokenizers(settings: config.Settings) -> list[TokenizerInfo]:
    """
    Every tokenizer reachable by name, sorted by name.

    When the same name exists in several directories, only the one that
    `find_tokenizer_by_name` would pick is listed.
    """
    found: dict[str, TokenizerInfo] = {}
    for origin, directory in get_search_path(settings):
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob(f"*{constants.TOKENIZER_SUFFIX}")):
            if path.is_file() and path.stem not in found:
                found[path.stem] = TokenizerInfo(name=path.stem, path=path, origin=origin)
    return [found[name] for name in sorted(found)]


def resolve_tokenizer(
    *,
    path: str | _pathlib.Path | None = None,
    name: str | None = None,
    settings: config.Settings,
) -> Tokenizer:
    """
    Load the tokenizer selected for this run.

    An explicit path wins over a name; with neither, the configured
    default tokenizer name is used.

    Raises:
        TokenizerLoadError: If the selected tokenizer cannot be loaded.
    """
    if path is not None:
        return load_tokenizer(path)
    return load_tokenizer_by_name(name or settings.default_tokenizer, settings)
