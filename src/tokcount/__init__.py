"""
tokcount - count LLM tokens, lines and bytes.

A wc-style command-line tool that reports tokens as a language model
would see them, using a Hugging Face `tokenizers` definition.
"""

import importlib.metadata as _metadata
import logging as _logging

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("tokcount")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "tokcount Contributors"

# Library use stays silent unless the application configures logging
_logging.getLogger(__name__).addHandler(_logging.NullHandler())

from tokcount.errors import (  # noqa: E402
    InputEncodingError,
    InputError,
    InputReadError,
    TokcountError,
    TokenizerLoadError,
    TokenizerNotFoundError,
)
from tokcount.report import InputResult, Report, build_report  # noqa: E402
from tokcount.stats import (  # noqa: E402
    TokenStats,
    count_stats,
    count_tokens,
    count_tokens_from_reader,
    count_tokens_in_file,
)
from tokcount.tokenizer import (  # noqa: E402
    Tokenizer,
    load_tokenizer,
    load_tokenizer_from_bytes,
)

__all__ = [
    "__version__",
    "__version_info__",
    "InputEncodingError",
    "InputError",
    "InputReadError",
    "InputResult",
    "Report",
    "TokcountError",
    "TokenStats",
    "Tokenizer",
    "TokenizerLoadError",
    "TokenizerNotFoundError",
    "build_report",
    "count_stats",
    "count_tokens",
    "count_tokens_from_reader",
    "count_tokens_in_file",
    "load_tokenizer",
    "load_tokenizer_from_bytes",
]
