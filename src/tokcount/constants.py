"""
Shared constants for tokcount.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

PROG_NAME = "tokcount"
"""Program name used in messages and the console script."""

ENV_PREFIX = "TOKCOUNT_"
"""Prefix for all environment variable settings."""

# Tokenizer defaults
DEFAULT_TOKENIZER = "byte-bpe"
"""Shipped tokenizer used when none is selected."""

TOKENIZER_SUFFIX = ".json"
"""File suffix of serialized tokenizer definitions."""

EMBEDDED_SOURCE = "<embedded>"
"""Display source for tokenizers built from in-memory buffers."""

# Output defaults
DEFAULT_COLUMN_WIDTH = 8
"""Width of each right-aligned count column (matches wc)."""

MAX_COLUMN_WIDTH = 32
"""Upper bound accepted for the column width setting."""

STDIN_LABEL = "-"
"""Label (and command-line argument) that denotes standard input."""

TOTAL_LABEL = "total"
"""Label of the synthesized row summing all successful inputs."""

LINE_TERMINATOR = b"\n"
"""Byte counted as one line."""
