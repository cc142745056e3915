"""
CLI module for tokcount.

Provides the command-line interface using Click.
"""

from tokcount.cli.main import cli, main

__all__ = ["main", "cli"]
