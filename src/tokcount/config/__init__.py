"""
Configuration module for tokcount.

Uses pydantic-settings for environment variable and YAML file loading.
"""

from tokcount.config.settings import Settings
from tokcount.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
