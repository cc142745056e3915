"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with TOKCOUNT_ prefix
3. .env file (only when TOKCOUNT_ENV_FILE names one)
4. Layered YAML config files:
   - User config: ~/.config/tokcount/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

List settings accept an os.pathsep-separated string from the environment:
  TOKCOUNT_TOKENIZER_DIRS=/opt/tokenizers:~/models/tokenizers
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import tokcount.config.sources as sources
import tokcount.constants as constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit TOKCOUNT_ENV_FILE is honoured. If it is set but the
    file does not exist, no .env is loaded rather than falling back silently
    to some other location.
    """
    if env_file := _os.environ.get("TOKCOUNT_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    tokcount configuration settings.

    All settings can be overridden via environment variables with TOKCOUNT_ prefix.

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (TOKCOUNT_*)
    3. .env file
    4. User config (~/.config/tokcount/config.yaml)
    5. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="allow",  # Preserve unknown keys so the CLI can warn about typos
    )

    default_tokenizer: str = _pydantic.Field(
        default=constants.DEFAULT_TOKENIZER,
        min_length=1,
        description="Tokenizer name used when none is selected on the command line",
    )

    tokenizer_dirs: _typing.Annotated[
        list[_pathlib.Path], _pydantic_settings.NoDecode
    ] = _pydantic.Field(
        default_factory=list,
        description="Extra directories searched for named tokenizers",
    )

    column_width: int = _pydantic.Field(
        default=constants.DEFAULT_COLUMN_WIDTH,
        ge=1,
        le=constants.MAX_COLUMN_WIDTH,
        description="Width of each count column",
    )

    verbose: bool = _pydantic.Field(
        default=False,
        description="Emit debug logging on stderr",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (TOKCOUNT_* env vars)
        3. dotenv_settings (.env file)
        4. yaml settings (user config, then built-in defaults)
        5. (defaults via Field definitions), lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file.

        Useful for test isolation and for reproducing issues without
        .env interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    @_pydantic.field_validator("tokenizer_dirs", mode="before")
    @classmethod
    def _split_tokenizer_dirs(cls, value: _typing.Any) -> _typing.Any:
        """Accept a path-list string (from the environment) as well as a list."""
        if isinstance(value, str):
            return [part for part in value.split(_os.pathsep) if part.strip()]
        return value

    @_pydantic.field_validator("tokenizer_dirs", mode="after")
    @classmethod
    def _expand_tokenizer_dirs(cls, value: list[_pathlib.Path]) -> list[_pathlib.Path]:
        return [path.expanduser() for path in value]

    @property
    def config_dir(self) -> _pathlib.Path:
        """User configuration directory."""
        return sources.get_user_config_dir()

    @property
    def user_tokenizers_dir(self) -> _pathlib.Path:
        """Directory for user-installed tokenizer definitions."""
        return self.config_dir / "tokenizers"

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Unknown fields usually indicate typos in a config file.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def to_dict(self) -> dict[str, _typing.Any]:
        """Known settings as a JSON-compatible dict."""
        return {
            "default_tokenizer": self.default_tokenizer,
            "tokenizer_dirs": [str(p) for p in self.tokenizer_dirs],
            "column_width": self.column_width,
            "verbose": self.verbose,
        }
