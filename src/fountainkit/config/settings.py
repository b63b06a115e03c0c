"""fountainkit configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fountainkit.exceptions import ConfigurationError, check_config_keys

CONFIG_BASENAMES = ("config.yaml", "config.json", "config.toml")
PROJECT_CONFIG_BASENAMES = ("fountainkit.yaml", "fountainkit.json", "fountainkit.toml")


def _read_yaml(path: Path) -> dict[str, Any]:
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _read_toml(path: Path) -> dict[str, Any]:
    return tomllib.loads(path.read_text(encoding="utf-8"))


def _read_json(path: Path) -> dict[str, Any]:
    return cast("dict[str, Any]", json.loads(path.read_text(encoding="utf-8")))


CONFIG_READERS: dict[str, Callable[[Path], dict[str, Any]]] = {
    ".yml": _read_yaml,
    ".yaml": _read_yaml,
    ".toml": _read_toml,
    ".json": _read_json,
}


class FountainKitSettings(BaseSettings):
    """Application settings.

    Sources, strongest first: command line flags, configuration files
    (YAML, TOML or JSON, later files winning), ``FOUNTAINKIT_`` environment
    variables, a ``.env`` file and finally the field defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="FOUNTAINKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Add call site information to log events",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="One of DEBUG, INFO, WARNING, ERROR or CRITICAL",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="console, json or structured (key=value) output",
        pattern="^(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Rotating log file written next to stderr output",
    )

    # Parser cache
    cache_max_entries: int = Field(
        default=64,
        description="Maximum number of documents kept by the parser cache",
        gt=0,
    )

    # Hidden elements
    hide_notes: bool = Field(
        default=False,
        description="Remove [[notes]] when filtering hidden elements",
    )
    hide_synopsis: bool = Field(
        default=False,
        description="Remove = synopsis lines when filtering hidden elements",
    )
    hide_boneyard: bool = Field(
        default=False,
        description="Remove /* boneyard */ comments and the # Boneyard section",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Resolve ``~`` and ``$VARS`` in the log file path."""
        if v is None:
            return None
        if isinstance(v, Path):
            return v.resolve()
        if isinstance(v, str):
            return Path(os.path.expandvars(v)).expanduser().resolve()
        raise ValueError(f"log_file must be str or Path, got {type(v).__name__}")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Accept log levels in any case."""
        if not isinstance(v, str):
            raise ValueError(f"log_level must be a string, got {type(v).__name__}")
        return v.upper()

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Accept log formats in any case."""
        if not isinstance(v, str):
            raise ValueError(f"log_format must be a string, got {type(v).__name__}")
        return v.lower()

    @classmethod
    def from_env(cls) -> FountainKitSettings:
        """Settings from the environment and ``.env`` only."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> FountainKitSettings:
        """Read settings from one configuration file.

        The format is chosen by suffix: ``.yml``/``.yaml``, ``.toml`` or
        ``.json``.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: For unknown suffixes and misspelled keys
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        suffix = path.suffix.lower()
        reader = CONFIG_READERS.get(suffix)
        if reader is None:
            supported = sorted(CONFIG_READERS)
            raise ConfigurationError(
                message=f"Cannot read configuration from '{path.name}'",
                hint=f"Rename the file to use one of: {', '.join(supported)}",
                details={
                    "file": str(path),
                    "detected_format": suffix,
                    "supported_formats": supported,
                },
            )

        data = reader(path)
        check_config_keys(data)
        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> FountainKitSettings:
        """Merge configuration files, environment and CLI arguments.

        Args:
            config_files: Files applied in order, missing ones are skipped
            env_file: Explicit ``.env`` file instead of ``./.env``
            cli_args: Command line values, ``None`` meaning "not given"

        Returns:
            The merged settings
        """
        from_files: dict[str, Any] = {}
        for config_file in config_files or []:
            try:
                loaded = cls.from_file(config_file)
            except FileNotFoundError:
                from fountainkit.config.logging import get_logger

                get_logger(__name__).warning(
                    "Skipping missing configuration file",
                    config_file=str(config_file),
                )
                continue
            from_files.update(loaded.model_dump(exclude_unset=True))

        if env_file:
            # pydantic-settings takes the env file as a private init argument
            settings = cast(
                "FountainKitSettings", cast(Any, cls)(_env_file=env_file, **from_files)
            )
        else:
            settings = cls(**from_files)
        return _with_overrides(settings, cli_args)


def _with_overrides(
    settings: FountainKitSettings, overrides: dict[str, Any] | None
) -> FountainKitSettings:
    """Copy ``settings`` with every non-None override applied."""
    given = {k: v for k, v in (overrides or {}).items() if v is not None}
    if not given:
        return settings
    return FountainKitSettings(**{**settings.model_dump(), **given})


def _config_search_paths() -> Iterator[Path]:
    """User configs first, then project configs in the working directory."""
    user_dir = Path.home() / ".config" / "fountainkit"
    for name in CONFIG_BASENAMES:
        yield user_dir / name
    for name in PROJECT_CONFIG_BASENAMES:
        yield Path.cwd() / name


_settings: FountainKitSettings | None = None
_config_paths: list[Path | str] | None = None


def _existing_config_paths() -> list[Path | str]:
    """Configuration files that exist, looked up once per settings reset."""
    global _config_paths
    if _config_paths is None:
        found: list[Path | str] = []
        for path in _config_search_paths():
            try:
                if path.is_file():
                    found.append(path)
            except OSError:
                continue
        _config_paths = found
    return _config_paths


def get_settings() -> FountainKitSettings:
    """Process wide settings, loaded on first use."""
    global _settings
    if _settings is None:
        paths = _existing_config_paths()
        _settings = (
            FountainKitSettings.from_multiple_sources(config_files=paths)
            if paths
            else FountainKitSettings.from_env()
        )
    return _settings


def set_settings(settings: FountainKitSettings) -> None:
    """Replace the process wide settings."""
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Forget the loaded settings and the config file lookup."""
    global _settings, _config_paths
    _settings = None
    _config_paths = None


def reset_settings() -> None:
    """Reset the global settings instance."""
    clear_settings_cache()


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> FountainKitSettings:
    """Settings for one CLI command.

    Args:
        config_file: File given with ``--config``, replacing the config
            search paths
        cli_overrides: Flag values, ``None`` for flags that were not given

    Returns:
        Settings with the flags applied last

    Raises:
        FileNotFoundError: If ``config_file`` does not exist
    """
    if config_file is None:
        return _with_overrides(get_settings(), cli_overrides)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    return FountainKitSettings.from_multiple_sources(
        config_files=[config_file], cli_args=cli_overrides
    )
