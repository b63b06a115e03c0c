"""Tests for the settings configuration module."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from fountainkit.config import (
    FountainKitSettings,
    get_settings,
    get_settings_for_cli,
    set_settings,
)
from fountainkit.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each test in an empty directory so no project config or .env leaks in."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


class TestFountainKitSettings:
    """Field defaults and validation."""

    def test_default_values(self):
        """Test default settings values."""
        settings = FountainKitSettings()

        assert settings.debug is False
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.log_file is None
        assert settings.cache_max_entries == 64
        assert not settings.hide_notes
        assert not settings.hide_synopsis
        assert not settings.hide_boneyard

    def test_environment_variable_override(self, monkeypatch):
        """FOUNTAINKIT_ variables override defaults."""
        monkeypatch.setenv("FOUNTAINKIT_HIDE_NOTES", "true")
        monkeypatch.setenv("FOUNTAINKIT_CACHE_MAX_ENTRIES", "8")

        settings = FountainKitSettings()

        assert settings.hide_notes is True
        assert settings.cache_max_entries == 8

    def test_log_level_case_insensitive(self):
        """Log levels are normalised to upper case."""
        assert FountainKitSettings(log_level="debug").log_level == "DEBUG"

    def test_log_format_case_insensitive(self):
        """Log formats are normalised to lower case."""
        assert FountainKitSettings(log_format="JSON").log_format == "json"

    @pytest.mark.parametrize(
        "field",
        [{"log_level": "LOUD"}, {"log_format": "xml"}, {"cache_max_entries": 0}],
    )
    def test_invalid_values_rejected(self, field):
        """Values outside the allowed set fail validation."""
        with pytest.raises(ValidationError):
            FountainKitSettings(**field)

    def test_log_file_expands_user(self, tmp_path):
        """Log file paths are expanded and resolved."""
        settings = FountainKitSettings(log_file="~/logs/fk.log")

        assert settings.log_file == (tmp_path / "home" / "logs" / "fk.log").resolve()


class TestFromFile:
    """Loading settings from configuration files."""

    def test_yaml(self, tmp_path):
        """YAML files are supported."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"hide_notes": True, "log_level": "info"}))

        settings = FountainKitSettings.from_file(path)

        assert settings.hide_notes is True
        assert settings.log_level == "INFO"

    def test_empty_yaml(self, tmp_path):
        """An empty YAML file gives defaults."""
        path = tmp_path / "config.yml"
        path.write_text("")

        assert FountainKitSettings.from_file(path).hide_notes is False

    def test_toml(self, tmp_path):
        """TOML files are supported."""
        path = tmp_path / "config.toml"
        path.write_text("hide_synopsis = true\ncache_max_entries = 5\n")

        settings = FountainKitSettings.from_file(path)

        assert settings.hide_synopsis is True
        assert settings.cache_max_entries == 5

    def test_json(self, tmp_path):
        """JSON files are supported."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"hide_boneyard": True}))

        assert FountainKitSettings.from_file(path).hide_boneyard is True

    def test_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            FountainKitSettings.from_file(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path):
        """Unknown suffixes raise a ConfigurationError with a hint."""
        path = tmp_path / "config.ini"
        path.write_text("[fountainkit]\n")

        with pytest.raises(ConfigurationError) as exc_info:
            FountainKitSettings.from_file(path)

        assert exc_info.value.details["detected_format"] == ".ini"
        assert ".toml" in exc_info.value.hint

    def test_common_key_mistake(self, tmp_path):
        """Misspelled keys point at the correct key."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"hide_comments": True}))

        with pytest.raises(ConfigurationError) as exc_info:
            FountainKitSettings.from_file(path)

        assert exc_info.value.details["correct_key"] == "hide_boneyard"


class TestFromMultipleSources:
    """Merging files, environment and CLI arguments."""

    def test_later_files_override_earlier(self, tmp_path):
        """The last file wins for keys it sets."""
        first = tmp_path / "first.yaml"
        first.write_text(yaml.safe_dump({"hide_notes": True, "log_level": "INFO"}))
        second = tmp_path / "second.json"
        second.write_text(json.dumps({"log_level": "ERROR"}))

        settings = FountainKitSettings.from_multiple_sources(
            config_files=[first, second]
        )

        assert settings.hide_notes is True
        assert settings.log_level == "ERROR"

    def test_missing_files_are_skipped(self, tmp_path):
        """Missing config files fall back to defaults."""
        settings = FountainKitSettings.from_multiple_sources(
            config_files=[tmp_path / "missing.yaml"]
        )

        assert settings.log_level == "WARNING"

    def test_cli_args_override_files(self, tmp_path):
        """CLI arguments win, None values are ignored."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"hide_notes": True, "hide_synopsis": True}))

        settings = FountainKitSettings.from_multiple_sources(
            config_files=[path],
            cli_args={"hide_notes": False, "hide_synopsis": None},
        )

        assert settings.hide_notes is False
        assert settings.hide_synopsis is True

    def test_env_file(self, tmp_path):
        """A .env file can be given explicitly."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("FOUNTAINKIT_HIDE_BONEYARD=true\n")

        settings = FountainKitSettings.from_multiple_sources(env_file=env_file)

        assert settings.hide_boneyard is True


class TestGlobalSettings:
    """The process wide settings instance."""

    def test_get_settings_is_cached(self):
        """The same instance is returned until reset."""
        assert get_settings() is get_settings()

    def test_set_settings(self):
        """An explicit instance replaces the global one."""
        custom = FountainKitSettings(hide_notes=True)

        set_settings(custom)

        assert get_settings() is custom

    def test_project_config_file_is_loaded(self, tmp_path):
        """fountainkit.yaml in the working directory is picked up."""
        (tmp_path / "fountainkit.yaml").write_text(
            yaml.safe_dump({"hide_synopsis": True})
        )

        assert get_settings().hide_synopsis is True


class TestGetSettingsForCli:
    """Settings used by CLI commands."""

    def test_overrides_applied(self):
        """Non-None overrides replace the global values."""
        settings = get_settings_for_cli(
            cli_overrides={"hide_notes": True, "hide_boneyard": None}
        )

        assert settings.hide_notes is True
        assert settings.hide_boneyard is False

    def test_config_file(self, tmp_path):
        """An explicit config file is loaded."""
        path = tmp_path / "cli.toml"
        path.write_text('log_level = "debug"\n')

        settings = get_settings_for_cli(config_file=path)

        assert settings.log_level == "DEBUG"

    def test_missing_config_file(self):
        """An explicit missing file is an error."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            get_settings_for_cli(config_file=Path("does-not-exist.yaml"))
