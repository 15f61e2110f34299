"""Tests for watch configuration loading and validation."""

import pytest
import yaml
from pydantic import ValidationError

from dirwatch.config import (
    apply_env_overrides,
    find_config,
    load_watch_config,
    save_watch_config,
)
from dirwatch.constants import CONFIG_FILE, DEFAULT_POLL_INTERVAL
from dirwatch.core import FingerprintMode, WatchConfig
from dirwatch.errors import ConfigError


class TestWatchConfig:
    """Test model validation."""

    def test_defaults(self):
        config = WatchConfig(roots=["src"])

        assert config.pattern is None
        assert config.mode == FingerprintMode.HASH
        assert config.interval == DEFAULT_POLL_INTERVAL
        assert config.recursive is False
        assert config.ignore == []

    def test_requires_a_root(self):
        with pytest.raises(ValidationError):
            WatchConfig(roots=[])

    def test_negative_interval(self):
        with pytest.raises(ValidationError):
            WatchConfig(roots=["src"], interval=-0.5)

    def test_zero_interval_allowed(self):
        assert WatchConfig(roots=["src"], interval=0).interval == 0

    def test_invalid_pattern(self):
        with pytest.raises(ValidationError) as exc_info:
            WatchConfig(roots=["src"], pattern="[unclosed")
        assert "regular expression" in str(exc_info.value)

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            WatchConfig(roots=["src"], mode="inotify")


class TestLoadConfig:
    """Test reading YAML configuration files."""

    def test_top_level_fields(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("roots: [src, tests]\npattern: '\\.py$'\nmode: mtime\ninterval: 2\n")

        config = load_watch_config(path)

        assert config.roots == ["src", "tests"]
        assert config.pattern == r"\.py$"
        assert config.mode == FingerprintMode.MTIME
        assert config.interval == 2.0

    def test_watch_section(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("watch:\n  roots: [data]\n  recursive: true\n  ignore: ['*.tmp']\n")

        config = load_watch_config(path)

        assert config.roots == ["data"]
        assert config.recursive is True
        assert config.ignore == ["*.tmp"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_watch_config(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("roots: [src\n")

        with pytest.raises(ConfigError, match="Malformed"):
            load_watch_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("- src\n- tests\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_watch_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("roots: [src]\ninterval: -3\n")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_watch_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("")

        with pytest.raises(ConfigError):
            load_watch_config(path)


class TestFindConfig:
    def test_found(self, tmp_path):
        (tmp_path / CONFIG_FILE).write_text("roots: [src]\n")
        assert find_config(tmp_path) == tmp_path / CONFIG_FILE

    def test_absent(self, tmp_path):
        assert find_config(tmp_path) is None

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILE).write_text("roots: [src]\n")
        assert find_config() is not None


class TestSaveConfig:
    def test_round_trip(self, tmp_path):
        config = WatchConfig(roots=["src"], pattern="x", mode="mtime", interval=0.25)
        path = tmp_path / "nested" / CONFIG_FILE

        save_watch_config(config, path)

        assert load_watch_config(path) == config
        assert yaml.safe_load(path.read_text())["mode"] == "mtime"

    def test_no_temp_files_left(self, tmp_path):
        save_watch_config(WatchConfig(roots=["src"]), tmp_path / CONFIG_FILE)
        assert [p.name for p in tmp_path.iterdir()] == [CONFIG_FILE]


class TestEnvOverrides:
    def test_interval_override(self, monkeypatch):
        monkeypatch.setenv("DIRWATCH_INTERVAL", "0.2")
        config = apply_env_overrides(WatchConfig(roots=["src"]))
        assert config.interval == 0.2

    def test_unset_leaves_config_alone(self, monkeypatch):
        monkeypatch.delenv("DIRWATCH_INTERVAL", raising=False)
        config = WatchConfig(roots=["src"], interval=3)
        assert apply_env_overrides(config) is config

    @pytest.mark.parametrize("value", ["fast", "-1"])
    def test_bad_values(self, monkeypatch, value):
        monkeypatch.setenv("DIRWATCH_INTERVAL", value)
        with pytest.raises(ConfigError):
            apply_env_overrides(WatchConfig(roots=["src"]))
