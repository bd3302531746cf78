"""
Configuration Tests
-------------------
YAML loading, environment overrides, and command-line precedence.
"""

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from infra.config import BridgeConfig, ConfigError, ConfigManager
from main import parse_args, resolve_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "cli:\n"
        "  executable: sf-beta\n"
        "logging:\n"
        "  level: debug\n"
        "  file: true\n"
    )
    return path


class TestConfigManager:
    """Tests for raw configuration lookup."""

    def test_dot_notation(self, config_file):
        manager = ConfigManager(str(config_file), environ={})

        assert manager.get("cli.executable") == "sf-beta"
        assert manager.get("cli.missing", "fallback") == "fallback"
        assert manager.get_section("logging")["file"] is True

    def test_env_overrides_file(self, config_file):
        manager = ConfigManager(str(config_file), environ={"SF_BRIDGE_CLI_EXECUTABLE": "sfdx"})

        assert manager.get("cli.executable") == "sfdx"

    def test_missing_default_file_is_fine(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        manager = ConfigManager(environ={})

        assert manager.get("cli.executable") is None

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigManager(str(tmp_path / "nope.yaml"), environ={})

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("cli: [unclosed\n")

        with pytest.raises(ConfigError):
            ConfigManager(str(path), environ={})

    def test_non_mapping_root_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            ConfigManager(str(path), environ={})


class TestBridgeConfig:
    """Tests for typed settings."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = BridgeConfig.from_manager(ConfigManager(environ={}))

        assert config.executable == "sf"
        assert config.log_level == "INFO"
        assert config.log_to_file is False

    def test_from_file(self, config_file):
        config = BridgeConfig.from_manager(ConfigManager(str(config_file), environ={}))

        assert config.executable == "sf-beta"
        assert config.log_level == "DEBUG"
        assert config.log_to_file is True

    def test_env_boolean(self, config_file):
        manager = ConfigManager(str(config_file), environ={"SF_BRIDGE_LOGGING_FILE": "no"})

        assert BridgeConfig.from_manager(manager).log_to_file is False

    def test_unknown_level_rejected(self, config_file):
        manager = ConfigManager(str(config_file), environ={"SF_BRIDGE_LOGGING_LEVEL": "LOUD"})

        with pytest.raises(ConfigError):
            BridgeConfig.from_manager(manager)

    def test_empty_executable_rejected(self, config_file):
        manager = ConfigManager(str(config_file), environ={"SF_BRIDGE_CLI_EXECUTABLE": " "})

        with pytest.raises(ConfigError):
            BridgeConfig.from_manager(manager)


class TestCommandLine:
    """Command-line flags override file and environment."""

    def test_flags_win(self, config_file, monkeypatch):
        monkeypatch.delenv("SF_BRIDGE_CLI_EXECUTABLE", raising=False)
        monkeypatch.delenv("SF_BRIDGE_LOGGING_LEVEL", raising=False)

        args = parse_args([
            "--config", str(config_file), "--executable", "sf2", "--log-level", "WARNING",
        ])
        config = resolve_config(args)

        assert config.executable == "sf2"
        assert config.log_level == "WARNING"
        assert config.log_to_file is True
