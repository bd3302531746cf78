"""
Configuration Manager
---------------------
Loads configuration from YAML with environment variable overrides.

Example config.yaml:

    cli:
      executable: sf
    logging:
      level: INFO
      dir: logs
      file: false

Any key can be overridden with SF_BRIDGE_<SECTION>_<KEY>, e.g.
SF_BRIDGE_LOGGING_LEVEL=DEBUG.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml


ENV_PREFIX = "SF_BRIDGE"
DEFAULT_CONFIG_PATH = "config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Configuration file could not be read or has the wrong shape."""


class ConfigManager:
    """
    Centralized configuration management.
    Environment variables override file config.
    """

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._explicit_path = config_path is not None
        self._environ = os.environ if environ is None else environ
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("sf_bridge.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        if not self._config_path.exists():
            if self._explicit_path:
                raise ConfigError(f"Config file not found: {self._config_path}")
            self._logger.debug(f"No config file at {self._config_path}, using defaults")
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self._config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {self._config_path}")

        self._config = data
        self._logger.info(f"Loaded config from {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Supports dot notation: 'section.key'
        """
        env_key = f"{ENV_PREFIX}_{key.upper().replace('.', '_')}"
        env_value = self._environ.get(env_key)
        if env_value is not None:
            return env_value

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUE_VALUES

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section."""
        return self._config.get(section, {})


@dataclass
class BridgeConfig:
    """Typed settings for the bridge process."""
    executable: str = "sf"
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    @classmethod
    def from_manager(cls, manager: ConfigManager) -> "BridgeConfig":
        defaults = cls()
        executable = str(manager.get("cli.executable", defaults.executable)).strip()
        if not executable:
            raise ConfigError("cli.executable must not be empty")

        level = str(manager.get("logging.level", defaults.log_level)).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown logging level: {level}")

        return cls(
            executable=executable,
            log_level=level,
            log_dir=str(manager.get("logging.dir", defaults.log_dir)),
            log_to_file=manager.get_bool("logging.file", defaults.log_to_file),
        )

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def load_config(config_path: Optional[str] = None) -> BridgeConfig:
    """Load BridgeConfig from an optional YAML file plus environment."""
    return BridgeConfig.from_manager(ConfigManager(config_path))
