"""
Configuration management for PaperUpdater.

This module handles configuration loading, validation, and management
using YAML files and environment variables.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from platformdirs import user_config_dir, user_log_dir

from ..constants import (
    DEFAULT_DESTINATION, DEFAULT_HISTORY_FILENAME, DEFAULT_PROJECT,
    DEFAULT_TIMEOUT_SECONDS, DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_SECONDS, PAPER_API_URL
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV: str = "PAPERUPDATER_CONFIG_DIR"


class Config:
    """Configuration manager for PaperUpdater."""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.app_name = "paperupdater"
        if config_dir is None:
            config_dir = Path(os.environ.get(CONFIG_DIR_ENV) or user_config_dir(self.app_name))
        self.config_dir = Path(config_dir)
        self.log_dir = Path(user_log_dir(self.app_name))
        self.config_file = self.config_dir / "config.yaml"

        # Default configuration
        self._defaults = {
            "api": {
                "base_url": PAPER_API_URL,
                "project": DEFAULT_PROJECT,
                "timeout": DEFAULT_TIMEOUT_SECONDS,
            },
            "downloads": {
                "timeout": DOWNLOAD_TIMEOUT_SECONDS,
                "chunk_size": DOWNLOAD_CHUNK_SIZE,
            },
            "paths": {
                "destination": DEFAULT_DESTINATION,
                "history_file": None,
            },
            "updates": {
                "stable_only": False,
            },
            "logging": {
                "level": "INFO",
                "file_logging": False,
                "log_file": str(self.log_dir / "paperupdater.log"),
                "max_log_size": "10MB",
                "backup_count": 5,
            },
            "ui": {
                "progress_bar": True,
                "colored_output": True,
            }
        }

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file, falling back to defaults."""
        if not self.config_file.exists():
            return copy.deepcopy(self._defaults)

        try:
            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f) or {}

            if not isinstance(config, dict):
                raise ValueError("top level of the config file must be a mapping")

            merged_config = self._merge_configs(self._defaults, config)

            logger.debug(f"Loaded configuration from {self.config_file}")
            return merged_config

        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file: {e}. Using defaults.")
            return copy.deepcopy(self._defaults)

    def _merge_configs(self, defaults: Dict, user_config: Dict) -> Dict:
        """Recursively merge user config with defaults."""
        result = copy.deepcopy(defaults)

        for key, value in user_config.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_number(
        self,
        key: str,
        default: Union[int, float],
        kind: Callable[[Any], Union[int, float]] = int,
    ) -> Union[int, float]:
        """
        Get a positive numeric configuration value.

        Args:
            key: Dot-notation key
            default: Value used when the key is not set
            kind: int or float

        Raises:
            ConfigurationError: If the value cannot be used as a positive number
        """
        value = self.get(key, default)
        try:
            number = kind(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {key}: {value!r}", e) from e

        if isinstance(value, bool) or number <= 0:
            raise ConfigurationError(f"Invalid value for {key}: {value!r} (must be a positive number)")

        return number

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save_config(self, config: Optional[Dict] = None) -> bool:
        """Save configuration to file."""
        try:
            config_to_save = config or self._config

            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                yaml.safe_dump(config_to_save, f, default_flow_style=False, indent=2)

            logger.info(f"Configuration saved to {self.config_file}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self._config = copy.deepcopy(self._defaults)
        self.save_config()
        logger.info("Configuration reset to defaults")


# Global configuration instance
config = Config()
