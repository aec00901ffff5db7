"""
Configuration manager for GeoCSC.

This module implements the ConfigManager class that provides a centralized
configuration system with support for hierarchical keys, deep merging,
loading from files and environment variable overrides.
"""

import os
import json
import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union, List

import dotenv
import yaml

from GeoCSC.config.defaults import DEFAULT_CONFIG
from GeoCSC.config.schema import validate_config
from GeoCSC.config.utils import deep_merge
from GeoCSC.exceptions import ConfigError
from GeoCSC.utils.logging import get_logger

CONFIG_FILENAME = 'geocsc.yml'

# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    'HOST': ('api.host', str),
    'PORT': ('api.port', int),
    'GEOCSC_DATA_PATH': ('data.location', str),
    'GEOCSC_DATA_URL': ('data.download_url', str),
}

dotenv.load_dotenv()

class ConfigManager:
    """
    Configuration manager for GeoCSC.

    Implements a singleton pattern to ensure only one configuration
    instance exists across the application.

    Features:
    - Hierarchical key access (e.g., "api.port")
    - Deep merging of configuration dictionaries
    - Loading from YAML or JSON files
    - Environment variable overrides (HOST, PORT, ...), .env aware
    - Configuration validation
    - Feature flags
    """
    _instance = None

    def __new__(cls) -> 'ConfigManager':
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Reset the configuration to the defaults plus environment overrides."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger = get_logger(__name__)
        self._apply_env_overrides()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Hierarchical key using dot notation (e.g., "api.port")
            default: Value to return if the key is not found

        Examples:
            >>> get_config().get("api.port", 3000)
        """
        if not key:
            return default

        value = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value using dot notation.

        Intermediate dictionaries are created when missing.

        Examples:
            >>> get_config().set("data.location", "/srv/csc.min.json")
        """
        if not key:
            return

        parts = key.split('.')
        config = self._config

        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def is_feature_enabled(self, feature_name: str) -> bool:
        """Check if a feature flag is enabled; unknown flags are disabled."""
        return bool(self.get(f"features.{feature_name}", False))

    def enable_feature(self, feature_name: str) -> None:
        self.set(f"features.{feature_name}", True)

    def disable_feature(self, feature_name: str) -> None:
        self.set(f"features.{feature_name}", False)

    def get_data_location(self) -> Optional[str]:
        """
        Get the configured dataset path.

        Returns:
            Optional[str]: The configured path or None to use the data directory
        """
        return self.get("data.location")

    def should_auto_download(self) -> bool:
        """Return True if a missing dataset should be downloaded at load time."""
        return self.is_feature_enabled("auto_fetch_data")

    def get_api_settings(self) -> Dict[str, Any]:
        """
        Get the API server settings.

        Returns:
            Dict[str, Any]: host, port, debug and workers
        """
        return {
            "host": self.get("api.host", "0.0.0.0"),
            "port": self.get("api.port", 3000),
            "debug": self.get("api.debug", False),
            "workers": self.get("api.workers"),
        }

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides on top of the current values."""
        for env_var, (key, converter) in ENV_OVERRIDES.items():
            raw = os.environ.get(env_var)
            if raw is None or raw == '':
                continue
            try:
                self.set(key, converter(raw))
            except ValueError:
                self.logger.warning(f"Ignoring invalid value for {env_var}: {raw!r}")

    def find_config_file(self) -> Optional[Path]:
        """
        Find the configuration file in standard locations.

        Searches, in order:
        1. Current working directory: ./geocsc.yml
        2. User's home directory: ~/.geocsc/geocsc.yml
        3. Package directory: [package_path]/data/geocsc.yml

        Returns:
            Optional[Path]: Path to the configuration file if found, None otherwise
        """
        search_locations = [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / '.geocsc' / CONFIG_FILENAME,
            Path(__file__).parent.parent / 'data' / CONFIG_FILENAME
        ]

        for path in search_locations:
            if path.is_file():
                self.logger.debug(f"Found configuration file at: {path}")
                return path

        self.logger.debug("No configuration file found in standard locations")
        return None

    def load_config(self) -> bool:
        """
        Load configuration from the first available standard location.

        Invalid files are reported and ignored, leaving the defaults in place.

        Returns:
            bool: True if a configuration file was found and loaded, False otherwise
        """
        config_path = self.find_config_file()

        if not config_path:
            self.logger.info("No configuration file found, using defaults")
            return False

        try:
            errors = self.load_from_file(config_path)
        except (OSError, ValueError, yaml.YAMLError, ConfigError) as e:
            self.logger.error(f"Failed to load configuration file: {e}")
            return False

        if errors:
            self.logger.warning(f"Configuration validation errors: {errors}")
            return False

        self.logger.info(f"Loaded configuration from {config_path}")
        return True

    def load_from_file(self, path: Union[str, Path]) -> Dict[str, List[str]]:
        """
        Load configuration from a specific YAML or JSON file.

        The file is merged onto the current configuration only when it
        validates; environment overrides are re-applied afterwards.

        Args:
            path: Path to the configuration file

        Returns:
            Dict[str, List[str]]: Validation errors by section, empty when valid

        Raises:
            ConfigError: If the file does not exist or has an unsupported format
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        config = read_config_file(path)

        errors = validate_config(config)

        if not errors and config:
            self._config = deep_merge(self._config, config)
            self._apply_env_overrides()

        return errors

    def get_all(self) -> Dict[str, Any]:
        """Return a deep copy of the entire configuration dictionary."""
        return copy.deepcopy(self._config)


def read_config_file(path: Path) -> Any:
    """
    Parse a YAML or JSON configuration file.

    Raises:
        ConfigError: If the extension is not .yml, .yaml or .json
    """
    suffix = path.suffix.lower()
    with open(path, 'r', encoding='utf-8') as f:
        if suffix in ('.yaml', '.yml'):
            return yaml.safe_load(f)
        if suffix == '.json':
            return json.load(f)
    raise ConfigError(f"Unsupported configuration file format: {path.suffix}")


def get_config() -> ConfigManager:
    """
    Get the singleton ConfigManager instance.

    Examples:
        >>> from GeoCSC.config import get_config
        >>> port = get_config().get("api.port")
    """
    return ConfigManager()
