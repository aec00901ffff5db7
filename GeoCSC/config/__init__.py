"""
GeoCSC Configuration System.

This package provides a centralized configuration system for GeoCSC with
support for hierarchical keys, deep merging, environment overrides and
validation.

Usage:
    from GeoCSC.config import get_config

    port = get_config().get("api.port")
    get_config().set("logging.level", "debug")
    get_config().load_config()
"""

from GeoCSC.config.manager import ConfigManager, get_config
from GeoCSC.config.schema import validate_config
from GeoCSC.config.utils import deep_merge

__all__ = ["ConfigManager", "get_config", "validate_config", "deep_merge"]
