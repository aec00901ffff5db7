"""
GeoCSC - Read-only country, state and city lookups over a static dataset.

The nested countries -> states -> cities dataset is loaded and validated
once, indexed in memory, and served through an immutable GeoIndex with O(1)
lookups by ISO2 country code and by (country code, state id).

Key Components:
- GeoIndex: Immutable index with the three lookup operations
- load_dataset: Locate, read and validate the nested dataset
- GeoService: Dictionary-returning service shared by the CLI and the API
- create_app / start_server: Flask REST API

Usage Examples:
    # Querying the index directly
    from GeoCSC import GeoIndex, load_dataset
    index = GeoIndex.build(load_dataset())
    index.states_for_country("us")

    # Starting the API server
    from GeoCSC import start_server
    start_server(host='localhost', port=3000)

    # Setting the log level
    from GeoCSC import set_log_level
    set_log_level('debug')
"""

import os

__version__ = '1.0.0'

from GeoCSC.config import get_config
from GeoCSC.utils.logging import (
    LOG_FILE_ENV_VAR,
    LOG_FORMAT_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    configure_logging,
    get_logger,
    set_log_level,
)

logger = get_logger(__name__)

def initialize_config() -> bool:
    """
    Initialize the GeoCSC configuration system.

    Searches standard locations for geocsc.yml and applies it, then sets
    up logging from the resulting configuration. The GEOCSC_LOG_LEVEL,
    GEOCSC_LOG_FORMAT and GEOCSC_LOG_FILE environment variables take
    precedence over the logging section.

    Returns:
        bool: True if a config file was found and loaded, False if using defaults
    """
    config = get_config()
    loaded = config.load_config()
    log_format = os.environ.get(LOG_FORMAT_ENV_VAR) or config.get("logging.format", "text")
    configure_logging(
        level=os.environ.get(LOG_LEVEL_ENV_VAR) or config.get("logging.level", "info"),
        use_json=log_format.lower() == "json",
        log_file=os.environ.get(LOG_FILE_ENV_VAR) or config.get("logging.file") or None
    )
    return loaded

from GeoCSC.data import GeoIndex, load_dataset
from GeoCSC.services import GeoService
from GeoCSC.api.server import create_app, start_server

__all__ = [
    'GeoIndex',
    'GeoService',
    'load_dataset',
    'create_app',
    'start_server',
    'initialize_config',
    'set_log_level',
    'get_config'
]
