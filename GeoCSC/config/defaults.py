"""
Default configuration values for GeoCSC.

These values are used when no configuration file is found and define the
base structure every loaded file is merged onto.

Default configuration values can be overridden by:
1. Configuration files (geocsc.yml)
2. Environment variables (HOST, PORT, GEOCSC_DATA_PATH, GEOCSC_DATA_URL),
   including those read from a .env file
3. Programmatic configuration via the ConfigManager
"""

from typing import Dict, Any

DEFAULT_DATASET_FILENAME = "csc.min.json"

DEFAULT_DOWNLOAD_URL = (
    "https://raw.githubusercontent.com/dr5hn/countries-states-cities-database/"
    "master/json/countries%2Bstates%2Bcities.json"
)

# Default dataset configuration
DATA_DEFAULTS: Dict[str, Any] = {
    # Path to the nested countries/states/cities JSON file (null = data directory)
    "location": None,
    # File name looked up inside the data directory
    "filename": DEFAULT_DATASET_FILENAME,
    # URL to download the dataset from
    "download_url": DEFAULT_DOWNLOAD_URL,
}

# Default logging configuration
LOGGING_DEFAULTS: Dict[str, Any] = {
    # Logging level: 'debug', 'info', 'warning', 'error', 'critical'
    "level": "info",
    # Logging format: 'json', 'text'
    "format": "text",
    # Log file path (null = log to stderr only)
    "file": None
}

# Default feature flags
FEATURES_DEFAULTS: Dict[str, bool] = {
    # Download the dataset at startup when the file is missing
    "auto_fetch_data": False
}

# Default API configuration
API_DEFAULTS: Dict[str, Any] = {
    # Host to bind the API server to
    "host": "0.0.0.0",
    # Port to run the API server on
    "port": 3000,
    # Enable debug mode for development
    "debug": False,
    # Number of gunicorn worker processes (null = derived from CPU count)
    "workers": None
}

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "data": DATA_DEFAULTS,
    "logging": LOGGING_DEFAULTS,
    "features": FEATURES_DEFAULTS,
    "api": API_DEFAULTS
}
