from typing import TypedDict, Literal, Optional, Dict, Any, List
import re

LoggingLevel = Literal["debug", "info", "warning", "error", "critical"]
LoggingFormat = Literal["json", "text"]

class DataConfig(TypedDict):
    """TypedDict for dataset configuration validation"""
    location: Optional[str]
    filename: str
    download_url: str

class LoggingConfig(TypedDict):
    """TypedDict for logging configuration validation"""
    level: LoggingLevel
    format: LoggingFormat
    file: Optional[str]

class FeaturesConfig(TypedDict):
    """TypedDict for feature flags validation"""
    auto_fetch_data: bool

class ApiConfig(TypedDict):
    """TypedDict for API configuration validation"""
    host: str
    port: int
    debug: bool
    workers: Optional[int]

class ConfigSchema(TypedDict, total=False):
    """Root configuration schema; every section is optional in a config file"""
    data: DataConfig
    logging: LoggingConfig
    features: FeaturesConfig
    api: ApiConfig

KNOWN_SECTIONS = ("data", "logging", "features", "api")

def is_valid_logging_level(level: Any) -> bool:
    """Validate the logging level against allowed values"""
    return level in ("debug", "info", "warning", "error", "critical")

def is_valid_logging_format(fmt: Any) -> bool:
    """Validate the logging format against allowed values"""
    return fmt in ("json", "text")

def is_valid_url(url: str) -> bool:
    """
    Basic validation for URLs. Checks for common URL patterns.
    """
    url_pattern = re.compile(
        r'^https?://'
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|'
        r'localhost|'
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'
        r'(?::\d+)?'
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)
    return bool(url_pattern.match(url))

def is_valid_port(port: Any) -> bool:
    """Validate that a port number is within the allowed range."""
    return isinstance(port, int) and not isinstance(port, bool) and 1 <= port <= 65535

def validate_data_config(data_config: Dict[str, Any]) -> List[str]:
    """
    Validate the data configuration section.

    Args:
        data_config: Data configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    location = data_config.get("location")
    if location is not None and not isinstance(location, str):
        errors.append(f"Data location must be a string or null, got {type(location).__name__}")

    if "filename" in data_config:
        filename = data_config["filename"]
        if not isinstance(filename, str) or not filename:
            errors.append("Data filename must be a non-empty string")
        elif not filename.endswith(".json"):
            errors.append(f"Data filename must be a .json file, got {filename}")

    if "download_url" in data_config:
        url = data_config["download_url"]
        if not isinstance(url, str):
            errors.append(f"Download URL must be a string, got {type(url).__name__}")
        elif not is_valid_url(url):
            errors.append(f"Invalid download URL: {url}")

    return errors

def validate_logging_config(logging_config: Dict[str, Any]) -> List[str]:
    """
    Validate the logging configuration section.

    Args:
        logging_config: Logging configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    if "level" in logging_config and not is_valid_logging_level(logging_config["level"]):
        errors.append(f"Invalid logging level: {logging_config['level']}. Must be one of: debug, info, warning, error, critical")

    if "format" in logging_config and not is_valid_logging_format(logging_config["format"]):
        errors.append(f"Invalid logging format: {logging_config['format']}. Must be one of: json, text")

    log_file = logging_config.get("file")
    if log_file is not None and not isinstance(log_file, str):
        errors.append("Log file must be a string or null")

    return errors

def validate_features(features: Dict[str, Any]) -> List[str]:
    """
    Validate the feature flags configuration.

    Args:
        features: Feature flags configuration dictionary

    Returns:
        List of validation error messages
    """
    errors = []

    for feature, value in features.items():
        if feature not in FeaturesConfig.__annotations__:
            errors.append(f"Unknown feature flag: {feature}")
        elif not isinstance(value, bool):
            errors.append(f"Feature flag '{feature}' must be a boolean value, got {type(value).__name__}")

    return errors

def validate_api_config(api_config: Dict[str, Any]) -> List[str]:
    """
    Validate the API configuration section.

    Args:
        api_config: The API configuration dictionary

    Returns:
        List of error messages for invalid configurations
    """
    errors = []

    if "host" in api_config and (not isinstance(api_config["host"], str) or not api_config["host"]):
        errors.append("API host must be a non-empty string")

    if "port" in api_config and not is_valid_port(api_config["port"]):
        errors.append("API port must be an integer between 1 and 65535")

    if "debug" in api_config and not isinstance(api_config["debug"], bool):
        errors.append("API debug setting must be a boolean")

    workers = api_config.get("workers")
    if workers is not None:
        if not isinstance(workers, int) or isinstance(workers, bool) or workers <= 0:
            errors.append("API workers must be null or a positive integer")

    return errors

_SECTION_VALIDATORS = {
    "data": validate_data_config,
    "logging": validate_logging_config,
    "features": validate_features,
    "api": validate_api_config,
}

def validate_config(config: Any) -> Dict[str, List[str]]:
    """
    Validate a configuration structure.

    Sections may be omitted, since files are merged onto the defaults;
    sections that are present must be mappings with valid values.

    Args:
        config: The configuration dictionary to validate

    Returns:
        Dictionary mapping sections to lists of error messages
    """
    if config is None:
        return {}
    if not isinstance(config, dict):
        return {"config": [f"Configuration must be a mapping, got {type(config).__name__}"]}

    errors: Dict[str, List[str]] = {}

    for section, value in config.items():
        if section not in KNOWN_SECTIONS:
            errors[section] = [f"Unknown configuration section: {section}"]
            continue
        if not isinstance(value, dict):
            errors[section] = [f"Section '{section}' must be a mapping"]
            continue
        section_errors = _SECTION_VALIDATORS[section](value)
        if section_errors:
            errors[section] = section_errors

    return errors
