"""
Configuration-related commands for the GeoCSC CLI.

Each function returns a process exit code (0 for success, 1 for error).
"""

import json
from pathlib import Path
from typing import Optional

import click
import yaml

from GeoCSC.config import get_config, validate_config
from GeoCSC.config.defaults import DEFAULT_DOWNLOAD_URL
from GeoCSC.config.manager import CONFIG_FILENAME, read_config_file
from GeoCSC.exceptions import ConfigError
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__)

def config_show(format_type: str = 'yaml', section: Optional[str] = None) -> int:
    """
    Display the current active configuration.

    Args:
        format_type: Output format (yaml or json)
        section: Optional section to display (e.g., 'api', 'data')
    """
    config = get_config()

    if section:
        config_data = config.get(section)
        if config_data is None:
            click.echo(f"Error: Section '{section}' not found in configuration", err=True)
            return 1
    else:
        config_data = config.get_all()

    if format_type.lower() == 'json':
        click.echo(json.dumps(config_data, indent=2))
    else:
        click.echo(yaml.safe_dump(config_data, default_flow_style=False, sort_keys=False))

    return 0

def config_init(output_path: Optional[str] = None) -> int:
    """
    Create a template configuration file with explanatory comments.

    Args:
        output_path: Path where to create the template file (default: ./geocsc.yml)
    """
    path = Path(output_path) if output_path else Path.cwd() / CONFIG_FILENAME

    if path.exists():
        click.confirm(f"File {path} already exists. Overwrite?", abort=True)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_create_config_template(), encoding='utf-8')
    except OSError as e:
        logger.error(f"Error creating configuration template: {e}")
        click.echo(f"Error: Could not write {path}: {e}", err=True)
        return 1

    click.echo(f"Configuration template created at: {path}")
    return 0

def config_validate(config_path: str) -> int:
    """
    Validate a configuration file.

    Args:
        config_path: Path to the YAML or JSON configuration file
    """
    path = Path(config_path)

    if not path.exists():
        click.echo(f"Error: Configuration file not found: {path}", err=True)
        return 1

    try:
        config_data = read_config_file(path)
    except ConfigError as e:
        click.echo(f"Error: {e.message}", err=True)
        return 1
    except (yaml.YAMLError, ValueError) as e:
        click.echo(f"Error: Could not parse {path}: {e}", err=True)
        return 1

    errors = validate_config(config_data)

    if not errors:
        click.echo(f"Configuration file is valid: {path}")
        return 0

    click.echo("Configuration validation errors:")
    for section, section_errors in errors.items():
        for error in section_errors:
            click.echo(f"  - {section}: {error}")
    return 1

def _create_config_template() -> str:
    """Return the commented YAML template written by `config init`."""
    return f"""# GeoCSC Configuration File
# Every section is optional; omitted values fall back to the defaults.
# HOST, PORT, GEOCSC_DATA_PATH and GEOCSC_DATA_URL environment variables
# (or a .env file) override the values below.

# Dataset Configuration
data:
  # Path to the nested countries/states/cities JSON file (null for the data directory)
  location: null
  # File name looked up in the data directory
  filename: csc.min.json
  # URL used by `GeoCSC fetch` and by auto_fetch_data
  download_url: {DEFAULT_DOWNLOAD_URL}

# Logging Configuration
logging:
  # Logging level (debug, info, warning, error, critical)
  level: info
  # Log format (json, text)
  format: text
  # Log file path (null for console only)
  file: null

# Feature Flags
features:
  # Download the dataset at startup if it is missing
  auto_fetch_data: false

# API Configuration
api:
  host: 0.0.0.0
  port: 3000
  debug: false
  # Gunicorn worker processes (null for 2 x CPU count + 1)
  workers: null
"""
