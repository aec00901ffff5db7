"""
Command-line interface (CLI) commands for the GeoCSC package.

This module provides CLI commands for querying countries, states and cities,
fetching the dataset, running the API server and managing configuration.
"""

import sys
from typing import Optional

import click

from GeoCSC import initialize_config
from GeoCSC.api.server import start_server
from GeoCSC.cli.config_commands import config_show, config_init, config_validate
from GeoCSC.data.loader import download_dataset
from GeoCSC.exceptions import GeoDataError
from GeoCSC.services.geo_service import GeoService
from GeoCSC.utils import handle_exception, print_json
from GeoCSC.utils.logging import get_logger, set_log_level

logger = get_logger(__name__)

# Common options
def data_path_option(f):
    return click.option('--data-path', type=click.Path(dir_okay=False),
                        help='Path to the countries/states/cities JSON dataset')(f)

def apply_log_level(ctx, param, value):
    if value:
        set_log_level(value)
    return value

def log_level_option(f):
    return click.option('--log-level',
                        type=click.Choice(['debug', 'info', 'warning', 'error', 'critical'], case_sensitive=False),
                        callback=apply_log_level, expose_value=False, is_eager=True,
                        help='Set the logging level')(f)

def fail(error: Exception, context: str) -> None:
    """Report an error to the user and exit with status 1."""
    geo_error = handle_exception(error, context=context)
    click.echo(f"Error: {geo_error.user_message}", err=True)
    sys.exit(1)

def load_service(data_path: Optional[str]) -> GeoService:
    try:
        return GeoService.from_source(data_path)
    except GeoDataError as e:
        fail(e, "Error loading dataset")

@click.group()
def cli():
    """GeoCSC CLI for country, state and city lookups."""
    pass

@cli.group('config')
def config_group():
    """
    Manage GeoCSC configuration.

    Commands for viewing, creating and validating configuration files.
    """
    pass

@config_group.command('show')
@click.option('--format', 'format_type', type=click.Choice(['yaml', 'json'], case_sensitive=False),
              default='yaml', help='Output format (yaml or json)')
@click.option('--section', help='Show only a specific configuration section')
@log_level_option
def show_config_command(format_type, section):
    """Display the current active configuration."""
    sys.exit(config_show(format_type, section))

@config_group.command('init')
@click.option('--output', 'output_path', help='Path where to create the configuration file')
@log_level_option
def init_config_command(output_path):
    """Create a template configuration file with explanatory comments."""
    sys.exit(config_init(output_path))

@config_group.command('validate')
@click.argument('config_path')
@log_level_option
def validate_config_command(config_path):
    """Validate a configuration file."""
    sys.exit(config_validate(config_path))

@cli.command('countries')
@data_path_option
@log_level_option
def countries_command(data_path):
    """List all countries."""
    print_json(load_service(data_path).get_countries())

@cli.command('states')
@click.argument('country_code')
@data_path_option
@log_level_option
def states_command(country_code, data_path):
    """List all states of a country (ISO2 code, any case)."""
    service = load_service(data_path)
    try:
        print_json(service.get_states(country_code))
    except GeoDataError as e:
        fail(e, "Error getting states")

@cli.command('cities')
@click.argument('country_code')
@click.argument('state_id', type=int)
@data_path_option
@log_level_option
def cities_command(country_code, state_id, data_path):
    """List all cities of a state within a country."""
    service = load_service(data_path)
    try:
        print_json(service.get_cities(country_code, state_id))
    except GeoDataError as e:
        fail(e, "Error getting cities")

@cli.command('stats')
@data_path_option
@log_level_option
def stats_command(data_path):
    """Show the number of countries, states and cities in the dataset."""
    print_json(load_service(data_path).get_stats())

@cli.command('fetch')
@click.option('--url', help='Dataset URL (default: configured data.download_url)')
@click.option('--output', 'output_path', type=click.Path(dir_okay=False),
              help='Where to save the dataset (default: data directory)')
@click.option('--force', is_flag=True, help='Download even if the dataset already exists')
@log_level_option
def fetch_command(url, output_path, force):
    """Download the countries/states/cities dataset."""
    try:
        path = download_dataset(url=url, destination=output_path, force=force)
    except GeoDataError as e:
        fail(e, "Error downloading dataset")
    click.echo(f"Dataset available at {path}")

@cli.command('server')
@click.option('--host', type=str, help='The host to bind to (default: api.host / HOST)')
@click.option('--port', type=int, help='The port to bind to (default: api.port / PORT)')
@click.option('--debug/--no-debug', default=None, help='Enable debug mode')
@data_path_option
@log_level_option
def server_command(host, port, debug, data_path):
    """Start the GeoCSC API server."""
    try:
        start_server(host=host, port=port, data_path=data_path, debug=debug)
    except GeoDataError as e:
        fail(e, "Error starting server")

def main():
    """Main entry point for the GeoCSC command-line interface."""
    initialize_config()
    logger.debug("Configuration loaded successfully")
    return cli()

if __name__ == '__main__':
    main()
