#!/usr/bin/env python3
"""
Entry point for the GeoCSC API server.
This allows running the server directly with `python server.py`.

HOST and PORT are read from the environment (or a .env file) unless
given on the command line.
"""
import argparse
import sys

from GeoCSC import initialize_config
from GeoCSC.api.server import start_server
from GeoCSC.exceptions import GeoDataError
from GeoCSC.utils.logging import get_logger, set_log_level

logger = get_logger(__name__)

def main():
    """Entry point for the server."""
    parser = argparse.ArgumentParser(description='Start the GeoCSC API server')
    parser.add_argument('--host', type=str, help='The host to bind to')
    parser.add_argument('--port', type=int, help='The port to bind to')
    parser.add_argument('--data-path', type=str, help='Path to the countries/states/cities JSON dataset')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error', 'critical'],
                        help='Set the logging level')

    args = parser.parse_args()

    initialize_config()
    if args.log_level:
        set_log_level(args.log_level)

    try:
        start_server(
            host=args.host,
            port=args.port,
            data_path=args.data_path,
            debug=args.debug or None
        )
    except GeoDataError as e:
        logger.error(f"Could not start server: {e.message}")
        sys.exit(1)

if __name__ == "__main__":
    main()
