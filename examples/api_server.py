#!/usr/bin/env python3
"""
Example showing how to embed the GeoCSC API in your own process.

The index is built once, then handed to the Flask app.
"""
import argparse

from GeoCSC import GeoService, create_app
from GeoCSC.utils.logging import get_logger, set_log_level

set_log_level('info')
logger = get_logger(__name__, {"component": "api_example"})

def main():
    """Main entry point for the API server example."""
    parser = argparse.ArgumentParser(description='GeoCSC API Server')
    parser.add_argument('--host', default='localhost', help='Host to listen on')
    parser.add_argument('--port', type=int, default=3000, help='Port to listen on')
    parser.add_argument('--data-path', help='Dataset to serve')

    args = parser.parse_args()

    service = GeoService.from_source(args.data_path)
    logger.info(f"Serving {service.get_stats()}")

    app = create_app(service=service)
    print(f"API available at http://{args.host}:{args.port}/api/v1/countries")
    app.run(host=args.host, port=args.port)

if __name__ == '__main__':
    main()
