#!/usr/bin/env python3
"""
Main entry point for the GeoCSC package when run as a module.

Example:
    $ python -m GeoCSC countries
    $ python -m GeoCSC states US
    $ python -m GeoCSC cities US 1416
    $ python -m GeoCSC server --port 3000
"""

import sys

from GeoCSC.exceptions import GeoDataError
from GeoCSC.utils import handle_exception
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__)

def main():
    """Main entry point for the GeoCSC package."""
    try:
        from GeoCSC.cli.commands import main as cli_main
        cli_main()
    except GeoDataError as e:
        handle_exception(e, context="Error running GeoCSC")
        print(f"Error: {e.user_message}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
