"""
Command-line interface module for the GeoCSC package.

Key Components:
- main: Main entry point for the CLI
- Commands: countries, states, cities, stats, fetch, server and config
"""

from GeoCSC.cli.commands import main

__all__ = ['main']
