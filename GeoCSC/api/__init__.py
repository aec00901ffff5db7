"""
API module for the GeoCSC package.

This module provides a REST API for country, state and city lookups.

Key Components:
- create_app: Build a Flask application around a ready geo index
- start_server: Load the dataset and run the development server
"""

from GeoCSC.api.server import create_app, start_server

__all__ = ['create_app', 'start_server']
