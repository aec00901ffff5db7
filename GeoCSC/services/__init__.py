"""
Services module for the GeoCSC package.

This module provides service classes that implement business logic used by
both the CLI and API layers.
"""

from GeoCSC.services.geo_service import GeoService

__all__ = ['GeoService']
