"""
Data module for the GeoCSC package.

This module provides the dataset loader, the record types and the immutable
in-memory geo index built from them.
"""

from GeoCSC.data.models import Country, State, City, CityKey
from GeoCSC.data.loader import load_dataset, download_dataset, validate_dataset
from GeoCSC.data.geo_index import GeoIndex

__all__ = [
    'Country',
    'State',
    'City',
    'CityKey',
    'GeoIndex',
    'load_dataset',
    'download_dataset',
    'validate_dataset'
]
