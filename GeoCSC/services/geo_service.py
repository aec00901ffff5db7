"""
Geo service module for the GeoCSC package.

This module provides the service methods shared by the CLI and API layers.
It owns a ready GeoIndex and converts its records into plain dictionaries
for serialization. Not-found conditions propagate as CountryNotFoundError
and StateNotFoundError.
"""

import time
from typing import Any, Dict, List, Optional

from GeoCSC.data import GeoIndex, load_dataset
from GeoCSC.data.models import coerce_state_id
from GeoCSC.exceptions import InvalidParameterError
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__)

class GeoService:
    """
    Service class for country, state and city lookups.

    Instances are read-only once constructed and can be shared between
    request threads.
    """

    def __init__(self, index: GeoIndex):
        self.index = index

    @classmethod
    def from_source(cls, path: Optional[str] = None, auto_fetch: Optional[bool] = None) -> 'GeoService':
        """
        Load the dataset and build the index in one step.

        Args:
            path: Optional dataset path (default: configured location)
            auto_fetch: Download the dataset if missing (default: feature flag)

        Raises:
            DataUnavailableError: If the dataset cannot be obtained
            DataMalformedError: If the dataset is invalid
        """
        start_time = time.time()
        index = GeoIndex.build(load_dataset(path, auto_fetch=auto_fetch))
        logger.info(f"Geo index ready: {index.stats()} in {time.time() - start_time:.2f}s")
        return cls(index)

    def get_countries(self) -> List[Dict[str, Any]]:
        """
        Get every country in dataset order.

        Returns:
            List of {id, name, iso2, iso3, phonecode} dictionaries
        """
        logger.debug("Getting list of all countries")
        return [country.to_dict() for country in self.index.list_countries()]

    def get_states(self, country_code: str) -> List[Dict[str, Any]]:
        """
        Get the states of a country.

        Args:
            country_code: ISO2 country code, any case

        Returns:
            List of {id, name} dictionaries, empty if the country has no states
        """
        logger.debug(f"Getting states for country: {country_code}")
        return [state.to_dict() for state in self.index.states_for_country(country_code)]

    def get_cities(self, country_code: str, state_id: Any) -> List[Dict[str, Any]]:
        """
        Get the cities of a state within a country.

        Args:
            country_code: ISO2 country code, any case
            state_id: Numeric state id (int or numeric string)

        Returns:
            List of {id, name} dictionaries, empty if the state has no cities

        Raises:
            InvalidParameterError: If state_id is not an integer
        """
        logger.debug(f"Getting cities for country: {country_code}, state: {state_id}")
        # An unknown country is reported before a malformed state id
        self.index.get_country(country_code)
        state_id = parse_state_id(state_id)
        return [city.to_dict() for city in self.index.cities_for_country_and_state(country_code, state_id)]

    def get_stats(self) -> Dict[str, int]:
        """Get the number of countries, states and cities in the index."""
        return self.index.stats()


def parse_state_id(value: Any) -> int:
    """
    Convert a state id from user input into an integer.

    Raises:
        InvalidParameterError: If the value is not an integer
    """
    state_id = coerce_state_id(value)
    if state_id is None:
        raise InvalidParameterError(
            message=f"state_id must be an integer, got {value!r}",
            user_message=f"Invalid parameters: state_id must be an integer, got {value!r}",
            context={'state_id': value},
            include_traceback=False
        )
    return state_id
