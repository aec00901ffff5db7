"""
In-memory geo index for the GeoCSC package.

The index is built exactly once from the validated nested dataset and is
never mutated afterwards, so any number of threads or worker processes may
query it without coordination. It holds three tables:

- normalized ISO2 code -> Country
- normalized ISO2 code -> {state id -> State}
- CityKey(normalized ISO2 code, state id) -> {city id -> City}

Dictionaries preserve insertion order, so every query returns records in
dataset order. Lookups are O(1).

Example:
    >>> index = GeoIndex.build(load_dataset())
    >>> index.states_for_country("us")
    (State(id=1416, name='Alabama'), ...)
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from GeoCSC.data.models import City, CityKey, Country, State, coerce_state_id, normalize_country_code
from GeoCSC.exceptions import CountryNotFoundError, StateNotFoundError
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__)


class GeoIndex:
    """
    Immutable lookup structure over countries, states and cities.

    Use GeoIndex.build() to construct one; the tables passed to __init__
    are wrapped in read-only views and must not be modified by the caller.
    """

    __slots__ = ('_countries', '_states', '_cities')

    def __init__(self,
                 countries: Dict[str, Country],
                 states: Dict[str, Dict[int, State]],
                 cities: Dict[CityKey, Dict[int, City]]) -> None:
        self._countries: Mapping[str, Country] = MappingProxyType(countries)
        self._states: Mapping[str, Mapping[int, State]] = MappingProxyType(
            {code: MappingProxyType(table) for code, table in states.items()}
        )
        self._cities: Mapping[CityKey, Mapping[int, City]] = MappingProxyType(
            {key: MappingProxyType(table) for key, table in cities.items()}
        )

    @classmethod
    def build(cls, dataset: Iterable[Dict[str, Any]]) -> 'GeoIndex':
        """
        Build the index from the nested dataset in a single pass.

        Each record is trimmed to its public fields. A country without
        states gets an empty state table and a state without cities an
        empty city table, so "found but empty" stays distinct from "not found".

        Args:
            dataset: Countries as produced by GeoCSC.data.loader.load_dataset

        Returns:
            A ready, immutable GeoIndex
        """
        countries: Dict[str, Country] = {}
        states: Dict[str, Dict[int, State]] = {}
        cities: Dict[CityKey, Dict[int, City]] = {}

        for raw_country in dataset:
            country = Country(
                id=raw_country['id'],
                name=raw_country['name'],
                iso2=raw_country['iso2'],
                iso3=raw_country['iso3'],
                phonecode=raw_country['phonecode'],
            )
            code = country.code
            countries[code] = country

            country_states: Dict[int, State] = {}
            for raw_state in raw_country.get('states') or ():
                state = State(id=raw_state['id'], name=raw_state['name'])
                country_states[state.id] = state

                cities[CityKey(code, state.id)] = {
                    raw_city['id']: City(id=raw_city['id'], name=raw_city['name'])
                    for raw_city in raw_state.get('cities') or ()
                }

            states[code] = country_states

        index = cls(countries, states, cities)
        logger.debug(f"Built geo index: {index.stats()}")
        return index

    def list_countries(self) -> Tuple[Country, ...]:
        """Return every country in dataset order."""
        return tuple(self._countries.values())

    def has_country(self, country_code: str) -> bool:
        return normalize_country_code(country_code) in self._countries

    def get_country(self, country_code: str) -> Country:
        """
        Look up a single country by ISO2 code, case-insensitively.

        Raises:
            CountryNotFoundError: If the code is not in the index
        """
        try:
            return self._countries[normalize_country_code(country_code)]
        except KeyError:
            raise CountryNotFoundError(country_code) from None

    def states_for_country(self, country_code: str) -> Tuple[State, ...]:
        """
        Return the states of a country in dataset order.

        Raises:
            CountryNotFoundError: If the code is not in the index
        """
        return tuple(self._state_table(country_code).values())

    def cities_for_country_and_state(self, country_code: str, state_id: Any) -> Tuple[City, ...]:
        """
        Return the cities of a state in dataset order.

        Resolution is staged so callers can tell an unknown country from a
        state that does not belong to it.

        Raises:
            CountryNotFoundError: If the code is not in the index
            StateNotFoundError: If the country has no state with this id
        """
        state_table = self._state_table(country_code)

        key = coerce_state_id(state_id)
        if key is None or key not in state_table:
            raise StateNotFoundError(country_code, state_id)

        return tuple(self._cities[CityKey(normalize_country_code(country_code), key)].values())

    def stats(self) -> Dict[str, int]:
        """Return the number of countries, states and cities held."""
        return {
            'countries': len(self._countries),
            'states': sum(len(table) for table in self._states.values()),
            'cities': sum(len(table) for table in self._cities.values()),
        }

    def _state_table(self, country_code: str) -> Mapping[int, State]:
        try:
            return self._states[normalize_country_code(country_code)]
        except KeyError:
            raise CountryNotFoundError(country_code) from None

    def __len__(self) -> int:
        return len(self._countries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoIndex):
            return NotImplemented
        return (
            list(self._countries.items()) == list(other._countries.items())
            and {k: list(v.items()) for k, v in self._states.items()}
            == {k: list(v.items()) for k, v in other._states.items()}
            and {k: list(v.items()) for k, v in self._cities.items()}
            == {k: list(v.items()) for k, v in other._cities.items()}
        )

    __hash__ = None

    def __repr__(self) -> str:
        stats = self.stats()
        return (
            f"<GeoIndex countries={stats['countries']} "
            f"states={stats['states']} cities={stats['cities']}>"
        )
