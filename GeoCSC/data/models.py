"""
Record types held by the geo index.

Records are frozen so a built index can be shared by any number of readers.
``to_dict()`` returns exactly the fields exposed at the API boundary, in
the order they are declared.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, NamedTuple, Optional


@dataclass(frozen=True)
class Country:
    id: int
    name: str
    iso2: str
    iso3: str
    phonecode: str

    @property
    def code(self) -> str:
        """Normalized (lower-cased) ISO2 code used as the lookup key."""
        return normalize_country_code(self.iso2)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class State:
    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class City:
    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CityKey(NamedTuple):
    """Composite key for a state's city table."""
    country_code: str
    state_id: int


def normalize_country_code(country_code: str) -> str:
    return country_code.lower()


_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')


def coerce_state_id(value: Any) -> Optional[int]:
    """
    Return ``value`` as a state id, or None if it is not an integer.

    Only ints and strings holding a whole decimal integer are accepted;
    floats and bools never match a state.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value)
    return None
