#!/usr/bin/env python3
"""
Basic usage example for the GeoCSC module.

Run `GeoCSC fetch` first, or pass the path of a dataset file.
"""
import sys

from GeoCSC import GeoIndex, load_dataset
from GeoCSC.exceptions import CountryNotFoundError, StateNotFoundError
from GeoCSC.utils import print_json

def main():
    """Main function."""
    data_path = sys.argv[1] if len(sys.argv) > 1 else None
    index = GeoIndex.build(load_dataset(data_path))
    print(f"Loaded {index!r}")

    countries = index.list_countries()
    print("\nFirst five countries:")
    print_json([country.to_dict() for country in countries[:5]])

    states = index.states_for_country("us")
    print(f"\nThe United States has {len(states)} states")
    print_json([state.to_dict() for state in states[:5]])

    if states:
        cities = index.cities_for_country_and_state("US", states[0].id)
        print(f"\nCities of {states[0].name}:")
        print_json([city.to_dict() for city in cities[:5]])

    try:
        index.states_for_country("XX")
    except CountryNotFoundError as e:
        print(f"\n{e.user_message}: {e.country_code}")

    try:
        index.cities_for_country_and_state("US", -1)
    except StateNotFoundError as e:
        print(f"{e.user_message}: {e.state_id}")

if __name__ == '__main__':
    main()
