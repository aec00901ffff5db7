"""
Tests for the GeoCSC geo index.
"""

import dataclasses
import threading
import unittest

from GeoCSC.data import GeoIndex, Country, State, City
from GeoCSC.exceptions import CountryNotFoundError, StateNotFoundError, NotFoundError

from sample_data import sample_dataset, scenario_dataset


class TestGeoIndexBuild(unittest.TestCase):
    """Test cases for building the index."""

    def setUp(self):
        self.index = GeoIndex.build(sample_dataset())

    def test_countries_in_dataset_order(self):
        codes = [country.iso2 for country in self.index.list_countries()]
        self.assertEqual(codes, ["US", "IN", "AQ", "BV", "st"])

    def test_records_are_trimmed(self):
        us = self.index.get_country("US")
        self.assertEqual(
            us.to_dict(),
            {"id": 233, "name": "United States", "iso2": "US", "iso3": "USA", "phonecode": "1"}
        )
        self.assertEqual(list(us.to_dict()), ["id", "name", "iso2", "iso3", "phonecode"])

        california = self.index.states_for_country("US")[0]
        self.assertEqual(california.to_dict(), {"id": 1416, "name": "California"})

        los_angeles = self.index.cities_for_country_and_state("US", 1416)[0]
        self.assertEqual(los_angeles.to_dict(), {"id": 110, "name": "Los Angeles"})

    def test_values_preserved_verbatim(self):
        # Stored codes keep their original case, phone codes keep leading zeros
        self.assertEqual(self.index.get_country("ST").iso2, "st")
        self.assertEqual(self.index.get_country("bv").phonecode, "0055")
        self.assertEqual(self.index.get_country("st").name, "São Tomé and Príncipe")

    def test_idempotent_build(self):
        again = GeoIndex.build(sample_dataset())
        self.assertEqual(self.index, again)
        self.assertEqual(self.index.list_countries(), again.list_countries())
        for country in self.index.list_countries():
            self.assertEqual(
                self.index.states_for_country(country.iso2),
                again.states_for_country(country.iso2)
            )

    def test_different_datasets_not_equal(self):
        data = sample_dataset()
        data[0]["states"][0]["cities"].pop()
        self.assertNotEqual(self.index, GeoIndex.build(data))

    def test_empty_dataset(self):
        index = GeoIndex.build([])
        self.assertEqual(index.list_countries(), ())
        self.assertEqual(len(index), 0)
        with self.assertRaises(CountryNotFoundError):
            index.states_for_country("US")

    def test_stats(self):
        self.assertEqual(self.index.stats(), {"countries": 5, "states": 6, "cities": 6})
        self.assertEqual(len(self.index), 5)

    def test_index_is_immutable(self):
        country = self.index.get_country("US")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            country.name = "Changed"
        with self.assertRaises(TypeError):
            self.index._countries["xx"] = country
        with self.assertRaises(TypeError):
            self.index._states["us"][999] = State(id=999, name="Nowhere")

    def test_source_changes_do_not_leak(self):
        data = sample_dataset()
        index = GeoIndex.build(data)
        data[0]["name"] = "Changed"
        data[0]["states"].clear()
        self.assertEqual(index.get_country("US").name, "United States")
        self.assertEqual(len(index.states_for_country("US")), 3)


class TestGeoIndexQueries(unittest.TestCase):
    """Test cases for the three lookup operations."""

    def setUp(self):
        self.index = GeoIndex.build(sample_dataset())

    def test_case_insensitive_country_lookup(self):
        expected = self.index.states_for_country("US")
        self.assertEqual(self.index.states_for_country("us"), expected)
        self.assertEqual(self.index.states_for_country("Us"), expected)
        self.assertEqual(self.index.states_for_country("uS"), expected)
        self.assertEqual(
            self.index.cities_for_country_and_state("us", 1416),
            self.index.cities_for_country_and_state("US", 1416)
        )

    def test_states_in_dataset_order(self):
        names = [state.name for state in self.index.states_for_country("US")]
        self.assertEqual(names, ["California", "Texas", "Alaska"])

    def test_country_with_no_states(self):
        # Both an empty list and a missing "states" key mean "found but empty"
        self.assertEqual(self.index.states_for_country("AQ"), ())
        self.assertEqual(self.index.states_for_country("BV"), ())

    def test_unknown_country(self):
        with self.assertRaises(CountryNotFoundError) as ctx:
            self.index.states_for_country("XX")
        self.assertEqual(ctx.exception.country_code, "XX")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_no_partial_matching(self):
        for code in ("U", "USA", "United States", " US", ""):
            with self.assertRaises(CountryNotFoundError):
                self.index.states_for_country(code)

    def test_state_with_no_cities(self):
        self.assertEqual(self.index.cities_for_country_and_state("US", 1407), ())
        self.assertEqual(self.index.cities_for_country_and_state("US", 1), ())

    def test_staged_resolution_unknown_country_first(self):
        # State id 1 exists under US and IN, but XX is not a country
        with self.assertRaises(CountryNotFoundError):
            self.index.cities_for_country_and_state("XX", 1)

    def test_staged_resolution_unknown_state(self):
        with self.assertRaises(StateNotFoundError) as ctx:
            self.index.cities_for_country_and_state("US", 999999)
        self.assertEqual(ctx.exception.country_code, "US")
        self.assertEqual(ctx.exception.state_id, 999999)
        self.assertNotIsInstance(ctx.exception, CountryNotFoundError)
        self.assertIsInstance(ctx.exception, NotFoundError)

    def test_state_of_another_country(self):
        # Maharashtra belongs to India
        with self.assertRaises(StateNotFoundError):
            self.index.cities_for_country_and_state("US", 4008)

    def test_state_isolation_with_colliding_ids(self):
        us_states = self.index.states_for_country("US")
        in_states = self.index.states_for_country("IN")
        self.assertIn(State(id=1, name="Alaska"), us_states)
        self.assertIn(State(id=1, name="Andaman and Nicobar Islands"), in_states)
        self.assertNotIn(State(id=1, name="Andaman and Nicobar Islands"), us_states)
        self.assertEqual(self.index.cities_for_country_and_state("US", 1), ())
        self.assertEqual(
            self.index.cities_for_country_and_state("IN", 1),
            (City(id=7, name="Port Blair"),)
        )

    def test_city_isolation_with_colliding_ids(self):
        self.assertEqual(
            self.index.cities_for_country_and_state("US", 1416)[0],
            City(id=110, name="Los Angeles")
        )
        self.assertEqual(
            self.index.cities_for_country_and_state("IN", 4008)[0],
            City(id=110, name="Mumbai")
        )

    def test_numeric_string_state_id(self):
        self.assertEqual(
            self.index.cities_for_country_and_state("US", "1416"),
            self.index.cities_for_country_and_state("US", 1416)
        )

    def test_non_numeric_state_id(self):
        with self.assertRaises(StateNotFoundError):
            self.index.cities_for_country_and_state("US", "california")
        with self.assertRaises(CountryNotFoundError):
            self.index.cities_for_country_and_state("XX", "california")

    def test_non_integer_state_id_never_matches(self):
        # 1416.9 would truncate to California and True to Alaska (id 1)
        for state_id in (1416.9, 1416.0, True, False, "1416.0", "1_416", None):
            with self.assertRaises(StateNotFoundError):
                self.index.cities_for_country_and_state("US", state_id)

    def test_results_are_snapshots(self):
        countries = self.index.list_countries()
        self.assertIsInstance(countries, tuple)
        self.assertIsNot(countries, self.index.list_countries())

    def test_has_country(self):
        self.assertTrue(self.index.has_country("in"))
        self.assertFalse(self.index.has_country("zz"))


class TestConcurrentReaders(unittest.TestCase):
    """Test cases for sharing one index between threads."""

    def test_parallel_queries_agree(self):
        index = GeoIndex.build(sample_dataset())
        expected = (
            index.list_countries(),
            index.states_for_country("US"),
            index.cities_for_country_and_state("IN", 4008),
        )
        results = []
        errors = []
        start = threading.Barrier(16)

        def reader():
            start.wait()
            try:
                for _ in range(200):
                    results.append((
                        index.list_countries(),
                        index.states_for_country("us"),
                        index.cities_for_country_and_state("in", "4008"),
                    ))
                    with self.assertRaises(StateNotFoundError):
                        index.cities_for_country_and_state("US", 4008)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(results), 16 * 200)
        self.assertTrue(all(result == expected for result in results))
        self.assertEqual(index, GeoIndex.build(sample_dataset()))


class TestEndToEndScenarios(unittest.TestCase):
    """Test cases for the single-country scenario dataset."""

    def setUp(self):
        self.index = GeoIndex.build(scenario_dataset())

    def test_scenario_lookups(self):
        self.assertEqual(
            [country.to_dict() for country in self.index.list_countries()],
            [{"id": 2, "name": "United States", "iso2": "US", "iso3": "USA", "phonecode": "1"}]
        )
        self.assertEqual(
            [state.to_dict() for state in self.index.states_for_country("us")],
            [{"id": 5, "name": "California"}]
        )
        self.assertEqual(
            [city.to_dict() for city in self.index.cities_for_country_and_state("US", 5)],
            [{"id": 10, "name": "Los Angeles"}, {"id": 11, "name": "San Francisco"}]
        )

    def test_scenario_unknown_state(self):
        with self.assertRaises(StateNotFoundError):
            self.index.cities_for_country_and_state("US", 6)

    def test_scenario_unknown_country(self):
        with self.assertRaises(CountryNotFoundError):
            self.index.states_for_country("CA")

    def test_scenario_country_with_empty_states(self):
        data = scenario_dataset()
        data.append({
            "id": 8, "name": "Antarctica", "iso2": "AQ", "iso3": "ATA",
            "phonecode": "672", "states": []
        })
        index = GeoIndex.build(data)
        self.assertEqual(index.states_for_country("AQ"), ())
        for state_id in (1, 5, 6):
            with self.assertRaises(StateNotFoundError):
                index.cities_for_country_and_state("AQ", state_id)


class TestRecords(unittest.TestCase):
    """Test cases for the record types."""

    def test_country_code_is_normalized(self):
        country = Country(id=1, name="Canada", iso2="CA", iso3="CAN", phonecode="1")
        self.assertEqual(country.code, "ca")
        self.assertEqual(country.iso2, "CA")


if __name__ == "__main__":
    unittest.main()
