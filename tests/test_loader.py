"""
Tests for the GeoCSC dataset loader.
"""

import os
import shutil
import tempfile
import unittest
import urllib.error
from unittest import mock

from GeoCSC.config import get_config
from GeoCSC.data import GeoIndex
from GeoCSC.data.loader import (
    download_dataset,
    find_dataset_file,
    get_data_directory,
    load_dataset,
    read_dataset,
    validate_dataset,
)
from GeoCSC.exceptions import DataMalformedError, DataUnavailableError

from sample_data import sample_dataset, write_dataset


class TestValidateDataset(unittest.TestCase):
    """Test cases for structural validation."""

    def test_valid_dataset(self):
        self.assertEqual(validate_dataset(sample_dataset()), [])
        self.assertEqual(validate_dataset([]), [])

    def test_top_level_must_be_a_list(self):
        errors = validate_dataset({"countries": []})
        self.assertEqual(len(errors), 1)
        self.assertIn("expected a list of countries", errors[0])

    def test_missing_country_field(self):
        data = sample_dataset()
        del data[1]["iso3"]
        errors = validate_dataset(data)
        self.assertEqual(errors, ["countries[1]: missing required field 'iso3'"])

    def test_wrong_field_types(self):
        data = sample_dataset()
        data[0]["id"] = "233"
        data[0]["phonecode"] = 1
        data[0]["states"][0]["id"] = True
        data[0]["states"][0]["cities"][1]["name"] = None
        errors = validate_dataset(data)
        self.assertIn("countries[0].id: expected int, got str", errors)
        self.assertIn("countries[0].phonecode: expected str, got int", errors)
        self.assertIn("countries[0].states[0].id: expected int, got bool", errors)
        self.assertIn("countries[0].states[0].cities[1].name: expected str, got NoneType", errors)

    def test_non_object_records(self):
        data = sample_dataset()
        data[0]["states"].append("Nevada")
        data.append(["not", "a", "country"])
        errors = validate_dataset(data)
        self.assertIn("countries[0].states[3]: expected an object, got str", errors)
        self.assertIn("countries[5]: expected an object, got list", errors)

    def test_children_must_be_lists(self):
        data = sample_dataset()
        data[0]["states"] = {"id": 1, "name": "Alaska"}
        data[1]["states"][0]["cities"] = "Mumbai"
        errors = validate_dataset(data)
        self.assertIn("countries[0].states: expected a list, got dict", errors)
        self.assertIn("countries[1].states[0].cities: expected a list, got str", errors)

    def test_null_children_are_empty(self):
        data = sample_dataset()
        data[2]["states"] = None
        data[0]["states"][1]["cities"] = None
        self.assertEqual(validate_dataset(data), [])

    def test_duplicate_country_codes(self):
        data = sample_dataset()
        data[2]["iso2"] = "us"
        errors = validate_dataset(data)
        self.assertEqual(len(errors), 1)
        self.assertIn("duplicate country code 'us'", errors[0])

    def test_empty_country_code(self):
        data = sample_dataset()
        data[3]["iso2"] = ""
        self.assertEqual(validate_dataset(data), ["countries[3].iso2: must not be empty"])

    def test_duplicate_state_and_city_ids(self):
        data = sample_dataset()
        data[0]["states"].append({"id": 1416, "name": "California again"})
        data[1]["states"][0]["cities"].append({"id": 57, "name": "Pune again"})
        errors = validate_dataset(data)
        self.assertEqual(len(errors), 2)
        self.assertIn("duplicate state id 1416", errors[0])
        self.assertIn("duplicate city id 57", errors[1])

    def test_colliding_ids_across_owners_are_valid(self):
        # The sample reuses state id 1 and city id 110 under different owners
        self.assertEqual(validate_dataset(sample_dataset()), [])


class TestLoadDataset(unittest.TestCase):
    """Test cases for reading and loading the dataset."""

    def setUp(self):
        self.config = get_config()
        self.config._initialize()
        self.config.set("data.location", None)
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)
        self.config._initialize()

    def test_load_valid_dataset(self):
        path = write_dataset(self.temp_dir, sample_dataset())
        data = load_dataset(path)
        self.assertEqual(data, sample_dataset())
        self.assertEqual(GeoIndex.build(data), GeoIndex.build(sample_dataset()))

    def test_configured_location(self):
        path = write_dataset(self.temp_dir, sample_dataset(), filename="world.json")
        self.config.set("data.location", path)
        self.assertEqual(load_dataset(), sample_dataset())

    def test_data_directory_from_environment(self):
        write_dataset(self.temp_dir, sample_dataset())
        with mock.patch.dict(os.environ, {"GEOCSC_DATA_DIR": self.temp_dir}):
            self.assertEqual(get_data_directory(), self.temp_dir)
            self.assertEqual(find_dataset_file(), os.path.join(self.temp_dir, "csc.min.json"))
            self.assertEqual(len(load_dataset()), 5)

    def test_missing_file(self):
        path = os.path.join(self.temp_dir, "missing.json")
        with self.assertRaises(DataUnavailableError) as ctx:
            load_dataset(path, auto_fetch=False)
        self.assertEqual(ctx.exception.context["path"], path)
        with self.assertRaises(DataUnavailableError):
            find_dataset_file(path)

    def test_unreadable_source(self):
        # A directory cannot be read as a file
        with self.assertRaises(DataUnavailableError):
            read_dataset(self.temp_dir)

    def test_invalid_json(self):
        path = os.path.join(self.temp_dir, "broken.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write('[{"id": 1, "name": ')
        with self.assertRaises(DataMalformedError):
            load_dataset(path)

    def test_invalid_encoding(self):
        path = os.path.join(self.temp_dir, "latin1.json")
        with open(path, "wb") as f:
            f.write('[{"name": "São Tomé"}]'.encode("latin-1"))
        with self.assertRaises(DataMalformedError):
            read_dataset(path)

    def test_malformed_shape(self):
        data = sample_dataset()
        del data[0]["name"]
        data[1]["states"] = "none"
        path = write_dataset(self.temp_dir, data)
        with self.assertRaises(DataMalformedError) as ctx:
            load_dataset(path)
        self.assertEqual(len(ctx.exception.context["errors"]), 2)
        self.assertIn("failed validation with 2 error(s)", ctx.exception.message)

    def test_auto_fetch_downloads_missing_dataset(self):
        destination = os.path.join(self.temp_dir, "csc.min.json")

        def fake_urlretrieve(url, filename):
            write_dataset(os.path.dirname(filename), sample_dataset(), os.path.basename(filename))
            return filename, None

        with mock.patch("urllib.request.urlretrieve", side_effect=fake_urlretrieve) as retrieve:
            data = load_dataset(destination, auto_fetch=True)

        retrieve.assert_called_once()
        self.assertEqual(retrieve.call_args[0][0], self.config.get("data.download_url"))
        self.assertEqual(len(data), 5)
        self.assertTrue(os.path.isfile(destination))

    def test_auto_fetch_follows_feature_flag(self):
        destination = os.path.join(self.temp_dir, "csc.min.json")
        self.config.enable_feature("auto_fetch_data")
        with mock.patch("urllib.request.urlretrieve",
                        side_effect=urllib.error.URLError("offline")) as retrieve:
            with self.assertRaises(DataUnavailableError):
                load_dataset(destination)
        retrieve.assert_called_once()


class TestDownloadDataset(unittest.TestCase):
    """Test cases for downloading the dataset."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.destination = os.path.join(self.temp_dir, "data", "csc.min.json")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_download(self):
        def fake_urlretrieve(url, filename):
            with open(filename, "w", encoding="utf-8") as f:
                f.write("[]")
            return filename, None

        with mock.patch("urllib.request.urlretrieve", side_effect=fake_urlretrieve):
            path = download_dataset(url="https://example.com/csc.json", destination=self.destination)

        self.assertEqual(path, self.destination)
        self.assertEqual(read_dataset(path), [])
        self.assertFalse(os.path.exists(self.destination + ".part"))

    def test_existing_file_is_kept(self):
        os.makedirs(os.path.dirname(self.destination))
        write_dataset(os.path.dirname(self.destination), [])
        with mock.patch("urllib.request.urlretrieve") as retrieve:
            download_dataset(destination=self.destination)
        retrieve.assert_not_called()

    def test_failed_download_leaves_no_file(self):
        def failing_urlretrieve(url, filename):
            with open(filename, "w", encoding="utf-8") as f:
                f.write("[{")
            raise urllib.error.URLError("connection reset")

        with mock.patch("urllib.request.urlretrieve", side_effect=failing_urlretrieve):
            with self.assertRaises(DataUnavailableError) as ctx:
                download_dataset(url="https://example.com/csc.json", destination=self.destination)

        self.assertEqual(ctx.exception.context["url"], "https://example.com/csc.json")
        self.assertFalse(os.path.exists(self.destination))
        self.assertFalse(os.path.exists(self.destination + ".part"))


if __name__ == "__main__":
    unittest.main()
