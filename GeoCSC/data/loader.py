"""
Dataset loader for the GeoCSC package.

This module locates, optionally downloads, reads and validates the nested
countries -> states -> cities JSON dataset. Loading happens once at process
start; any failure is fatal to startup:

- DataUnavailableError: the dataset cannot be found, downloaded or read
- DataMalformedError: the content is not JSON or not the expected shape
"""

import json
import os
import time
import urllib.error
import urllib.request
from typing import Any, Dict, List, Optional

from GeoCSC.config import get_config
from GeoCSC.config.defaults import DEFAULT_DATASET_FILENAME, DEFAULT_DOWNLOAD_URL
from GeoCSC.exceptions import DataUnavailableError, DataMalformedError
from GeoCSC.utils.logging import get_logger

logger = get_logger(__name__, {'component': 'loader'})

DATA_DIR_ENV_VAR = 'GEOCSC_DATA_DIR'

# Only this many validation errors are carried in the exception message
MAX_REPORTED_ERRORS = 20

COUNTRY_FIELDS = {'id': int, 'name': str, 'iso2': str, 'iso3': str, 'phonecode': str}
STATE_FIELDS = {'id': int, 'name': str}
CITY_FIELDS = {'id': int, 'name': str}

def get_data_directory() -> str:
    """
    Get the directory where the GeoCSC dataset is stored.

    Checked in order:
    1. GEOCSC_DATA_DIR environment variable (created if missing)
    2. ~/.geocsc/data, if it exists
    3. The package's own data directory

    Returns:
        Path to the data directory
    """
    if os.environ.get(DATA_DIR_ENV_VAR):
        data_dir = os.environ[DATA_DIR_ENV_VAR]
        os.makedirs(data_dir, exist_ok=True)
        return data_dir

    home_data_dir = os.path.join(os.path.expanduser('~'), '.geocsc', 'data')
    if os.path.isdir(home_data_dir):
        return home_data_dir

    return os.path.dirname(os.path.abspath(__file__))

def resolve_dataset_path(path: Optional[str] = None) -> str:
    """
    Work out where the dataset should be, without checking that it exists.

    An explicit path wins, then the configured ``data.location``, then
    ``<data directory>/<data.filename>``.
    """
    if path:
        return path

    config = get_config()
    location = config.get_data_location()
    if location:
        return location

    filename = config.get("data.filename", DEFAULT_DATASET_FILENAME)
    return os.path.join(get_data_directory(), filename)

def find_dataset_file(path: Optional[str] = None) -> str:
    """
    Find the dataset file.

    Raises:
        DataUnavailableError: If no dataset file exists at the resolved location
    """
    dataset_path = resolve_dataset_path(path)
    if not os.path.isfile(dataset_path):
        raise DataUnavailableError(
            f"Dataset file not found at {dataset_path}",
            context={'path': dataset_path}
        )
    return dataset_path

def download_dataset(url: Optional[str] = None, destination: Optional[str] = None,
                     force: bool = False) -> str:
    """
    Download the nested countries/states/cities dataset.

    The file is fetched to a temporary name and moved into place once
    complete, so an interrupted download never leaves a truncated dataset.

    Args:
        url: URL to download from (default: configured data.download_url)
        destination: Target path (default: the resolved dataset path)
        force: Download even if the destination already exists

    Returns:
        Path to the downloaded file

    Raises:
        DataUnavailableError: If the download fails
    """
    if url is None:
        url = get_config().get("data.download_url", DEFAULT_DOWNLOAD_URL)
    if destination is None:
        destination = resolve_dataset_path()

    if os.path.exists(destination) and not force:
        logger.info(f"Dataset already exists at {destination}")
        return destination

    parent = os.path.dirname(os.path.abspath(destination))
    os.makedirs(parent, exist_ok=True)
    partial_path = destination + '.part'

    logger.info(f"Downloading dataset from {url} to {destination}...")
    try:
        urllib.request.urlretrieve(url, partial_path)
        os.replace(partial_path, destination)
    except (urllib.error.URLError, OSError) as e:
        if os.path.exists(partial_path):
            os.remove(partial_path)
        raise DataUnavailableError(
            f"Failed to download dataset from {url}: {e}",
            context={'url': url, 'path': destination},
            cause=e
        ) from e

    logger.info("Download complete")
    return destination

def read_dataset(path: str) -> Any:
    """
    Read and parse the dataset file.

    Raises:
        DataUnavailableError: If the file cannot be read
        DataMalformedError: If the content is not UTF-8 encoded JSON
    """
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        raise DataUnavailableError(
            f"Could not read dataset at {path}: {e}",
            context={'path': path},
            cause=e
        ) from e

    try:
        return json.loads(raw.decode('utf-8-sig'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DataMalformedError(
            f"Dataset at {path} is not valid JSON: {e}",
            context={'path': path},
            cause=e
        ) from e

def _check_fields(record: Any, fields: Dict[str, type], where: str) -> List[str]:
    if not isinstance(record, dict):
        return [f"{where}: expected an object, got {type(record).__name__}"]

    errors = []
    for field, expected in fields.items():
        if field not in record:
            errors.append(f"{where}: missing required field '{field}'")
            continue
        value = record[field]
        # bool is an int subclass but never a valid id
        if not isinstance(value, expected) or isinstance(value, bool):
            errors.append(
                f"{where}.{field}: expected {expected.__name__}, got {type(value).__name__}"
            )
    return errors

def _children(record: Dict[str, Any], key: str, where: str, errors: List[str]) -> List[Any]:
    """Return a record's optional child list; absent or null means empty."""
    children = record.get(key)
    if children is None:
        return []
    if not isinstance(children, list):
        errors.append(f"{where}.{key}: expected a list, got {type(children).__name__}")
        return []
    return children

def validate_dataset(data: Any) -> List[str]:
    """
    Validate the nested dataset structure.

    Args:
        data: The parsed JSON document

    Returns:
        List of validation error messages, empty when the dataset is valid
    """
    if not isinstance(data, list):
        return [f"dataset: expected a list of countries, got {type(data).__name__}"]

    errors: List[str] = []
    seen_codes: Dict[str, int] = {}

    for i, country in enumerate(data):
        where = f"countries[{i}]"
        country_errors = _check_fields(country, COUNTRY_FIELDS, where)
        errors.extend(country_errors)
        if not isinstance(country, dict):
            continue

        iso2 = country.get('iso2')
        if isinstance(iso2, str):
            code = iso2.lower()
            if not code:
                errors.append(f"{where}.iso2: must not be empty")
            elif code in seen_codes:
                errors.append(f"{where}.iso2: duplicate country code {iso2!r} (first seen at countries[{seen_codes[code]}])")
            else:
                seen_codes[code] = i

        seen_states = set()
        for j, state in enumerate(_children(country, 'states', where, errors)):
            state_where = f"{where}.states[{j}]"
            state_errors = _check_fields(state, STATE_FIELDS, state_where)
            errors.extend(state_errors)
            if not isinstance(state, dict):
                continue
            if not state_errors:
                if state['id'] in seen_states:
                    errors.append(f"{state_where}.id: duplicate state id {state['id']} in country {iso2!r}")
                seen_states.add(state['id'])

            seen_cities = set()
            for k, city in enumerate(_children(state, 'cities', state_where, errors)):
                city_where = f"{state_where}.cities[{k}]"
                city_errors = _check_fields(city, CITY_FIELDS, city_where)
                errors.extend(city_errors)
                if not city_errors:
                    if city['id'] in seen_cities:
                        errors.append(f"{city_where}.id: duplicate city id {city['id']} in state {state.get('id')!r}")
                    seen_cities.add(city['id'])

    return errors

def load_dataset(path: Optional[str] = None, auto_fetch: Optional[bool] = None) -> List[Dict[str, Any]]:
    """
    Load and validate the nested dataset. Intended to run once at startup.

    Args:
        path: Explicit dataset path (default: configured location or data directory)
        auto_fetch: Download the dataset when missing (default: auto_fetch_data feature flag)

    Returns:
        The validated list of country dictionaries with nested states and cities

    Raises:
        DataUnavailableError: If the dataset cannot be found, downloaded or read
        DataMalformedError: If the dataset is not valid JSON of the expected shape
    """
    if auto_fetch is None:
        auto_fetch = get_config().should_auto_download()

    start_time = time.time()
    dataset_path = resolve_dataset_path(path)

    if not os.path.isfile(dataset_path):
        if not auto_fetch:
            raise DataUnavailableError(
                f"Dataset file not found at {dataset_path}",
                context={'path': dataset_path}
            )
        logger.info(f"Dataset not found at {dataset_path}, attempting to download...")
        download_dataset(destination=dataset_path)

    data = read_dataset(dataset_path)

    errors = validate_dataset(data)
    if errors:
        shown = "; ".join(errors[:MAX_REPORTED_ERRORS])
        if len(errors) > MAX_REPORTED_ERRORS:
            shown += f"; ... {len(errors) - MAX_REPORTED_ERRORS} more"
        raise DataMalformedError(
            f"Dataset at {dataset_path} failed validation with {len(errors)} error(s): {shown}",
            context={'path': dataset_path, 'errors': errors}
        )

    logger.info(
        f"Loaded {len(data)} countries from {dataset_path} in {time.time() - start_time:.2f}s",
        extra={'path': dataset_path, 'countries': len(data)}
    )
    return data
