"""
Station and trip dataset loading.

This module fetches the station feed (JSON) and the monthly trip export (CSV)
and returns them as pandas DataFrames ready for traffic aggregation.
"""

import io
from typing import Any, Dict, List, Tuple
import logging

import geopandas as gpd
import pandas as pd
import requests

logger = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """Raised when a station or trip dataset cannot be fetched or decoded."""


class StationDataLoader:
    """Loads the station feed ``{"data": {"stations": [...]}}``."""

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self.required_fields = ['short_name', 'lon', 'lat']

    def load_stations(self, url: str) -> pd.DataFrame:
        """
        Fetch the station feed and return one row per station.

        Args:
            url: Location of the station JSON document

        Returns:
            DataFrame with ``short_name`` (str), ``lon`` and ``lat`` (float)
            plus any other station attributes from the feed

        Raises:
            DataLoadError: If the request fails or the document is malformed
        """
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error loading station JSON from {url}: {e}")
            raise DataLoadError(f"Could not load stations from {url}: {e}") from e

        stations = self.parse_station_feed(payload)
        logger.info(f"Loaded {len(stations)} stations from {url}")
        return stations

    def parse_station_feed(self, payload: Dict[str, Any]) -> pd.DataFrame:
        """
        Extract the station list from a decoded feed document.

        Args:
            payload: Decoded JSON document

        Returns:
            Station DataFrame

        Raises:
            DataLoadError: If ``data.stations`` or required fields are missing
        """
        try:
            station_list = payload['data']['stations']
        except (KeyError, TypeError) as e:
            logger.error(f"Station feed has no data.stations list: {e}")
            raise DataLoadError("Station feed has no data.stations list") from e

        if not isinstance(station_list, list):
            logger.error(f"Station feed data.stations is a {type(station_list).__name__}, not a list")
            raise DataLoadError("Station feed data.stations is not a list of stations")

        stations = pd.DataFrame(station_list)

        is_valid, missing_fields = self.validate_station_schema(stations)
        if not is_valid:
            raise DataLoadError(f"Station feed is missing fields: {missing_fields}")

        stations['short_name'] = stations['short_name'].astype(str)
        stations['lon'] = pd.to_numeric(stations['lon'], errors='coerce')
        stations['lat'] = pd.to_numeric(stations['lat'], errors='coerce')
        return stations

    def validate_station_schema(self, stations: pd.DataFrame) -> Tuple[bool, List[str]]:
        """
        Validate that the station frame contains the required fields.

        Args:
            stations: Station DataFrame

        Returns:
            Tuple of (is_valid, missing_fields)
        """
        missing_fields = [field for field in self.required_fields if field not in stations.columns]
        is_valid = len(missing_fields) == 0

        if not is_valid:
            logger.warning(f"Missing required station fields: {missing_fields}")

        return is_valid, missing_fields


class TripDataLoader:
    """Loads the trip CSV export."""

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self.required_columns = ['start_station_id', 'end_station_id', 'started_at', 'ended_at']

    def load_trips(self, url: str) -> pd.DataFrame:
        """
        Fetch the trip CSV and parse its timestamps.

        Args:
            url: Location of the trip CSV

        Returns:
            Trip DataFrame with string station ids and datetime
            ``started_at``/``ended_at`` (unparsable values become NaT)

        Raises:
            DataLoadError: If the request fails or required columns are missing
        """
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error loading trip CSV from {url}: {e}")
            raise DataLoadError(f"Could not load trips from {url}: {e}") from e

        trips = self.parse_trip_csv(response.text)
        logger.info(f"Loaded {len(trips)} trips from {url}")
        return trips

    def parse_trip_csv(self, text: str) -> pd.DataFrame:
        """
        Parse trip CSV text.

        Args:
            text: CSV content

        Returns:
            Trip DataFrame

        Raises:
            DataLoadError: If the CSV cannot be parsed or lacks required columns
        """
        try:
            trips = pd.read_csv(
                io.StringIO(text),
                dtype={'start_station_id': str, 'end_station_id': str}
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Error parsing trip CSV: {e}")
            raise DataLoadError(f"Could not parse trip CSV: {e}") from e

        missing_columns = [col for col in self.required_columns if col not in trips.columns]
        if missing_columns:
            logger.error(f"Trip CSV is missing columns: {missing_columns}")
            raise DataLoadError(f"Trip CSV is missing columns: {missing_columns}")

        # No row validation: bad dates become NaT and never match a time window
        trips['started_at'] = pd.to_datetime(trips['started_at'], format='ISO8601', errors='coerce')
        trips['ended_at'] = pd.to_datetime(trips['ended_at'], format='ISO8601', errors='coerce')
        return trips


def stations_to_geodataframe(stations: pd.DataFrame) -> gpd.GeoDataFrame:
    """Station DataFrame as WGS84 point features."""
    return gpd.GeoDataFrame(
        stations.copy(),
        geometry=gpd.points_from_xy(stations['lon'], stations['lat']),
        crs="EPSG:4326"
    )
