"""
Tests for station and trip dataset loading.
"""

import pytest
import pandas as pd
import geopandas as gpd
import requests
from unittest.mock import Mock, patch

from bluebikes_traffic.data.loaders import (
    DataLoadError,
    StationDataLoader,
    TripDataLoader,
    stations_to_geodataframe
)


def mock_response(json_data=None, text="", status_error=None, json_error=None):
    """Build a fake requests response."""
    response = Mock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


class TestStationDataLoader:
    """Test cases for StationDataLoader."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = StationDataLoader(timeout=5)

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_load_stations(self, mock_get, station_feed):
        """Stations are read from data.stations."""
        mock_get.return_value = mock_response(json_data=station_feed)

        stations = self.loader.load_stations('https://example.com/stations.json')

        mock_get.assert_called_once_with('https://example.com/stations.json', timeout=5)
        assert len(stations) == 4
        assert list(stations['short_name']) == ['A32000', 'B32006', 'C32010', 'D32020']
        assert stations['lon'].dtype == float

    def test_parse_keeps_extra_fields(self, station_feed):
        """Feed attributes beyond the required ones pass through."""
        stations = self.loader.parse_station_feed(station_feed)

        assert 'name' in stations.columns

    def test_parse_numeric_ids_become_strings(self):
        """Station ids are compared as strings."""
        feed = {'data': {'stations': [{'short_name': 123, 'lon': '-71.1', 'lat': '42.3'}]}}
        stations = self.loader.parse_station_feed(feed)

        assert stations.loc[0, 'short_name'] == '123'
        assert stations.loc[0, 'lon'] == pytest.approx(-71.1)

    def test_parse_missing_stations_list(self):
        """A document without data.stations is rejected."""
        with pytest.raises(DataLoadError):
            self.loader.parse_station_feed({'data': {}})

        with pytest.raises(DataLoadError):
            self.loader.parse_station_feed({'stations': []})

    @pytest.mark.parametrize("stations", [
        {'short_name': 'A', 'lon': 1, 'lat': 2},
        "A32000",
        None,
    ])
    def test_parse_stations_not_a_list(self, stations):
        """A data.stations value that is not a list of records is rejected."""
        with pytest.raises(DataLoadError, match="not a list"):
            self.loader.parse_station_feed({'data': {'stations': stations}})

    def test_parse_missing_required_fields(self):
        """Stations without coordinates are rejected."""
        feed = {'data': {'stations': [{'short_name': 'A'}]}}

        with pytest.raises(DataLoadError, match="lon"):
            self.loader.parse_station_feed(feed)

    def test_validate_station_schema(self, sample_stations):
        """Schema validation reports missing fields."""
        assert self.loader.validate_station_schema(sample_stations) == (True, [])

        is_valid, missing = self.loader.validate_station_schema(sample_stations.drop(columns=['lat']))
        assert not is_valid
        assert missing == ['lat']

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_http_error_raises_load_error(self, mock_get):
        """HTTP failures surface as DataLoadError."""
        mock_get.return_value = mock_response(status_error=requests.HTTPError("404 Not Found"))

        with pytest.raises(DataLoadError, match="404"):
            self.loader.load_stations('https://example.com/missing.json')

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_connection_error_raises_load_error(self, mock_get):
        """Network failures surface as DataLoadError."""
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(DataLoadError):
            self.loader.load_stations('https://example.com/stations.json')

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_invalid_json_raises_load_error(self, mock_get):
        """Undecodable JSON surfaces as DataLoadError."""
        mock_get.return_value = mock_response(json_error=ValueError("Expecting value"))

        with pytest.raises(DataLoadError):
            self.loader.load_stations('https://example.com/stations.json')


class TestTripDataLoader:
    """Test cases for TripDataLoader."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = TripDataLoader(timeout=5)

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_load_trips(self, mock_get, trip_csv_text):
        """Trips are parsed with datetime columns and string ids."""
        mock_get.return_value = mock_response(text=trip_csv_text)

        trips = self.loader.load_trips('https://example.com/trips.csv')

        assert len(trips) == 3
        assert pd.api.types.is_datetime64_any_dtype(trips['started_at'])
        assert pd.api.types.is_datetime64_any_dtype(trips['ended_at'])
        assert trips.loc[0, 'start_station_id'] == 'A32000'
        assert trips.loc[0, 'started_at'] == pd.Timestamp('2024-03-01 08:05:00.123')
        assert 'ride_id' in trips.columns

    def test_unparsable_dates_become_nat(self, trip_csv_text):
        """Bad timestamps are kept as NaT rather than dropped."""
        trips = self.loader.parse_trip_csv(trip_csv_text)

        assert len(trips) == 3
        assert pd.isna(trips.loc[2, 'started_at'])
        assert trips.loc[2, 'ended_at'] == pd.Timestamp('2024-03-02 10:30:00')

    def test_numeric_looking_ids_stay_strings(self):
        """Ids such as 001 keep their leading zeros."""
        text = "start_station_id,end_station_id,started_at,ended_at\n001,002,2024-03-01 08:00:00,2024-03-01 08:10:00\n"
        trips = self.loader.parse_trip_csv(text)

        assert trips.loc[0, 'start_station_id'] == '001'
        assert trips.loc[0, 'end_station_id'] == '002'

    def test_missing_columns(self):
        """A CSV without station id columns is rejected."""
        text = "ride_id,started_at,ended_at\nr1,2024-03-01 08:00:00,2024-03-01 08:10:00\n"

        with pytest.raises(DataLoadError, match="start_station_id"):
            self.loader.parse_trip_csv(text)

    def test_empty_csv(self):
        """An empty body is rejected."""
        with pytest.raises(DataLoadError):
            self.loader.parse_trip_csv("")

    @patch('bluebikes_traffic.data.loaders.requests.get')
    def test_http_error_raises_load_error(self, mock_get):
        """HTTP failures surface as DataLoadError."""
        mock_get.return_value = mock_response(status_error=requests.HTTPError("500 Server Error"))

        with pytest.raises(DataLoadError):
            self.loader.load_trips('https://example.com/trips.csv')


class TestStationsToGeoDataFrame:
    """Test cases for stations_to_geodataframe."""

    def test_points_in_wgs84(self, sample_stations):
        """Stations become WGS84 points at lon/lat."""
        gdf = stations_to_geodataframe(sample_stations)

        assert isinstance(gdf, gpd.GeoDataFrame)
        assert gdf.crs.to_epsg() == 4326
        assert gdf.geometry.iloc[0].x == pytest.approx(-71.1031)
        assert gdf.geometry.iloc[0].y == pytest.approx(42.3656)
        assert 'geometry' not in sample_stations.columns
