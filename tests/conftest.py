"""
Pytest configuration and fixtures for station traffic tests.
"""

import pytest
import pandas as pd
from datetime import datetime


@pytest.fixture
def sample_stations():
    """Create a small station set."""
    return pd.DataFrame({
        'short_name': ['A32000', 'B32006', 'C32010', 'D32020'],
        'name': ['Central Square', 'MIT at Mass Ave', 'Kendall T', 'Harvard Square'],
        'lon': [-71.1031, -71.0942, -71.0862, -71.1189],
        'lat': [42.3656, 42.3581, 42.3625, 42.3734]
    })


@pytest.fixture
def sample_trips():
    """Create trips between the sample stations, plus one to an unknown station."""
    rows = [
        ('A32000', 'B32006', '2024-03-01 08:05:00', '2024-03-01 08:20:00'),
        ('A32000', 'C32010', '2024-03-01 09:05:00', '2024-03-01 09:15:00'),
        ('B32006', 'A32000', '2024-03-02 10:00:00', '2024-03-02 10:30:00'),
        ('C32010', 'A32000', '2024-03-02 17:45:00', '2024-03-02 18:05:00'),
        ('A32000', 'X99999', '2024-03-03 23:50:00', '2024-03-04 00:10:00'),
    ]
    trips = pd.DataFrame(rows, columns=['start_station_id', 'end_station_id', 'started_at', 'ended_at'])
    trips['started_at'] = pd.to_datetime(trips['started_at'])
    trips['ended_at'] = pd.to_datetime(trips['ended_at'])
    return trips


@pytest.fixture
def station_feed(sample_stations):
    """Station feed document as served by the station endpoint."""
    return {
        'last_updated': 1710000000,
        'data': {
            'stations': sample_stations.to_dict('records')
        }
    }


@pytest.fixture
def trip_csv_text():
    """Trip export CSV content."""
    return (
        "ride_id,rideable_type,started_at,ended_at,start_station_id,end_station_id,is_member\n"
        "r1,classic_bike,2024-03-01 08:05:00.123,2024-03-01 08:20:00.456,A32000,B32006,1\n"
        "r2,electric_bike,2024-03-01 09:05:00,2024-03-01 09:15:00,A32000,C32010,0\n"
        "r3,classic_bike,not a date,2024-03-02 10:30:00,B32006,A32000,1\n"
    )


def make_trip(start_id: str, end_id: str, started_at: datetime, ended_at: datetime) -> dict:
    """Build one trip row."""
    return {
        'start_station_id': start_id,
        'end_station_id': end_id,
        'started_at': pd.Timestamp(started_at),
        'ended_at': pd.Timestamp(ended_at)
    }


@pytest.fixture
def trip_factory():
    """Build trip DataFrames from (start_id, end_id, started_at, ended_at) tuples."""
    def _build(*trips):
        rows = [make_trip(*trip) for trip in trips]
        frame = pd.DataFrame(rows, columns=['start_station_id', 'end_station_id', 'started_at', 'ended_at'])
        frame['started_at'] = pd.to_datetime(frame['started_at'])
        frame['ended_at'] = pd.to_datetime(frame['ended_at'])
        return frame
    return _build


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
