"""
Traffic Component - per-station trip counts and time-of-day filtering.
"""

from .aggregation import (
    StationTraffic,
    compute_station_traffic,
    station_traffic_records,
    traffic_summary
)
from .time_filter import ANY_TIME, filter_trips_by_time, minutes_since_midnight

__all__ = [
    'ANY_TIME',
    'StationTraffic',
    'compute_station_traffic',
    'station_traffic_records',
    'traffic_summary',
    'filter_trips_by_time',
    'minutes_since_midnight'
]
