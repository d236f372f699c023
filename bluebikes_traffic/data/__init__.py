"""
Data Component - station feed and trip export loading.
"""

from .loaders import (
    DataLoadError,
    StationDataLoader,
    TripDataLoader,
    stations_to_geodataframe
)

__all__ = [
    'DataLoadError',
    'StationDataLoader',
    'TripDataLoader',
    'stations_to_geodataframe'
]
