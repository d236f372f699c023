"""
Time-of-day filtering of trips.

A trip is kept when its start or end time-of-day lies within a window around
the selected minute. Times are compared as minutes since midnight, so the
window does not wrap around midnight.
"""

from typing import Union
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ANY_TIME = -1
DEFAULT_WINDOW_MINUTES = 60


def minutes_since_midnight(value: Union[pd.Series, pd.Timestamp]) -> Union[pd.Series, float]:
    """
    Convert timestamps to minutes since midnight, dropping date and seconds.

    Args:
        value: A datetime Series or a single timestamp

    Returns:
        Series (or scalar) of ``hour * 60 + minute``; missing timestamps give NaN
    """
    if isinstance(value, pd.Series):
        stamps = _as_datetime(value)
        return stamps.dt.hour * 60 + stamps.dt.minute

    if pd.isna(value):
        return np.nan
    stamp = pd.Timestamp(value)
    return stamp.hour * 60 + stamp.minute


def _as_datetime(values: pd.Series) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(values):
        return values
    return pd.to_datetime(values, format='mixed', errors='coerce')


def filter_trips_by_time(trips: pd.DataFrame, time_filter: int,
                         window_minutes: int = DEFAULT_WINDOW_MINUTES) -> pd.DataFrame:
    """
    Keep trips that start or end within ``window_minutes`` of ``time_filter``.

    Args:
        trips: DataFrame with ``started_at`` and ``ended_at`` columns
        time_filter: Minutes since midnight, or ANY_TIME (-1) for no filtering
        window_minutes: Half-width of the window, inclusive

    Returns:
        ``trips`` itself for ANY_TIME, otherwise the matching rows in their
        original order. The input is never modified.
    """
    if time_filter == ANY_TIME:
        return trips

    started_minutes = minutes_since_midnight(trips['started_at'])
    ended_minutes = minutes_since_midnight(trips['ended_at'])

    mask = (
        ((started_minutes - time_filter).abs() <= window_minutes) |
        ((ended_minutes - time_filter).abs() <= window_minutes)
    )

    filtered = trips[mask]
    logger.debug(f"Time filter {time_filter} +/- {window_minutes} min kept "
                 f"{len(filtered)} of {len(trips)} trips")
    return filtered
