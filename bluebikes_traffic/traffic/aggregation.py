"""
Station traffic aggregation.

Counts trip departures and arrivals per station. Station and trip sets are
pandas DataFrames; the station identifier is ``short_name`` and trips refer
to it through ``start_station_id`` and ``end_station_id``.
"""

from dataclasses import dataclass
from typing import Dict, Any
import logging

import pandas as pd

logger = logging.getLogger(__name__)

STATION_ID_COLUMN = 'short_name'
START_STATION_COLUMN = 'start_station_id'
END_STATION_COLUMN = 'end_station_id'

TRAFFIC_COLUMNS = ['arrivals', 'departures', 'total_traffic']


@dataclass(frozen=True)
class StationTraffic:
    """Traffic counts for one station under the active time filter."""
    station_id: str
    arrivals: int = 0
    departures: int = 0
    total_traffic: int = 0


def count_trips_by_station(trips: pd.DataFrame, column: str) -> pd.Series:
    """Number of trips per station id found in ``column``."""
    if trips.empty:
        return pd.Series(dtype='int64')
    return trips[column].value_counts()


def compute_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame) -> pd.DataFrame:
    """
    Compute arrivals, departures and total traffic for every station.

    Args:
        stations: DataFrame with a ``short_name`` column
        trips: DataFrame with ``start_station_id`` and ``end_station_id`` columns

    Returns:
        Copy of ``stations`` in the same order with ``arrivals``, ``departures``
        and ``total_traffic`` columns set. Trips referring to unknown stations
        are not counted anywhere.
    """
    departures = count_trips_by_station(trips, START_STATION_COLUMN)
    arrivals = count_trips_by_station(trips, END_STATION_COLUMN)

    traffic = stations.copy()
    station_ids = traffic[STATION_ID_COLUMN]

    traffic['arrivals'] = station_ids.map(arrivals).fillna(0).astype('int64')
    traffic['departures'] = station_ids.map(departures).fillna(0).astype('int64')
    traffic['total_traffic'] = traffic['arrivals'] + traffic['departures']

    logger.debug(f"Computed traffic for {len(traffic)} stations from {len(trips)} trips")
    return traffic


def station_traffic_records(stations: pd.DataFrame, trips: pd.DataFrame) -> Dict[str, StationTraffic]:
    """
    Compute station traffic as immutable records keyed by station id.

    Args:
        stations: DataFrame with a ``short_name`` column
        trips: Trip DataFrame

    Returns:
        Dictionary mapping station id to StationTraffic
    """
    traffic = compute_station_traffic(stations, trips)

    records = {}
    for row in traffic[[STATION_ID_COLUMN] + TRAFFIC_COLUMNS].itertuples(index=False):
        station_id = str(row[0])
        records[station_id] = StationTraffic(
            station_id=station_id,
            arrivals=int(row[1]),
            departures=int(row[2]),
            total_traffic=int(row[3])
        )

    return records


def traffic_summary(traffic: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarize aggregated station traffic for display.

    Args:
        traffic: Output of compute_station_traffic

    Returns:
        Dictionary with station counts, trip totals and the busiest station
    """
    if traffic.empty:
        return {
            'n_stations': 0,
            'active_stations': 0,
            'total_departures': 0,
            'total_arrivals': 0,
            'busiest_station': None,
            'busiest_station_traffic': 0
        }

    busiest_station = None
    busiest_traffic = int(traffic['total_traffic'].max())
    if busiest_traffic > 0:
        busiest_row = traffic.iloc[traffic['total_traffic'].to_numpy().argmax()]
        busiest_station = busiest_row.get('name')
        if pd.isna(busiest_station):
            busiest_station = busiest_row[STATION_ID_COLUMN]

    return {
        'n_stations': len(traffic),
        'active_stations': int((traffic['total_traffic'] > 0).sum()),
        'total_departures': int(traffic['departures'].sum()),
        'total_arrivals': int(traffic['arrivals'].sum()),
        'busiest_station': busiest_station,
        'busiest_station_traffic': busiest_traffic
    }
