"""
Station traffic map page.

Loads the station and trip datasets once, then on every slider change filters
trips by time of day, recomputes station traffic and redraws the map.
"""

import streamlit as st
import pandas as pd
from typing import Dict, Any, Optional, Tuple
import logging

from bluebikes_traffic.data.loaders import (
    DataLoadError,
    StationDataLoader,
    TripDataLoader,
    stations_to_geodataframe
)
from bluebikes_traffic.traffic.aggregation import compute_station_traffic, traffic_summary
from bluebikes_traffic.traffic.time_filter import filter_trips_by_time
from .controls import KPIDisplay, TimeFilterState, TimeSliderControl
from .map_config import TrafficMapConfig, get_map_config
from .map_renderer import StationMapRenderer
from .symbology import StationSymbology
from .view_sync import MapView, ViewSync, count_visible

logger = logging.getLogger(__name__)


@st.cache_data(ttl=3600, show_spinner="Loading stations...")
def load_stations_cached(url: str, timeout: float) -> pd.DataFrame:
    """Station feed, fetched once per hour."""
    return StationDataLoader(timeout).load_stations(url)


@st.cache_data(ttl=3600, show_spinner="Loading trips...")
def load_trips_cached(url: str, timeout: float) -> pd.DataFrame:
    """Trip export, fetched once per hour."""
    return TripDataLoader(timeout).load_trips(url)


def update_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame,
                           time_state: TimeFilterState) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Recompute station traffic for the selected time of day.

    Args:
        stations: Base station DataFrame (left unchanged)
        trips: Base trip DataFrame (left unchanged)
        time_state: Current slider selection and window half-width

    Returns:
        Tuple of (filtered_trips, station_traffic)
    """
    filtered_trips = filter_trips_by_time(trips, time_state.minutes, time_state.window_minutes)
    traffic = compute_station_traffic(stations, filtered_trips)

    logger.info(f"Updated traffic for {time_state.describe()}: "
                f"{len(filtered_trips)} trips across {len(traffic)} stations")
    return filtered_trips, traffic


def load_station_data(config: TrafficMapConfig) -> Optional[Tuple[pd.DataFrame, pd.DataFrame]]:
    """
    Load stations, then trips. Returns None when either load fails.

    Args:
        config: Map configuration

    Returns:
        Tuple of (stations, trips) or None
    """
    sources = config.get_data_sources()
    timeout = sources.get('request_timeout_sec', 30)

    try:
        stations = load_stations_cached(sources['stations_url'], timeout)
        trips = load_trips_cached(sources['trips_url'], timeout)
    except DataLoadError as e:
        logger.error(f"Initialization aborted: {e}")
        st.error(f"❌ Could not load bike data: {e}")
        return None

    return stations, trips


def render_station_traffic_page(config: Optional[TrafficMapConfig] = None) -> None:
    """
    Render the complete station traffic page.

    Args:
        config: Optional map configuration; the global one is used otherwise
    """
    config = config or get_map_config()
    map_settings = config.get_map_settings()
    symbology_config = config.get_symbology_config()
    time_settings = config.get_time_filter_settings()

    st.title("🚲 Bluebikes Station Traffic")
    st.markdown("Circle size shows trips at each station; color shows whether "
                "departures or arrivals dominate.")

    loaded = load_station_data(config)
    if loaded is None:
        return
    stations, trips = loaded

    time_state = TimeSliderControl(time_settings).render_time_slider(key_prefix="traffic")

    filtered_trips, traffic = update_station_traffic(stations, trips, time_state)

    symbology = StationSymbology(symbology_config)
    styled_stations = symbology.apply(traffic)

    kpi_container = st.container()

    renderer = StationMapRenderer(map_settings)
    map_obj = renderer.create_station_map(
        styled_stations,
        symbology_config,
        symbology.marker_style(),
        bike_lane_sources=config.get_bike_lane_sources(),
        time_description=time_state.describe()
    )
    map_state = renderer.renderer.render_to_streamlit(map_obj, height=map_settings.get('height', 650))

    default_view = MapView(
        center_lat=renderer.renderer.default_center[0],
        center_lon=renderer.renderer.default_center[1],
        zoom=renderer.renderer.default_zoom,
        height=map_settings.get('height', 650)
    )
    view = MapView.from_component_state(map_state, default_view)

    view_status: Dict[str, Any] = {}
    view_sync = ViewSync(stations_to_geodataframe(stations))
    view_sync.subscribe(lambda positions: view_status.update(visible=count_visible(positions, view)))
    view_sync.view_changed(view)

    with kpi_container:
        KPIDisplay().render_kpi_strip(
            traffic_summary(traffic),
            len(filtered_trips),
            visible_stations=view_status.get('visible')
        )
