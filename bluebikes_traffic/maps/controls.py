"""
Interactive controls for the station traffic map.

This module provides the time-of-day slider with its labels and the KPI strip
shown above the map.
"""

import streamlit as st
from dataclasses import dataclass
from typing import Dict, Any, Optional
import logging

from bluebikes_traffic.traffic.time_filter import ANY_TIME, DEFAULT_WINDOW_MINUTES

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440
ANY_TIME_LABEL = "(any time)"


def format_time(minutes: int) -> str:
    """
    Format minutes after midnight as a short 12-hour clock time.

    Args:
        minutes: Minutes after midnight; values past a day wrap around

    Returns:
        Time string such as ``"9:05 AM"``
    """
    hours, mins = divmod(int(minutes) % MINUTES_PER_DAY, 60)
    period = "AM" if hours < 12 else "PM"
    hour_12 = hours % 12 or 12
    return f"{hour_12}:{mins:02d} {period}"


def format_window(window_minutes: int) -> str:
    """Half-width of the time window, e.g. "1 hour", "2 hours" or "30 min"."""
    if window_minutes % 60 == 0:
        hours = window_minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{window_minutes} min"


@dataclass(frozen=True)
class TimeFilterState:
    """Current slider selection, passed explicitly into the map update."""
    minutes: int = ANY_TIME
    window_minutes: int = DEFAULT_WINDOW_MINUTES

    @property
    def is_any_time(self) -> bool:
        return self.minutes == ANY_TIME

    @property
    def time_label(self) -> str:
        """Formatted time, empty while no time is selected."""
        return "" if self.is_any_time else format_time(self.minutes)

    @property
    def show_any_time_label(self) -> bool:
        return self.is_any_time

    def describe(self) -> str:
        return ANY_TIME_LABEL if self.is_any_time else f"{self.time_label} +/- {format_window(self.window_minutes)}"


class TimeSliderControl:
    """Renders the time-of-day slider and its labels."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.min_value = settings.get('slider_min', ANY_TIME)
        self.max_value = settings.get('slider_max', MINUTES_PER_DAY)
        self.window_minutes = settings.get('window_minutes', DEFAULT_WINDOW_MINUTES)

    def render_time_slider(self, key_prefix: str = "traffic") -> TimeFilterState:
        """
        Render the slider and return its state.

        Args:
            key_prefix: Prefix for Streamlit widget keys

        Returns:
            TimeFilterState for the selected value
        """
        col_slider, col_label = st.columns([4, 1])

        with col_slider:
            minutes = st.slider(
                "Filter by time",
                min_value=self.min_value,
                max_value=self.max_value,
                value=ANY_TIME,
                step=1,
                key=f"{key_prefix}_time_filter",
                help="Minutes since midnight; the leftmost position shows trips at any time"
            )

        state = TimeFilterState(int(minutes), self.window_minutes)

        with col_label:
            if state.time_label:
                st.markdown(f"**{state.time_label}**")
            if state.show_any_time_label:
                st.caption(ANY_TIME_LABEL)

        logger.debug(f"Time filter set to {state.describe()}")
        return state


class KPIDisplay:
    """KPI strip for the current traffic view."""

    def render_kpi_strip(self, summary: Dict[str, Any], n_trips: int,
                         visible_stations: Optional[int] = None) -> None:
        """
        Render headline numbers for the current filter.

        Args:
            summary: Output of traffic_summary
            n_trips: Number of trips in the current filter
            visible_stations: Stations inside the current viewport, if known
        """
        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.metric("Trips", f"{n_trips:,}", help="Trips starting or ending in the selected window")

        with col2:
            st.metric(
                "Active Stations",
                f"{summary['active_stations']:,} / {summary['n_stations']:,}",
                help="Stations with at least one arrival or departure"
            )

        with col3:
            busiest = summary['busiest_station'] or "N/A"
            st.metric("Busiest Station", str(busiest),
                      delta=f"{summary['busiest_station_traffic']:,} trips",
                      delta_color="off")

        with col4:
            st.metric("Stations In View",
                      "N/A" if visible_stations is None else f"{visible_stations:,}")
