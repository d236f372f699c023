"""
Maps Component - Interactive station traffic map.

Stations are drawn as circles sized by trip traffic and colored by the share
of departures, over bike lane overlays. Maps are rendered using Folium.
"""

from .traffic_page import render_station_traffic_page
from .map_config import TrafficMapConfig
from .symbology import StationSymbology
from .view_sync import MapView, ViewSync

__all__ = [
    'render_station_traffic_page',
    'TrafficMapConfig',
    'StationSymbology',
    'MapView',
    'ViewSync'
]
