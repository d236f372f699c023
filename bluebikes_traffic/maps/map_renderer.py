"""
Map rendering module for the station traffic map.

This module creates the Folium map with bike lane overlays, traffic-sized
station markers and a flow legend.
"""

import folium
import pandas as pd
from typing import Dict, List, Tuple, Optional, Any
import logging

from .symbology import FlowColorScale

logger = logging.getLogger(__name__)


class MapRenderer:
    """Core map rendering using Folium."""

    def __init__(self, map_settings: Optional[Dict[str, Any]] = None):
        map_settings = map_settings or {}
        self.default_center = list(map_settings.get('default_center', [42.36027, -71.09415]))
        self.default_zoom = map_settings.get('default_zoom', 12)
        self.min_zoom = map_settings.get('min_zoom', 5)
        self.max_zoom = map_settings.get('max_zoom', 18)
        self.tiles = map_settings.get('tiles', 'OpenStreetMap')

    def create_base_map(self, center: Optional[List[float]] = None,
                        zoom: Optional[int] = None) -> folium.Map:
        """
        Create the base map.

        Args:
            center: Optional [lat, lon]; defaults to the configured center
            zoom: Optional zoom level; defaults to the configured zoom

        Returns:
            Folium Map object
        """
        location = list(center) if center is not None else self.default_center

        m = folium.Map(
            location=location,
            zoom_start=zoom if zoom is not None else self.default_zoom,
            min_zoom=self.min_zoom,
            max_zoom=self.max_zoom,
            tiles=self.tiles
        )

        logger.debug(f"Created base map centered at {location}")
        return m

    def add_bike_lane_layers(self, map_obj: folium.Map, sources: List[Dict[str, str]],
                             style_config: Dict[str, Any]) -> folium.Map:
        """
        Add static bike lane line layers.

        The GeoJSON is referenced by URL and fetched by the browser.

        Args:
            map_obj: Folium Map object
            sources: List of {name, url} dictionaries
            style_config: Symbology configuration with lane_* settings

        Returns:
            Updated Folium Map object
        """
        lane_style = {
            'color': style_config.get('lane_color', '#4e834e'),
            'weight': style_config.get('lane_width', 5),
            'opacity': style_config.get('lane_opacity', 0.6)
        }

        for source in sources:
            folium.GeoJson(
                source['url'],
                name=source.get('name', 'Bike lanes'),
                embed=False,
                style_function=lambda x, style=lane_style: dict(style)
            ).add_to(map_obj)

        logger.info(f"Added {len(sources)} bike lane layers")
        return map_obj

    def add_station_layer(self, map_obj: folium.Map, stations: pd.DataFrame,
                          marker_style: Dict[str, Any]) -> folium.Map:
        """
        Add one circle marker per station.

        Args:
            map_obj: Folium Map object
            stations: Styled station DataFrame with lat, lon, radius, color, tooltip
            marker_style: Stroke and fill settings

        Returns:
            Updated Folium Map object
        """
        if stations.empty:
            logger.warning("No stations to render")
            return map_obj

        station_group = folium.FeatureGroup(name="Stations")

        for row in stations.itertuples(index=False):
            if pd.isna(row.lat) or pd.isna(row.lon):
                continue

            folium.CircleMarker(
                location=[row.lat, row.lon],
                radius=row.radius,
                color=marker_style.get('stroke_color', 'white'),
                weight=marker_style.get('stroke_width', 1),
                fill=True,
                fill_color=row.color,
                fill_opacity=marker_style.get('fill_opacity', 0.8),
                tooltip=row.tooltip
            ).add_to(station_group)

        station_group.add_to(map_obj)
        logger.info(f"Added {len(stations)} station markers to map")
        return map_obj

    def render_to_streamlit(self, map_obj: folium.Map, height: int = 650) -> Optional[Dict[str, Any]]:
        """
        Render Folium map in Streamlit.

        Args:
            map_obj: Folium Map object
            height: Map height in pixels

        Returns:
            View state reported by the component (center, zoom, bounds)
        """
        from streamlit_folium import st_folium

        return st_folium(map_obj, width=None, height=height,
                         returned_objects=["center", "zoom", "bounds"])


class LegendGenerator:
    """Generates the flow legend for station markers."""

    def __init__(self):
        self.legend_template = """
        <div style="position: fixed;
                    bottom: 50px; left: 50px; width: 200px; height: auto;
                    background-color: white; border:2px solid grey; z-index:9999;
                    font-size:12px; padding: 10px; border-radius: 5px;
                    box-shadow: 0 2px 4px rgba(0,0,0,0.2);">
        <h4 style="margin: 0 0 10px 0; font-size: 14px; color: #333;">{title}</h4>
        {content}
        </div>
        """

    def create_legend(self, title: str, entries: List[Tuple[str, str]],
                      time_description: Optional[str] = None) -> str:
        """
        Create HTML legend.

        Args:
            title: Legend title
            entries: (label, color) pairs
            time_description: Active time filter, shown under the entries

        Returns:
            HTML string for legend
        """
        content = ""

        for label, color in entries:
            content += f"""
            <div style="margin: 3px 0; display: flex; align-items: center;">
                <span style="background-color: {color}; width: 14px; height: 14px;
                           border-radius: 50%; display: inline-block; margin-right: 8px;
                           border: 1px solid #ccc;"></span>
                <span style="font-size: 11px;">{label}</span>
            </div>
            """

        if time_description:
            content += '<hr style="margin: 10px 0; border: none; border-top: 1px solid #ddd;">'
            content += f'<div style="font-size: 10px; color: #666;">Time: {time_description}</div>'

        return self.legend_template.format(title=title, content=content)

    def add_legend_to_map(self, map_obj: folium.Map, legend_html: str) -> folium.Map:
        """Attach legend HTML to map."""
        map_obj.get_root().html.add_child(folium.Element(legend_html))
        return map_obj


class StationMapRenderer:
    """Builds the complete station traffic map."""

    def __init__(self, map_settings: Optional[Dict[str, Any]] = None):
        self.renderer = MapRenderer(map_settings)
        self.legend_generator = LegendGenerator()

    def create_station_map(self, stations: pd.DataFrame, symbology_config: Dict[str, Any],
                           marker_style: Dict[str, Any],
                           bike_lane_sources: Optional[List[Dict[str, str]]] = None,
                           time_description: Optional[str] = None) -> folium.Map:
        """
        Create map with bike lanes, station markers and legend.

        Args:
            stations: Styled station DataFrame
            symbology_config: Symbology configuration
            marker_style: Stroke and fill settings
            bike_lane_sources: Optional bike lane overlays
            time_description: Active time filter description for the legend

        Returns:
            Folium Map object
        """
        m = self.renderer.create_base_map()

        if bike_lane_sources:
            self.renderer.add_bike_lane_layers(m, bike_lane_sources, symbology_config)

        self.renderer.add_station_layer(m, stations, marker_style)

        color_scale = FlowColorScale(
            symbology_config.get('departures_color', 'steelblue'),
            symbology_config.get('arrivals_color', 'darkorange'),
            symbology_config.get('flow_steps', [0, 0.5, 1])
        )
        legend_html = self.legend_generator.create_legend(
            "Station Traffic Flow", color_scale.get_legend_entries(), time_description
        )
        self.legend_generator.add_legend_to_map(m, legend_html)

        return m
