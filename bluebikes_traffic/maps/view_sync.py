"""
Screen positions of station markers for the current map view.

The map component reports its center and zoom after every pan, zoom or
resize. Each report becomes a single ``view_changed`` notification which
recomputes every station's pixel position from scratch.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple
import logging
import math

import geopandas as gpd
import pandas as pd
from pyproj import Transformer

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"
WEB_MERCATOR = "EPSG:3857"

TILE_SIZE = 256
EARTH_HALF_CIRCUMFERENCE = math.pi * 6378137.0

_to_mercator = Transformer.from_crs(WGS84, WEB_MERCATOR, always_xy=True)


@dataclass(frozen=True)
class MapView:
    """Visible map extent: center, zoom level and viewport size in pixels."""
    center_lat: float
    center_lon: float
    zoom: float
    width: int = 800
    height: int = 650

    @classmethod
    def from_component_state(cls, state: Optional[Dict[str, Any]], default: 'MapView') -> 'MapView':
        """
        Build a view from the state returned by the Folium component.

        The viewport size is taken from the reported ``bounds`` when present,
        since the component fills the page width rather than a fixed size.

        Args:
            state: Dict with ``center`` ({lat, lng}), ``zoom`` and ``bounds``
                ({_southWest, _northEast}), or None
            default: View used for anything the component did not report

        Returns:
            MapView
        """
        if not state:
            return default

        center = state.get('center') or {}
        zoom = state.get('zoom')
        zoom = float(zoom) if zoom is not None else default.zoom

        size = _viewport_size(state.get('bounds'), zoom)
        width, height = size if size else (default.width, default.height)

        return cls(
            center_lat=float(center.get('lat', default.center_lat)),
            center_lon=float(center.get('lng', default.center_lon)),
            zoom=zoom,
            width=width,
            height=height
        )


def _viewport_size(bounds: Optional[Dict[str, Any]], zoom: float) -> Optional[Tuple[int, int]]:
    """Pixel size of the area between the south-west and north-east corners, or None."""
    if not bounds:
        return None

    south_west = bounds.get('_southWest') or {}
    north_east = bounds.get('_northEast') or {}
    corners = [south_west.get('lng'), south_west.get('lat'), north_east.get('lng'), north_east.get('lat')]
    if any(value is None for value in corners):
        return None

    west, south, east, north = (float(value) for value in corners)
    x_min, y_min = _to_mercator.transform(west, south)
    x_max, y_max = _to_mercator.transform(east, north)
    left, bottom = _world_pixels(x_min, y_min, zoom)
    right, top = _world_pixels(x_max, y_max, zoom)

    width, height = round(right - left), round(bottom - top)
    if width <= 0 or height <= 0:
        return None
    return width, height


def _world_pixels(mercator_x, mercator_y, zoom: float):
    scale = TILE_SIZE * (2 ** zoom) / (2 * EARTH_HALF_CIRCUMFERENCE)
    return (mercator_x + EARTH_HALF_CIRCUMFERENCE) * scale, (EARTH_HALF_CIRCUMFERENCE - mercator_y) * scale


def project(lon: float, lat: float, view: MapView) -> Tuple[float, float]:
    """
    Project a lon/lat position to pixel coordinates within the viewport.

    Args:
        lon: Longitude in degrees
        lat: Latitude in degrees
        view: Current map view

    Returns:
        Tuple of (cx, cy); (0, 0) is the top-left corner of the map
    """
    x, y = _to_mercator.transform(lon, lat)
    center_x, center_y = _to_mercator.transform(view.center_lon, view.center_lat)

    px, py = _world_pixels(x, y, view.zoom)
    center_px, center_py = _world_pixels(center_x, center_y, view.zoom)
    return px - center_px + view.width / 2, py - center_py + view.height / 2


class ViewSync:
    """Recomputes station screen positions whenever the map view changes."""

    def __init__(self, stations: gpd.GeoDataFrame):
        self.stations = stations
        self._subscriber: Optional[Callable[[pd.DataFrame], None]] = None

    def subscribe(self, callback: Callable[[pd.DataFrame], None]) -> None:
        """Register the position subscriber, replacing any previous one."""
        self._subscriber = callback

    def compute_positions(self, view: MapView) -> pd.DataFrame:
        """
        Pixel position of every station for ``view``.

        Args:
            view: Current map view

        Returns:
            DataFrame indexed like the stations with ``cx`` and ``cy`` columns
        """
        if self.stations.empty:
            return pd.DataFrame({'cx': pd.Series(dtype=float), 'cy': pd.Series(dtype=float)})

        mercator = self.stations.geometry.to_crs(WEB_MERCATOR)
        center_x, center_y = _to_mercator.transform(view.center_lon, view.center_lat)

        px, py = _world_pixels(mercator.x, mercator.y, view.zoom)
        center_px, center_py = _world_pixels(center_x, center_y, view.zoom)

        return pd.DataFrame({
            'cx': px - center_px + view.width / 2,
            'cy': py - center_py + view.height / 2
        }, index=self.stations.index)

    def view_changed(self, view: MapView) -> pd.DataFrame:
        """Recompute positions for ``view`` and notify the subscriber."""
        positions = self.compute_positions(view)
        logger.debug(f"View changed to zoom {view.zoom} at ({view.center_lat:.5f}, "
                     f"{view.center_lon:.5f}); repositioned {len(positions)} stations")

        if self._subscriber is not None:
            self._subscriber(positions)
        return positions


def count_visible(positions: pd.DataFrame, view: MapView) -> int:
    """Number of positions that fall inside the viewport."""
    inside = (
        (positions['cx'] >= 0) & (positions['cx'] <= view.width) &
        (positions['cy'] >= 0) & (positions['cy'] <= view.height)
    )
    return int(inside.sum())
