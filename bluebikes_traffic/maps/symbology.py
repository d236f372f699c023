"""
Symbology and styling module for the station traffic map.

This module maps station traffic totals to marker radius and the share of
departures to marker color.
"""

import numpy as np
import pandas as pd
from typing import List, Tuple, Dict, Any, Optional
import matplotlib.colors as mcolors
import logging

logger = logging.getLogger(__name__)

FLOW_LABELS = {
    0.0: 'More arrivals',
    0.5: 'Balanced',
    1.0: 'More departures'
}


class RadiusScale:
    """Square-root scale from traffic totals to marker radius in pixels."""

    def __init__(self, radius_range: Tuple[float, float] = (0, 25)):
        self.radius_range = tuple(radius_range)
        self.domain_max = 0.0

    def fit(self, values: np.ndarray) -> 'RadiusScale':
        """Set the domain to ``[0, max(values)]``."""
        values = np.asarray(values, dtype=float)
        self.domain_max = float(np.nanmax(values)) if len(values) > 0 else 0.0
        logger.debug(f"Radius scale domain: 0 to {self.domain_max}")
        return self

    def transform(self, values: np.ndarray) -> List[float]:
        """
        Map values to radii.

        Args:
            values: Array of traffic totals

        Returns:
            List of radii; every radius is the lower bound when the domain is empty
        """
        values = np.asarray(values, dtype=float)
        min_radius, max_radius = self.radius_range

        if self.domain_max <= 0:
            return [float(min_radius)] * len(values)

        normalized = np.sqrt(np.clip(values, 0, None)) / np.sqrt(self.domain_max)
        radii = min_radius + normalized * (max_radius - min_radius)
        return radii.tolist()


class FlowColorScale:
    """Quantizes the departure share and blends departure/arrival colors."""

    def __init__(self, departures_color: str = 'steelblue', arrivals_color: str = 'darkorange',
                 flow_steps: Optional[List[float]] = None):
        self.departures_color = departures_color
        self.arrivals_color = arrivals_color
        self.flow_steps = list(flow_steps) if flow_steps is not None else [0, 0.5, 1]

    def quantize(self, ratios: np.ndarray) -> np.ndarray:
        """
        Quantize departure ratios in [0, 1] onto the flow steps.

        Args:
            ratios: Array of departures / total_traffic

        Returns:
            Array of step values, same length as ``ratios``
        """
        ratios = np.asarray(ratios, dtype=float)
        n_steps = len(self.flow_steps)
        thresholds = [i / n_steps for i in range(1, n_steps)]

        indices = np.digitize(np.clip(ratios, 0, 1), thresholds)
        return np.asarray(self.flow_steps, dtype=float)[indices]

    def flow_ratios(self, departures: np.ndarray, total_traffic: np.ndarray) -> np.ndarray:
        """Departure share per station; stations with no traffic count as balanced."""
        departures = np.asarray(departures, dtype=float)
        total_traffic = np.asarray(total_traffic, dtype=float)

        ratios = np.full(len(total_traffic), 0.5)
        has_traffic = total_traffic > 0
        ratios[has_traffic] = departures[has_traffic] / total_traffic[has_traffic]
        return self.quantize(ratios)

    def blend(self, ratio: float) -> str:
        """Hex color mixing ``ratio`` of the departures color with the arrivals color."""
        departures_rgb = np.array(mcolors.to_rgb(self.departures_color))
        arrivals_rgb = np.array(mcolors.to_rgb(self.arrivals_color))
        mixed = ratio * departures_rgb + (1 - ratio) * arrivals_rgb
        return mcolors.to_hex(np.clip(mixed, 0, 1))

    def get_legend_entries(self) -> List[Tuple[str, str]]:
        """(label, color) pairs from most departures to most arrivals."""
        entries = []
        for step in sorted(self.flow_steps, reverse=True):
            label = FLOW_LABELS.get(float(step), f'{step:.0%} departures')
            entries.append((label, self.blend(step)))
        return entries


def format_traffic_tooltip(total_traffic: int, departures: int, arrivals: int) -> str:
    """Tooltip text for a station marker."""
    return f"{total_traffic} trips ({departures} departures, {arrivals} arrivals)"


class StationSymbology:
    """Main interface for station marker styling."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.config = config
        self.radius_scale = RadiusScale(config.get('radius_range', (0, 25)))
        self.color_scale = FlowColorScale(
            config.get('departures_color', 'steelblue'),
            config.get('arrivals_color', 'darkorange'),
            config.get('flow_steps', [0, 0.5, 1])
        )

    def apply(self, traffic: pd.DataFrame) -> pd.DataFrame:
        """
        Add ``radius``, ``flow_ratio``, ``color`` and ``tooltip`` columns.

        Args:
            traffic: Station DataFrame from compute_station_traffic

        Returns:
            Styled copy of ``traffic`` in the same order
        """
        styled = traffic.copy()

        if styled.empty:
            for column in ['radius', 'flow_ratio', 'color', 'tooltip']:
                styled[column] = pd.Series(dtype=object)
            return styled

        total_traffic = styled['total_traffic'].to_numpy()
        self.radius_scale.fit(total_traffic)

        styled['radius'] = self.radius_scale.transform(total_traffic)
        styled['flow_ratio'] = self.color_scale.flow_ratios(
            styled['departures'].to_numpy(), total_traffic
        )
        styled['color'] = [self.color_scale.blend(ratio) for ratio in styled['flow_ratio']]
        styled['tooltip'] = [
            format_traffic_tooltip(total, departures, arrivals)
            for total, departures, arrivals in zip(
                styled['total_traffic'], styled['departures'], styled['arrivals']
            )
        ]

        logger.info(f"Created symbology for {len(styled)} stations "
                    f"(max traffic {self.radius_scale.domain_max:.0f})")
        return styled

    def marker_style(self) -> Dict[str, Any]:
        """Stroke and fill settings shared by all station markers."""
        return {
            'stroke_color': self.config.get('stroke_color', 'white'),
            'stroke_width': self.config.get('stroke_width', 1),
            'fill_opacity': self.config.get('fill_opacity', 0.8)
        }
