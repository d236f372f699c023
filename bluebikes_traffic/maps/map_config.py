"""
Configuration management for the station traffic map.

This module holds data source locations, time filter settings, marker
symbology and map display settings, with optional overrides from a JSON file.
"""

import copy
import json
import os
from typing import Dict, Any, Optional, List
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

STATIONS_URL = "https://dsc106.com/labs/lab07/data/bluebikes-stations.json"
TRIPS_URL = "https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv"

BIKE_LANE_SOURCES = [
    {
        "name": "Boston bike network",
        "url": "https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson",
    },
    {
        "name": "Cambridge bike facilities",
        "url": "https://raw.githubusercontent.com/cambridgegis/cambridgegis_data/main/Recreation/Bike_Facilities/RECREATION_BikeFacilities.geojson",
    },
]


class TrafficMapConfig:
    """Manages station traffic map configuration settings."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or "traffic_map_config.json"
        self.default_config = self._get_default_config()
        self.config = self._load_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default map configuration."""
        return {
            "data_sources": {
                "stations_url": STATIONS_URL,
                "trips_url": TRIPS_URL,
                "bike_lanes": copy.deepcopy(BIKE_LANE_SOURCES),
                "request_timeout_sec": 30
            },
            "time_filter": {
                "window_minutes": 60,
                "slider_min": -1,
                "slider_max": 1440
            },
            "symbology": {
                "radius_range": [0, 25],
                "departures_color": "steelblue",
                "arrivals_color": "darkorange",
                "flow_steps": [0, 0.5, 1],
                "stroke_color": "white",
                "stroke_width": 1,
                "fill_opacity": 0.8,
                "lane_color": "#4e834e",
                "lane_width": 5,
                "lane_opacity": 0.6
            },
            "map_settings": {
                "default_center": [42.36027, -71.09415],
                "default_zoom": 12,
                "min_zoom": 5,
                "max_zoom": 18,
                "tiles": "OpenStreetMap",
                "height": 650
            }
        }

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config = json.load(f)
                logger.info(f"Loaded map configuration from {self.config_path}")

                return self._merge_configs(self.default_config, config)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
                return copy.deepcopy(self.default_config)
        else:
            logger.info(f"Config file {self.config_path} not found, using defaults")
            return copy.deepcopy(self.default_config)

    def _merge_configs(self, default: Dict, user: Dict) -> Dict:
        """Recursively merge user config with defaults."""
        merged = copy.deepcopy(default)

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            config_dir = Path(self.config_path).parent
            config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=2)
            logger.info(f"Saved map configuration to {self.config_path}")
        except OSError as e:
            logger.error(f"Failed to save config to {self.config_path}: {e}")

    def get_data_sources(self) -> Dict[str, Any]:
        """Get dataset URLs and fetch settings."""
        return self.config["data_sources"]

    def get_bike_lane_sources(self) -> List[Dict[str, str]]:
        """Get bike lane overlay sources."""
        return self.config["data_sources"]["bike_lanes"]

    def get_time_filter_settings(self) -> Dict[str, Any]:
        """Get time slider and window settings."""
        return self.config["time_filter"]

    def get_symbology_config(self) -> Dict[str, Any]:
        """Get station marker symbology settings."""
        return self.config["symbology"]

    def get_map_settings(self) -> Dict[str, Any]:
        """Get map display settings."""
        return self.config["map_settings"]

    def update_symbology_config(self, updates: Dict[str, Any]) -> None:
        """Update marker symbology settings."""
        self.config["symbology"].update(updates)
        logger.info("Updated symbology configuration")

    def update_time_filter_settings(self, updates: Dict[str, Any]) -> None:
        """Update time filter settings."""
        self.config["time_filter"].update(updates)
        logger.info("Updated time filter configuration")

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self.config = copy.deepcopy(self.default_config)
        logger.info("Reset configuration to defaults")


# Global configuration instance
_map_config = None

def get_map_config(config_path: Optional[str] = None) -> TrafficMapConfig:
    """Get global map configuration instance."""
    global _map_config
    if _map_config is None:
        _map_config = TrafficMapConfig(config_path)
    return _map_config
