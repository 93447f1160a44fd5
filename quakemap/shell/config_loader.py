"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in quakemap/core/config.py.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakemap.core.config import Config
from quakemap.core.filters import ALL_TYPES, FilterCriteria


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} environment placeholder.

    Non-string values and plain strings are returned unchanged.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_optional_float(value: Any) -> float | None:
    value = _resolve_value(value)
    if value is None:
        return None
    return float(value)


def _parse_center(data: Any) -> tuple[float, float]:
    """Parse a map center from {latitude, longitude} or a [lat, lon] pair."""
    if isinstance(data, dict):
        return (float(data["latitude"]), float(data["longitude"]))
    lat, lon = data
    return (float(lat), float(lon))


def _parse_criteria(data: dict[str, Any]) -> FilterCriteria:
    """Parse the initial filter selection from config data."""
    return FilterCriteria(
        min_magnitude=float(_resolve_value(data.get("min_magnitude", 0.0))),
        event_type=str(_resolve_value(data.get("event_type", ALL_TYPES))),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    map_data = data.get("map", {}) or {}
    static_data = data.get("static_map", {}) or {}

    return Config(
        log_level=str(_resolve_value(data.get("log_level", defaults.log_level))).upper(),
        host=str(_resolve_value(data.get("host", defaults.host))),
        port=int(_resolve_value(data.get("port", defaults.port))),
        request_timeout_seconds=_parse_optional_float(data.get("request_timeout_seconds")),
        tile_url=map_data.get("tile_url", defaults.tile_url),
        tile_attribution=map_data.get("tile_attribution", defaults.tile_attribution),
        default_center=(
            _parse_center(map_data["center"]) if "center" in map_data
            else defaults.default_center
        ),
        default_zoom=int(map_data.get("zoom", defaults.default_zoom)),
        fit_padding_px=int(map_data.get("fit_padding_px", defaults.fit_padding_px)),
        bounds_padding_ratio=float(
            map_data.get("bounds_padding_ratio", defaults.bounds_padding_ratio)
        ),
        bounds_min_padding_degrees=float(
            map_data.get("bounds_min_padding_degrees", defaults.bounds_min_padding_degrees)
        ),
        static_map_width=int(static_data.get("width", defaults.static_map_width)),
        static_map_height=int(static_data.get("height", defaults.static_map_height)),
        initial_criteria=_parse_criteria(data.get("filters", {}) or {}),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: serving on %s:%d, initial filter M%.1f+ %s",
        config.host,
        config.port,
        config.initial_criteria.min_magnitude,
        config.initial_criteria.event_type,
    )

    return config


def load_config_from_env() -> Config:
    """Load minimal configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        LOG_LEVEL: Logging level name
        HOST: Interface to bind
        PORT: Port to listen on
        MIN_MAGNITUDE: Initial minimum magnitude
        EVENT_TYPE: Initial event type ('all' by default)

    Returns:
        Config object from environment
    """
    defaults = Config()

    criteria = FilterCriteria(
        min_magnitude=float(os.environ.get("MIN_MAGNITUDE", "0")),
        event_type=os.environ.get("EVENT_TYPE", ALL_TYPES),
    )

    return Config(
        log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        host=os.environ.get("HOST", defaults.host),
        port=int(os.environ.get("PORT", str(defaults.port))),
        initial_criteria=criteria,
    )
