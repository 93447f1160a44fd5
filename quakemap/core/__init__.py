"""Functional Core - Pure functions with no side effects.

This module contains all map logic as pure functions:
- Feed parsing into events
- Event filtering
- Marker styling (color by depth, radius by magnitude)
- Viewport bounds
- Load state transitions
- Popup and status formatting

All functions here are deterministic and have no I/O.
"""

from quakemap.core.event import Event, FeedSnapshot, parse_feed
from quakemap.core.filters import FilterCriteria, filter_events
from quakemap.core.geo import BoundingBox, bounds_for_points, fit_bounds_for_events
from quakemap.core.load_state import CancellationToken, LoadState
from quakemap.core.style import color_for_depth, marker_style, radius_for_mag

__all__ = [
    # Events
    "Event",
    "FeedSnapshot",
    "parse_feed",
    # Filters
    "FilterCriteria",
    "filter_events",
    # Geo
    "BoundingBox",
    "bounds_for_points",
    "fit_bounds_for_events",
    # Load state
    "CancellationToken",
    "LoadState",
    # Style
    "color_for_depth",
    "radius_for_mag",
    "marker_style",
]
