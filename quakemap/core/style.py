"""Marker styling - Pure functions.

This module maps event depth and magnitude to marker color and size.
The actual drawing (I/O) is handled by the shell layer.
"""

from dataclasses import dataclass

from quakemap.core.event import Event


# (upper bound exclusive, color, legend label), ascending
DEPTH_BANDS: tuple[tuple[float, str, str], ...] = (
    (10.0, "#2DC937", "< 10"),
    (30.0, "#99C140", "10–30"),
    (70.0, "#E7B416", "30–70"),
    (150.0, "#DB7B2B", "70–150"),
)
DEEPEST_COLOR = "#CC3232"
DEEPEST_LABEL = "> 150"

MIN_RADIUS = 4
MAX_RADIUS = 20
RADIUS_PER_MAGNITUDE = 3

FILL_OPACITY = 0.7
STROKE_WEIGHT = 1


@dataclass(frozen=True)
class MarkerStyle:
    """Immutable styling for one circle marker.

    Attributes:
        latitude: Marker center latitude
        longitude: Marker center longitude
        radius: Circle radius in pixels
        color: Hex color for stroke and fill
        fill_opacity: Fill opacity (0-1)
        weight: Stroke width in pixels
    """
    latitude: float
    longitude: float
    radius: float
    color: str
    fill_opacity: float = FILL_OPACITY
    weight: int = STROKE_WEIGHT

    @property
    def center(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def color_for_depth(depth: float) -> str:
    """Get hex color for a depth in kilometers.

    Pure function. Shallow events are green, deep events red.

    Args:
        depth: Depth in kilometers

    Returns:
        Hex color string (e.g., "#2DC937")
    """
    for upper, color, _ in DEPTH_BANDS:
        if depth < upper:
            return color
    return DEEPEST_COLOR


def radius_for_mag(mag: float) -> float:
    """Determine marker radius based on magnitude.

    Pure function. Zero, negative and unknown magnitudes get the minimum
    visible size; larger magnitudes scale linearly up to a cap.

    Args:
        mag: Event magnitude

    Returns:
        Marker radius in pixels
    """
    if mag <= 0:
        return MIN_RADIUS
    return min(MAX_RADIUS, MIN_RADIUS + mag * RADIUS_PER_MAGNITUDE)


def marker_style(event: Event) -> MarkerStyle:
    """Create marker styling for an event.

    Pure function.
    """
    return MarkerStyle(
        latitude=event.latitude,
        longitude=event.longitude,
        radius=radius_for_mag(event.mag),
        color=color_for_depth(event.depth_km),
    )


def depth_legend() -> list[tuple[str, str]]:
    """Return (label, color) pairs describing the depth colors, shallow first."""
    legend = [(label, color) for _, color, label in DEPTH_BANDS]
    legend.append((DEEPEST_LABEL, DEEPEST_COLOR))
    return legend
