"""Geographic bounds calculations - Pure functions.

This module computes the map viewport enclosing a set of events.
All functions are pure with no side effects.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from quakemap.core.event import Event


DEFAULT_PADDING_RATIO = 0.1
DEFAULT_MIN_PADDING_DEGREES = 0.5


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )

    def strictly_contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is inside this box and not on its edge."""
        return (
            self.min_latitude < latitude < self.max_latitude
            and self.min_longitude < longitude < self.max_longitude
        )

    def pad(
        self,
        ratio: float = DEFAULT_PADDING_RATIO,
        min_degrees: float = DEFAULT_MIN_PADDING_DEGREES,
    ) -> "BoundingBox":
        """Grow every side by a share of the span, at least min_degrees.

        Pure function. The result is clamped to valid coordinates.

        Args:
            ratio: Share of the latitude/longitude span added on each side
            min_degrees: Smallest padding in degrees, so single points
                and collinear sets still get a margin

        Returns:
            New, padded BoundingBox
        """
        lat_pad = max((self.max_latitude - self.min_latitude) * ratio, min_degrees)
        lon_pad = max((self.max_longitude - self.min_longitude) * ratio, min_degrees)

        return BoundingBox(
            min_latitude=max(self.min_latitude - lat_pad, -90.0),
            max_latitude=min(self.max_latitude + lat_pad, 90.0),
            min_longitude=max(self.min_longitude - lon_pad, -180.0),
            max_longitude=min(self.max_longitude + lon_pad, 180.0),
        )

    def to_leaflet(self) -> list[list[float]]:
        """Return [[south, west], [north, east]] as Leaflet expects."""
        return [
            [self.min_latitude, self.min_longitude],
            [self.max_latitude, self.max_longitude],
        ]

    def to_param(self) -> str:
        """Return "south,north,west,east" for use in a query string."""
        return ",".join(
            repr(value) for value in (
                self.min_latitude,
                self.max_latitude,
                self.min_longitude,
                self.max_longitude,
            )
        )


def parse_bounds_param(text: str) -> BoundingBox:
    """Parse a "south,north,west,east" string into a BoundingBox.

    Pure function, the inverse of BoundingBox.to_param().

    Raises:
        ValueError: If the text is not four finite, ordered coordinates
    """
    parts = text.split(",")
    if len(parts) != 4:
        raise ValueError(f"Expected south,north,west,east, got {text!r}")

    south, north, west, east = (float(part) for part in parts)
    if not all(math.isfinite(v) for v in (south, north, west, east)):
        raise ValueError(f"Bounds must be finite numbers, got {text!r}")
    if not -90.0 <= south <= north <= 90.0:
        raise ValueError(f"Invalid latitude range {south}..{north}")
    if not -180.0 <= west <= east <= 180.0:
        raise ValueError(f"Invalid longitude range {west}..{east}")

    return BoundingBox(
        min_latitude=south,
        max_latitude=north,
        min_longitude=west,
        max_longitude=east,
    )


def bounds_for_points(points: Iterable[tuple[float, float]]) -> BoundingBox | None:
    """Compute the smallest box enclosing (latitude, longitude) pairs.

    Pure function.

    Args:
        points: (latitude, longitude) pairs

    Returns:
        Enclosing BoundingBox, or None if there are no points
    """
    points = list(points)
    if not points:
        return None

    latitudes = [lat for lat, _ in points]
    longitudes = [lon for _, lon in points]

    return BoundingBox(
        min_latitude=min(latitudes),
        max_latitude=max(latitudes),
        min_longitude=min(longitudes),
        max_longitude=max(longitudes),
    )


def fit_bounds_for_events(
    events: Iterable[Event],
    ratio: float = DEFAULT_PADDING_RATIO,
    min_degrees: float = DEFAULT_MIN_PADDING_DEGREES,
) -> BoundingBox | None:
    """Compute the padded viewport for a set of events.

    Pure function. Returns None for no events, meaning "leave the
    current view alone".
    """
    bounds = bounds_for_points(e.coordinates for e in events)
    if bounds is None:
        return None
    return bounds.pad(ratio, min_degrees)
