"""Earthquake event models and feed parsing - Pure functions.

This module handles parsing the USGS GeoJSON feed into typed Event objects.
All functions are pure with no side effects.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Immutable seismic event.

    Attributes:
        id: Unique USGS event ID
        longitude: Epicenter longitude
        latitude: Epicenter latitude
        depth_km: Depth in kilometers
        magnitude: Event magnitude, None when the feed omits it
        event_type: Category (e.g. 'earthquake', 'quarry blast', 'explosion')
        place: Human-readable location description
        time: Event timestamp (UTC), None when the feed omits it
        url: USGS event detail URL
    """
    id: str
    longitude: float
    latitude: float
    depth_km: float
    magnitude: float | None
    event_type: str
    place: str
    time: datetime | None
    url: str

    @property
    def mag(self) -> float:
        """Magnitude with a missing value read as 0."""
        return self.magnitude if self.magnitude is not None else 0.0

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class FeedSnapshot:
    """One successfully fetched feed, replaced wholesale on each fetch.

    Attributes:
        events: Events in feed order
        fetched_at: When the fetch completed (UTC)
    """
    events: tuple[Event, ...]
    fetched_at: datetime

    def __len__(self) -> int:
        return len(self.events)


def _parse_magnitude(value: Any) -> float | None:
    """Magnitude as a float, None when missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        magnitude = float(value)
    except (TypeError, ValueError):
        return None
    return magnitude if math.isfinite(magnitude) else None


def parse_event(feature: dict[str, Any]) -> Event | None:
    """Parse a single GeoJSON feature into an Event.

    Pure function: takes raw dict, returns typed Event or None if the
    feature has no usable location. A missing or null id becomes "".

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        Event object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        event_time = None
        if time_ms is not None:
            event_time = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)

        depth = coords[2] if len(coords) > 2 and coords[2] is not None else 0.0
        event_id = feature.get("id")

        return Event(
            id="" if event_id is None else str(event_id),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            depth_km=float(depth),
            magnitude=_parse_magnitude(props.get("mag")),
            event_type=props.get("type") or "",
            place=props.get("place") or "Unknown location",
            time=event_time,
            url=props.get("url") or "",
        )
    except (AttributeError, KeyError, IndexError, TypeError, ValueError, OverflowError):
        return None


def parse_events(geojson: dict[str, Any]) -> list[Event]:
    """Parse a GeoJSON FeatureCollection into Events.

    Pure function: keeps feed order, skips invalid features and drops
    repeated ids (the first occurrence wins). Events without an id are
    never treated as duplicates.

    Args:
        geojson: Full GeoJSON FeatureCollection from the USGS feed

    Returns:
        List of valid Event objects in feed order
    """
    features = geojson.get("features") or []
    events = []
    seen: set[str] = set()

    for feature in features:
        event = parse_event(feature) if isinstance(feature, dict) else None
        if event is None:
            logger.warning("Skipping malformed feature: %r", feature)
            continue
        if event.id:
            if event.id in seen:
                logger.warning("Skipping duplicate event id %s", event.id)
                continue
            seen.add(event.id)
        events.append(event)

    return events


def parse_feed(geojson: dict[str, Any], fetched_at: datetime) -> FeedSnapshot:
    """Build a FeedSnapshot from a feed document.

    An absent ``features`` key yields an empty snapshot.
    """
    return FeedSnapshot(events=tuple(parse_events(geojson)), fetched_at=fetched_at)
