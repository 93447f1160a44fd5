"""Event filtering - Pure functions.

Reduces a loaded feed to the events matching the current filter
selection. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass

from quakemap.core.event import Event


ALL_TYPES = "all"

# (value, label) pairs always offered by the event-type selector
DEFAULT_EVENT_TYPES: tuple[tuple[str, str], ...] = (
    (ALL_TYPES, "All"),
    ("earthquake", "Earthquake"),
    ("quarry blast", "Quarry Blast"),
    ("explosion", "Explosion"),
)

# Magnitude slider range
MIN_MAGNITUDE_SLIDER = 0.0
MAX_MAGNITUDE_SLIDER = 8.0
MAGNITUDE_SLIDER_STEP = 0.1


@dataclass(frozen=True)
class FilterCriteria:
    """Current filter selection.

    Attributes:
        min_magnitude: Minimum magnitude (inclusive), never negative
        event_type: 'all' or a specific event type
    """
    min_magnitude: float = 0.0
    event_type: str = ALL_TYPES

    def __post_init__(self) -> None:
        if not math.isfinite(self.min_magnitude) or self.min_magnitude < 0:
            raise ValueError(
                f"min_magnitude must be a finite value >= 0, got {self.min_magnitude}"
            )


def matches(event: Event, criteria: FilterCriteria) -> bool:
    """Check whether a single event passes the criteria.

    Pure function. A missing magnitude is compared as 0.
    """
    if event.mag < criteria.min_magnitude:
        return False
    if criteria.event_type == ALL_TYPES:
        return True
    return event.event_type == criteria.event_type


def filter_events(events: list[Event] | tuple[Event, ...], criteria: FilterCriteria) -> list[Event]:
    """Filter events by minimum magnitude and event type.

    Pure function. Preserves input order and never mutates the input.

    Args:
        events: Events to filter
        criteria: Current filter selection

    Returns:
        New list with the events that pass
    """
    return [e for e in events if matches(e, criteria)]


def event_types(events: list[Event] | tuple[Event, ...]) -> list[str]:
    """Return the distinct non-empty event types present, sorted."""
    return sorted({e.event_type for e in events if e.event_type})


def selector_options(events: list[Event] | tuple[Event, ...]) -> list[tuple[str, str]]:
    """Build event-type selector options.

    The fixed options come first, followed by any other type found in
    the loaded events.
    """
    options = list(DEFAULT_EVENT_TYPES)
    known = {value for value, _ in options}
    for event_type in event_types(events):
        if event_type not in known:
            options.append((event_type, event_type.title()))
    return options
