"""Display formatting - Pure functions.

This module formats events and load status into text and HTML fragments
for the map page. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape

from quakemap.core.event import Event
from quakemap.core.load_state import Failed, LoadState, Loading, Ready


PLACEHOLDER = "—"


@dataclass(frozen=True)
class StatusLine:
    """What the side panel says about the data.

    Attributes:
        count: Number of events after filtering
        fetched_at: Formatted fetch time, or a dash if nothing loaded
        loading: True while the feed request is in flight
        error: Error message if the load failed
    """
    count: int
    fetched_at: str
    loading: bool = False
    error: str | None = None


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp like "Dec 19, 2023, 12:00:00 PM UTC".

    Pure function. Naive datetimes are taken as UTC.
    """
    if value is None:
        return PLACEHOLDER
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    hour = utc.hour % 12 or 12
    return (
        f"{utc.strftime('%b')} {utc.day}, {utc.year}, "
        f"{hour}:{utc.strftime('%M:%S %p')} UTC"
    )


def format_magnitude(event: Event) -> str:
    """Magnitude as shown in popups; a missing value shows as 0."""
    return f"{event.mag:g}"


def format_popup_html(event: Event) -> str:
    """Format the detail popup for an event.

    Pure function. All feed-provided text is HTML-escaped.

    Args:
        event: Event to describe

    Returns:
        HTML fragment with place, magnitude, depth, time and source link
    """
    lines = [
        '<div style="min-width: 200px">',
        f"<strong>{escape(event.place)}</strong>",
        f"<div>Magnitude: <strong>{format_magnitude(event)}</strong></div>",
        f"<div>Depth: {event.depth_km:g} km</div>",
        f"<div>Time: {escape(format_timestamp(event.time))}</div>",
    ]
    if event.url:
        lines.append(
            f'<div><a href="{escape(event.url, quote=True)}" '
            'target="_blank" rel="noreferrer">USGS event page</a></div>'
        )
    lines.append("</div>")
    return "\n".join(lines)


def build_status(state: LoadState, count: int) -> StatusLine:
    """Describe the load state and filtered count for the side panel.

    Pure function.
    """
    if isinstance(state, Ready):
        return StatusLine(count=count, fetched_at=format_timestamp(state.snapshot.fetched_at))
    if isinstance(state, Failed):
        return StatusLine(count=count, fetched_at=PLACEHOLDER, error=state.message)
    return StatusLine(
        count=count,
        fetched_at=PLACEHOLDER,
        loading=isinstance(state, Loading),
    )


def format_status_text(status: StatusLine) -> str:
    """One-line plain text version of the status, for logs and the API."""
    text = f"Events (filtered): {status.count} | Fetched at: {status.fetched_at}"
    if status.loading:
        text += " | Loading latest events..."
    if status.error:
        text += f" | Error: {status.error}"
    return text
