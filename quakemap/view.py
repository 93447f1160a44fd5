"""Map View - Wires Functional Core and Imperative Shell.

MapView owns the filter selection and the feed LoadState, and derives
everything the page shows from them: filtered events, marker styles,
popups, status, legend and the viewport to fit.
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from quakemap.core.config import Config
from quakemap.core.event import Event, FeedSnapshot
from quakemap.core.filters import (
    MAGNITUDE_SLIDER_STEP,
    MAX_MAGNITUDE_SLIDER,
    MIN_MAGNITUDE_SLIDER,
    FilterCriteria,
    filter_events,
    selector_options,
)
from quakemap.core.formatter import StatusLine, build_status, format_popup_html
from quakemap.core.geo import BoundingBox, fit_bounds_for_events
from quakemap.core.load_state import (
    CancellationToken,
    Idle,
    InvalidTransition,
    LoadState,
    Ready,
)
from quakemap.core.style import MarkerStyle, depth_legend, marker_style
from quakemap.shell.feed_client import FeedClient
from quakemap.shell.loader import FeedLoader


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerView:
    """One event as drawn on the map.

    Attributes:
        event: The event
        style: Circle marker styling
        popup_html: Detail popup content
    """
    event: Event
    style: MarkerStyle
    popup_html: str


@dataclass(frozen=True)
class PageModel:
    """Everything needed to draw the page.

    Attributes:
        criteria: Current filter selection
        markers: Markers for the filtered events, in feed order
        status: Count, fetch time and loading/error indicator
        legend: (label, color) pairs for the depth colors
        event_type_options: (value, label) pairs for the type selector
        slider: (min, max, step) of the magnitude slider
        viewport: Bounds to fit the map to, None to keep the default view
    """
    criteria: FilterCriteria
    markers: tuple[MarkerView, ...]
    status: StatusLine
    legend: tuple[tuple[str, str], ...]
    event_type_options: tuple[tuple[str, str], ...]
    slider: tuple[float, float, float]
    viewport: BoundingBox | None


class MapView:
    """Coordinates the feed load, filtering and map rendering.

    The view is mounted once: mounting starts the single feed load and
    unmounting makes the view ignore whatever that load returns later.
    """

    def __init__(
        self,
        config: Config | None = None,
        loader: FeedLoader | None = None,
    ) -> None:
        """Initialize view with configuration.

        Args:
            config: Application configuration
            loader: Feed loader (created if not provided)
        """
        self.config = config or Config()
        self.loader = loader or FeedLoader(
            FeedClient(timeout=self.config.request_timeout_seconds)
        )
        self.criteria: FilterCriteria = self.config.initial_criteria
        self.state: LoadState = Idle()
        self.viewport: BoundingBox | None = None
        self._token: CancellationToken | None = None
        self._task: asyncio.Task | None = None

    @property
    def snapshot(self) -> FeedSnapshot | None:
        """The loaded feed, if any."""
        if isinstance(self.state, Ready):
            return self.state.snapshot
        return None

    async def mount(self) -> asyncio.Task:
        """Start the one-shot feed load.

        Must be called from a running event loop. Returns once the load
        has moved the view to Loading; the fetch itself continues in the
        returned task.

        Raises:
            InvalidTransition: If the view was already mounted
        """
        if self._token is not None:
            raise InvalidTransition("View is already mounted")

        self._token = CancellationToken()
        self._task = asyncio.create_task(
            self.loader.load(self.state, self._token, self._apply_state)
        )
        # Let the task run up to its first await so the view is Loading
        await asyncio.sleep(0)
        return self._task

    def unmount(self) -> None:
        """Drop the result of any load still in flight."""
        if self._token is not None and not self._token.cancelled:
            logger.info("Unmounting map view")
            self._token.cancel()

    def _apply_state(self, state: LoadState) -> None:
        logger.debug("Load state -> %s", type(state).__name__)
        self.state = state
        self._refresh_viewport()

    def apply_criteria(self, criteria: FilterCriteria) -> None:
        """Replace the filter selection."""
        if criteria == self.criteria:
            return
        logger.debug("Filter criteria -> %s", criteria)
        self.criteria = criteria
        self._refresh_viewport()

    def set_min_magnitude(self, value: float) -> None:
        self.apply_criteria(replace(self.criteria, min_magnitude=value))

    def set_event_type(self, value: str) -> None:
        self.apply_criteria(replace(self.criteria, event_type=value))

    def filtered_events(self, criteria: FilterCriteria | None = None) -> list[Event]:
        """Events of the loaded feed passing the criteria.

        Args:
            criteria: Selection to apply, the view's own when omitted
        """
        snapshot = self.snapshot
        if snapshot is None:
            return []
        return filter_events(snapshot.events, self.criteria if criteria is None else criteria)

    def _fit(self, events: list[Event]) -> BoundingBox | None:
        return fit_bounds_for_events(
            events,
            ratio=self.config.bounds_padding_ratio,
            min_degrees=self.config.bounds_min_padding_degrees,
        )

    def _refresh_viewport(self) -> None:
        # An empty selection leaves the previous viewport in place
        bounds = self._fit(self.filtered_events())
        if bounds is not None:
            self.viewport = bounds

    def status(self) -> StatusLine:
        return build_status(self.state, len(self.filtered_events()))

    def render(self) -> PageModel:
        """Derive the page from the current state and criteria."""
        return self.render_for(self.criteria, self.viewport)

    def render_for(
        self,
        criteria: FilterCriteria,
        previous_viewport: BoundingBox | None = None,
    ) -> PageModel:
        """Derive the page for a selection without changing the view.

        Used for callers that keep their own selection, such as HTTP
        requests. The loaded feed is shared; criteria and viewport are not.

        Args:
            criteria: Selection to apply
            previous_viewport: Viewport kept when nothing passes the criteria

        Returns:
            PageModel for that selection
        """
        events = self.filtered_events(criteria)
        snapshot = self.snapshot

        markers = tuple(
            MarkerView(
                event=event,
                style=marker_style(event),
                popup_html=format_popup_html(event),
            )
            for event in events
        )
        viewport = self._fit(events)

        return PageModel(
            criteria=criteria,
            markers=markers,
            status=build_status(self.state, len(events)),
            legend=tuple(depth_legend()),
            event_type_options=tuple(
                selector_options(snapshot.events if snapshot else ())
            ),
            slider=(MIN_MAGNITUDE_SLIDER, MAX_MAGNITUDE_SLIDER, MAGNITUDE_SLIDER_STEP),
            viewport=previous_viewport if viewport is None else viewport,
        )
