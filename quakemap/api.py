"""Earthquake Map API - FastAPI service.

Serves the single-page earthquake map, a JSON view of the filtered events
and a PNG snapshot. The feed is loaded once when the app starts; the map
view is unmounted when the app shuts down.

Each request carries its own selection in the query string; requests never
change the shared view.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from quakemap.core.config import Config
from quakemap.core.filters import FilterCriteria
from quakemap.core.formatter import format_status_text, format_timestamp
from quakemap.core.geo import BoundingBox, parse_bounds_param
from quakemap.core.load_state import Failed, Idle, Loading, Ready
from quakemap.shell.map_renderer import MapRenderer
from quakemap.shell.static_map_client import StaticMapClient
from quakemap.view import MapView, MarkerView, PageModel


logger = logging.getLogger(__name__)


# ===== Response Models =====

class BoundsOut(BaseModel):
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


class CriteriaOut(BaseModel):
    min_magnitude: float
    event_type: str


class MarkerOut(BaseModel):
    radius: float
    color: str
    fill_opacity: float
    weight: int


class EventOut(BaseModel):
    id: str
    magnitude: float | None
    type: str
    place: str
    time: datetime | None
    time_display: str
    latitude: float
    longitude: float
    depth_km: float
    url: str
    marker: MarkerOut


class EventsResponse(BaseModel):
    status: str
    summary: str
    criteria: CriteriaOut
    count: int
    fetched_at: datetime | None
    error: str | None
    bounds: BoundsOut | None
    events: list[EventOut]


# ===== Helper Functions =====

def _state_name(view: MapView) -> str:
    state = view.state
    if isinstance(state, Ready):
        return "ready"
    if isinstance(state, Failed):
        return "failed"
    if isinstance(state, Loading):
        return "loading"
    if isinstance(state, Idle):
        return "idle"
    raise TypeError(f"Unknown load state {state!r}")


def _bounds_out(bounds: BoundingBox | None) -> BoundsOut | None:
    """Convert BoundingBox to its response model."""
    if bounds is None:
        return None
    return BoundsOut(
        min_latitude=bounds.min_latitude,
        max_latitude=bounds.max_latitude,
        min_longitude=bounds.min_longitude,
        max_longitude=bounds.max_longitude,
    )


def _marker_to_event_out(marker: MarkerView) -> EventOut:
    """Convert a drawn marker to the API event format."""
    event = marker.event
    return EventOut(
        id=event.id,
        magnitude=event.magnitude,
        type=event.event_type,
        place=event.place,
        time=event.time,
        time_display=format_timestamp(event.time),
        latitude=event.latitude,
        longitude=event.longitude,
        depth_km=event.depth_km,
        url=event.url,
        marker=MarkerOut(
            radius=marker.style.radius,
            color=marker.style.color,
            fill_opacity=marker.style.fill_opacity,
            weight=marker.style.weight,
        ),
    )


def _build_events_response(view: MapView, page: PageModel) -> EventsResponse:
    """Convert the rendered page to the API response format."""
    snapshot = view.snapshot
    return EventsResponse(
        status=_state_name(view),
        summary=format_status_text(page.status),
        criteria=CriteriaOut(
            min_magnitude=page.criteria.min_magnitude,
            event_type=page.criteria.event_type,
        ),
        count=page.status.count,
        fetched_at=snapshot.fetched_at if snapshot else None,
        error=page.status.error,
        bounds=_bounds_out(page.viewport),
        events=[_marker_to_event_out(m) for m in page.markers],
    )


def _criteria_from_query(
    view: MapView,
    min_magnitude: float | None,
    event_type: str | None,
) -> FilterCriteria:
    """Build the request's selection; omitted parameters take the configured defaults."""
    initial = view.config.initial_criteria
    try:
        return FilterCriteria(
            min_magnitude=initial.min_magnitude if min_magnitude is None else min_magnitude,
            event_type=event_type or initial.event_type,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _viewport_from_query(viewport: str | None) -> BoundingBox | None:
    """Parse the client's previous viewport, if it sent one."""
    if not viewport:
        return None
    try:
        return parse_bounds_param(viewport)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def create_app(
    config: Config | None = None,
    view: MapView | None = None,
    renderer: MapRenderer | None = None,
    static_map_client: StaticMapClient | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration
        view: Map view (created if not provided)
        renderer: HTML page renderer (created if not provided)
        static_map_client: PNG renderer (created if not provided)

    Returns:
        Configured FastAPI app
    """
    config = config or Config()
    view = view or MapView(config)
    renderer = renderer or MapRenderer(config)
    static_map_client = static_map_client or StaticMapClient(
        tile_url=config.tile_url,
        width=config.static_map_width,
        height=config.static_map_height,
        padding=config.fit_padding_px,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Mounting map view, loading feed")
        await view.mount()
        yield
        view.unmount()
        logger.info("Map view unmounted")

    app = FastAPI(
        title="Earthquake Map",
        description="Map of the past day's earthquakes from the USGS feed",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.view = view

    @app.get("/", response_class=HTMLResponse)
    async def index(
        request: Request,
        min_magnitude: float | None = Query(default=None, ge=0),
        event_type: str | None = Query(default=None),
        viewport: str | None = Query(default=None),
    ):
        """Render the map page."""
        view: MapView = request.app.state.view
        criteria = _criteria_from_query(view, min_magnitude, event_type)
        page = view.render_for(criteria, _viewport_from_query(viewport))
        return HTMLResponse(renderer.render_page(page))

    @app.get("/api/events", response_model=EventsResponse)
    async def get_events(
        request: Request,
        min_magnitude: float | None = Query(default=None, ge=0),
        event_type: str | None = Query(default=None),
        viewport: str | None = Query(default=None),
    ):
        """Get the filtered events with their marker styling."""
        view: MapView = request.app.state.view
        criteria = _criteria_from_query(view, min_magnitude, event_type)
        page = view.render_for(criteria, _viewport_from_query(viewport))
        return _build_events_response(view, page)

    @app.get("/map.png")
    async def get_map_image(
        request: Request,
        min_magnitude: float | None = Query(default=None, ge=0),
        event_type: str | None = Query(default=None),
    ):
        """Render the filtered events as a PNG."""
        view: MapView = request.app.state.view
        page = view.render_for(_criteria_from_query(view, min_magnitude, event_type))

        if not page.markers:
            raise HTTPException(status_code=404, detail="No events to draw")

        result = await asyncio.to_thread(
            static_map_client.generate_map,
            [marker.style for marker in page.markers],
        )
        if not result.success:
            raise HTTPException(status_code=502, detail=f"Failed to render map: {result.error}")

        return Response(content=result.image_bytes, media_type="image/png")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
