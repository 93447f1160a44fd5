"""Map Renderer - Imperative Shell.

Turns a PageModel into the interactive Leaflet map (via folium) and the
surrounding HTML page (via Jinja2). Marker styling and popup content
come from the core module.
"""

import logging
from typing import TYPE_CHECKING

import folium
from jinja2 import Environment, PackageLoader, select_autoescape

from quakemap.core.config import Config
from quakemap.core.formatter import format_status_text

if TYPE_CHECKING:
    from quakemap.view import PageModel


logger = logging.getLogger(__name__)

POPUP_MAX_WIDTH = 300


class MapRenderer:
    """Renders the map page.

    This is part of the imperative shell - the map widget itself runs in
    the browser and fetches its tiles from the tile server.
    """

    def __init__(self, config: Config | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Application configuration (tiles, default view, padding)
        """
        self.config = config or Config()
        self.templates = Environment(
            loader=PackageLoader("quakemap", "templates"),
            autoescape=select_autoescape(["html"]),
        )

    def build_map(self, page: "PageModel") -> folium.Map:
        """Build the folium map for a page.

        Args:
            page: Page model from the view

        Returns:
            folium.Map with one circle marker per filtered event
        """
        fmap = folium.Map(
            location=list(self.config.default_center),
            zoom_start=self.config.default_zoom,
            tiles=self.config.tile_url,
            attr=self.config.tile_attribution,
        )

        for marker in page.markers:
            style = marker.style
            folium.CircleMarker(
                location=list(style.center),
                radius=style.radius,
                color=style.color,
                weight=style.weight,
                fill=True,
                fill_color=style.color,
                fill_opacity=style.fill_opacity,
                popup=folium.Popup(marker.popup_html, max_width=POPUP_MAX_WIDTH),
            ).add_to(fmap)

        if page.viewport is not None:
            padding = self.config.fit_padding_px
            fmap.fit_bounds(page.viewport.to_leaflet(), padding=(padding, padding))

        return fmap

    def render_page(self, page: "PageModel") -> str:
        """Render the full HTML page: header, filter panel, map and footer.

        Args:
            page: Page model from the view

        Returns:
            HTML document
        """
        fmap = self.build_map(page)
        map_html = fmap.get_root().render()

        logger.info(
            "Rendering map page: %s",
            format_status_text(page.status),
        )

        template = self.templates.get_template("index.html")
        return template.render(page=page, map_html=map_html)
