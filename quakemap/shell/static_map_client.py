"""Static Map Client - Imperative Shell.

This module renders a PNG snapshot of the event markers using
OpenStreetMap tiles. All I/O is contained here; marker styling is in the
core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from quakemap.core.config import OSM_TILE_URL
from quakemap.core.style import MarkerStyle


logger = logging.getLogger(__name__)


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(
        self,
        tile_url: str | None = None,
        width: int = 800,
        height: int = 400,
        padding: int = 40,
    ) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
            width: Image width in pixels
            height: Image height in pixels
            padding: Pixels kept free around the outermost markers
        """
        self.tile_url = tile_url or OSM_TILE_URL
        self.width = width
        self.height = height
        self.padding = padding

    def generate_map(self, markers: list[MarkerStyle]) -> MapImageResult:
        """Generate a static map image fitted to the markers.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            markers: Marker styles from the core module

        Returns:
            MapImageResult with image bytes or error
        """
        if not markers:
            return MapImageResult(success=False, error="No markers to draw")

        logger.info("Generating static map with %d markers", len(markers))

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                padding_x=self.padding,
                padding_y=self.padding,
                url_template=self.tile_url,
            )

            # Largest first so small markers stay visible on top
            for style in sorted(markers, key=lambda m: m.radius, reverse=True):
                static_map.add_marker(CircleMarker(
                    (style.longitude, style.latitude),  # (lon, lat) order for staticmap
                    style.color,
                    max(1, round(style.radius)),
                ))

            # No zoom given: staticmap fits the view to the markers
            image = static_map.render()

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Generated map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
