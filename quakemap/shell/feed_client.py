"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS GeoJSON summary feed.
All I/O is contained here; parsing into events is in the core module.
"""

import logging
from typing import Any

import requests


logger = logging.getLogger(__name__)


# All events, past day
USGS_FEED_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_day.geojson"


class FeedError(Exception):
    """Base class for feed loading failures."""


class TransportError(FeedError):
    """The request could not complete or returned a non-success status."""


class ParseError(FeedError):
    """The response body was not the expected JSON document."""


class FeedClient:
    """Client for fetching the earthquake feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        url: str = USGS_FEED_URL,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            url: Feed URL
            timeout: Request timeout in seconds, None to wait indefinitely
            session: Optional requests session to reuse connections
        """
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_feed(self) -> dict[str, Any]:
        """Fetch the feed document.

        This method performs HTTP I/O.

        Returns:
            Raw GeoJSON FeatureCollection

        Raises:
            TransportError: If the request fails or returns an error status
            ParseError: If the body is not a JSON object with a feature list
        """
        logger.info("Fetching earthquake feed from %s", self.url)

        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(
                f"Feed request failed with status {e.response.status_code}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Feed request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError("Feed response is not valid JSON") from e

        if not isinstance(data, dict):
            raise ParseError(
                f"Feed response is a JSON {type(data).__name__}, expected an object"
            )

        features = data.get("features")
        if features is not None and not isinstance(features, list):
            raise ParseError("Feed 'features' is not a list")

        logger.info(
            "Fetched %d features from USGS",
            len(features or []),
        )

        return data
