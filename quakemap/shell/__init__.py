"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Feed loader (async, cancellable)
- Configuration loading (environment/files)
- Map page rendering (folium) and PNG snapshots (staticmap)

Keep this layer thin and simple. All map logic should be in core.
"""

from quakemap.shell.feed_client import FeedClient, FeedError, ParseError, TransportError
from quakemap.shell.loader import FeedLoader
from quakemap.shell.config_loader import load_config, load_config_from_env
from quakemap.shell.map_renderer import MapRenderer
from quakemap.shell.static_map_client import StaticMapClient

__all__ = [
    "FeedClient",
    "FeedError",
    "ParseError",
    "TransportError",
    "FeedLoader",
    "load_config",
    "load_config_from_env",
    "MapRenderer",
    "StaticMapClient",
]
