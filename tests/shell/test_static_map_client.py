"""Tests for static map client.

Uses mocked tile fetching to avoid network calls in tests.
"""

from unittest.mock import MagicMock, patch

from quakemap.core.style import MarkerStyle
from quakemap.shell.static_map_client import MapImageResult, StaticMapClient


MARKERS = [
    MarkerStyle(latitude=37.78, longitude=-122.42, radius=10, color="#99C140"),
    MarkerStyle(latitude=34.05, longitude=-118.24, radius=20, color="#CC3232"),
    MarkerStyle(latitude=36.0, longitude=-120.0, radius=5.5, color="#2DC937"),
]


def _mock_rendering(mock_static_map_class):
    mock_map = MagicMock()
    mock_static_map_class.return_value = mock_map
    mock_image = MagicMock()
    mock_map.render.return_value = mock_image
    mock_image.save = lambda buf, format: buf.write(b"PNG_IMAGE_DATA")
    return mock_map


class TestStaticMapClientInit:
    """Tests for StaticMapClient initialization."""

    def test_default_tile_url(self):
        """Default tile URL is OpenStreetMap."""
        client = StaticMapClient()
        assert "openstreetmap" in client.tile_url.lower()

    def test_custom_tile_url(self):
        """Custom tile URL is accepted."""
        custom_url = "https://tiles.example.com/{z}/{x}/{y}.png"
        client = StaticMapClient(tile_url=custom_url)
        assert client.tile_url == custom_url


class TestStaticMapClientGenerateMap:
    """Tests for StaticMapClient.generate_map()."""

    @patch("quakemap.shell.static_map_client.StaticMap")
    def test_successful_generation_returns_image_bytes(self, mock_static_map_class):
        """Successful map generation returns PNG bytes."""
        _mock_rendering(mock_static_map_class)

        result = StaticMapClient().generate_map(MARKERS)

        assert result == MapImageResult(success=True, image_bytes=b"PNG_IMAGE_DATA")

    @patch("quakemap.shell.static_map_client.StaticMap")
    def test_map_uses_size_and_padding(self, mock_static_map_class):
        """Map is created with the configured size and padding."""
        _mock_rendering(mock_static_map_class)

        StaticMapClient(width=640, height=320, padding=25).generate_map(MARKERS)

        args, kwargs = mock_static_map_class.call_args
        assert args == (640, 320)
        assert kwargs["padding_x"] == 25
        assert kwargs["padding_y"] == 25

    @patch("quakemap.shell.static_map_client.CircleMarker")
    @patch("quakemap.shell.static_map_client.StaticMap")
    def test_adds_markers_largest_first(self, mock_static_map_class, mock_circle_class):
        """Markers are drawn large to small, in (lon, lat) order."""
        mock_map = _mock_rendering(mock_static_map_class)

        StaticMapClient().generate_map(MARKERS)

        assert mock_map.add_marker.call_count == 3
        calls = [c.args for c in mock_circle_class.call_args_list]
        assert calls == [
            ((-118.24, 34.05), "#CC3232", 20),
            ((-122.42, 37.78), "#99C140", 10),
            ((-120.0, 36.0), "#2DC937", 6),
        ]

    @patch("quakemap.shell.static_map_client.StaticMap")
    def test_renders_fitted_to_markers(self, mock_static_map_class):
        """No zoom is forced; staticmap fits the markers."""
        mock_map = _mock_rendering(mock_static_map_class)

        StaticMapClient().generate_map(MARKERS)

        mock_map.render.assert_called_once_with()

    def test_no_markers_is_an_error(self):
        """Nothing to draw returns an error result."""
        result = StaticMapClient().generate_map([])

        assert result.success is False
        assert result.error == "No markers to draw"

    @patch("quakemap.shell.static_map_client.StaticMap")
    def test_render_failure_returns_error(self, mock_static_map_class):
        """Tile or rendering failures are captured in the result."""
        mock_map = MagicMock()
        mock_static_map_class.return_value = mock_map
        mock_map.render.side_effect = RuntimeError("could not download tiles")

        result = StaticMapClient().generate_map(MARKERS)

        assert result.success is False
        assert result.image_bytes is None
        assert "could not download tiles" in result.error
