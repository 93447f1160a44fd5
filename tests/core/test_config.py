"""Unit tests for configuration validation.

Pure function tests - no mocks needed, fast execution.
"""

from quakemap.core.config import Config, validate_config, validate_coordinates
from quakemap.core.filters import FilterCriteria


class TestValidateCoordinates:
    """Tests for validate_coordinates()."""

    def test_valid(self):
        """In-range coordinates produce no errors."""
        assert validate_coordinates(20.0, 0.0, "center") == []

    def test_out_of_range(self):
        """Each out-of-range axis is reported."""
        errors = validate_coordinates(91.0, -181.0, "center")

        assert len(errors) == 2
        assert all(e.field == "center" for e in errors)


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_defaults_are_valid(self):
        """The default configuration passes without warnings."""
        result = validate_config(Config())

        assert result.valid is True
        assert result.errors == []

    def test_unknown_log_level(self):
        """Unknown log level is an error."""
        result = validate_config(Config(log_level="CHATTY"))

        assert result.valid is False
        assert result.critical_errors[0].field == "log_level"

    def test_lowercase_log_level_is_accepted(self):
        """Log level names are case-insensitive."""
        assert validate_config(Config(log_level="debug")).valid is True

    def test_bad_port(self):
        """Port outside 1-65535 is an error."""
        result = validate_config(Config(port=0))

        assert result.valid is False
        assert [e.field for e in result.critical_errors] == ["port"]

    def test_non_positive_timeout(self):
        """A timeout, when set, must be positive."""
        assert validate_config(Config(request_timeout_seconds=0)).valid is False
        assert validate_config(Config(request_timeout_seconds=None)).valid is True

    def test_bad_center(self):
        """Default center must be a valid coordinate."""
        result = validate_config(Config(default_center=(100.0, 0.0)))

        assert result.valid is False

    def test_tile_url_without_placeholders_warns(self):
        """A tile URL without placeholders is a warning, not an error."""
        result = validate_config(Config(tile_url="https://example.com/tile.png"))

        assert result.valid is True
        assert [w.field for w in result.warnings] == ["tile_url"]

    def test_initial_magnitude_beyond_slider_warns(self):
        """Initial filter beyond the slider range is a warning."""
        result = validate_config(Config(initial_criteria=FilterCriteria(min_magnitude=9.5)))

        assert result.valid is True
        assert result.warnings[0].field == "initial_criteria.min_magnitude"
