"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

import logging
from dataclasses import dataclass, field

from quakemap.core.filters import MAX_MAGNITUDE_SLIDER, FilterCriteria


OSM_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        log_level: Logging level name
        host: Interface the web server binds to
        port: Port the web server listens on
        request_timeout_seconds: Feed request timeout, None to wait indefinitely
        tile_url: Map tile URL template
        tile_attribution: Attribution shown on the map
        default_center: (latitude, longitude) before any bounds are fitted
        default_zoom: Zoom level before any bounds are fitted
        fit_padding_px: Pixel padding the map widget keeps around fitted bounds
        bounds_padding_ratio: Share of the span added around fitted bounds
        bounds_min_padding_degrees: Smallest padding around fitted bounds
        static_map_width: PNG snapshot width in pixels
        static_map_height: PNG snapshot height in pixels
        initial_criteria: Filter selection when the view is created
    """
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    request_timeout_seconds: float | None = None
    tile_url: str = OSM_TILE_URL
    tile_attribution: str = OSM_ATTRIBUTION
    default_center: tuple[float, float] = (20.0, 0.0)
    default_zoom: int = 2
    fit_padding_px: int = 40
    bounds_padding_ratio: float = 0.1
    bounds_min_padding_degrees: float = 0.5
    static_map_width: int = 800
    static_map_height: int = 400
    initial_criteria: FilterCriteria = field(default_factory=FilterCriteria)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not isinstance(logging.getLevelName(config.log_level.upper()), int):
        errors.append(ValidationError(
            field="log_level",
            message=f"Unknown log level '{config.log_level}'",
        ))

    if not 0 < config.port < 65536:
        errors.append(ValidationError(
            field="port",
            message=f"Port {config.port} out of range [1, 65535]",
        ))

    if config.request_timeout_seconds is not None and config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Timeout must be positive, got {config.request_timeout_seconds}",
        ))

    lat, lon = config.default_center
    errors.extend(validate_coordinates(lat, lon, "default_center"))

    if not 0 <= config.default_zoom <= 18:
        errors.append(ValidationError(
            field="default_zoom",
            message=f"Zoom {config.default_zoom} out of range [0, 18]",
        ))

    if config.bounds_padding_ratio < 0 or config.bounds_min_padding_degrees < 0:
        errors.append(ValidationError(
            field="bounds_padding_ratio",
            message="Bounds padding must not be negative",
        ))

    if config.static_map_width <= 0 or config.static_map_height <= 0:
        errors.append(ValidationError(
            field="static_map_width",
            message=(
                f"Static map size must be positive, got "
                f"{config.static_map_width}x{config.static_map_height}"
            ),
        ))

    if "{z}" not in config.tile_url:
        errors.append(ValidationError(
            field="tile_url",
            message="Tile URL has no {z}/{x}/{y} placeholders",
            severity="warning",
        ))

    if config.initial_criteria.min_magnitude > MAX_MAGNITUDE_SLIDER:
        errors.append(ValidationError(
            field="initial_criteria.min_magnitude",
            message=(
                f"Initial minimum magnitude {config.initial_criteria.min_magnitude} "
                f"is beyond the slider maximum {MAX_MAGNITUDE_SLIDER}"
            ),
            severity="warning",
        ))

    if not config.initial_criteria.event_type:
        errors.append(ValidationError(
            field="initial_criteria.event_type",
            message="Empty event type, use 'all' to show every type",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
