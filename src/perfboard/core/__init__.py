"""Core utilities and shared functionality."""

from perfboard.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    day_key,
    day_anchor,
    UTC,
    EASTERN_TZ,
)
from perfboard.core.exceptions import (
    AppError,
    ValidationError,
    ConfigurationError,
    UpstreamError,
    MalformedPayloadError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "day_key",
    "day_anchor",
    "UTC",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "ConfigurationError",
    "UpstreamError",
    "MalformedPayloadError",
]
