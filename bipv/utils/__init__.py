"""Utility modules."""

from .logging_config import (
    get_logger,
    setup_logging,
    ensure_logging,
    BipvFormatter,
    FileFormatter,
)
from .validation import (
    as_finite_float,
    validate_coordinates,
    validate_height,
    validate_latitude,
    validate_longitude,
    validate_irradiance,
    validate_timestamp,
    ValidationError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "ensure_logging",
    "BipvFormatter",
    "FileFormatter",
    # Validation
    "as_finite_float",
    "validate_coordinates",
    "validate_height",
    "validate_latitude",
    "validate_longitude",
    "validate_irradiance",
    "validate_timestamp",
    "ValidationError",
]
