"""
Input validation utilities for the scoring engine.

Provides validation for coordinates, building heights, irradiance and
timestamps.

Usage:
    from bipv.utils.validation import (
        validate_coordinates,
        validate_irradiance,
        ValidationError,
    )

    lat, lon = validate_coordinates(39.9534, -75.1644)
    ghi = validate_irradiance(850.0)
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional, Tuple
import logging

from ..core.errors import InvalidIrradianceInput, ValidationError

logger = logging.getLogger(__name__)

__all__ = [
    "ValidationError",
    "as_finite_float",
    "validate_coordinates",
    "validate_height",
    "validate_latitude",
    "validate_longitude",
    "validate_irradiance",
    "validate_timestamp",
]


def as_finite_float(value: Any) -> Optional[float]:
    """
    Coerce a raw attribute value to a finite float.

    Returns None for absent, non-numeric, boolean or non-finite values so
    callers can treat them the same way as a missing attribute.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(number):
        return None
    return number


def validate_latitude(latitude: float) -> float:
    """Validate a latitude in decimal degrees."""
    if not (-90 <= latitude <= 90):
        raise ValidationError(
            f"Invalid latitude {latitude}: must be between -90 and 90",
            field="latitude",
        )
    return latitude


def validate_longitude(longitude: float) -> float:
    """Validate a longitude in decimal degrees."""
    if not (-180 <= longitude <= 180):
        raise ValidationError(
            f"Invalid longitude {longitude}: must be between -180 and 180",
            field="longitude",
        )
    return longitude


def validate_coordinates(latitude: float, longitude: float) -> Tuple[float, float]:
    """
    Validate geographic coordinates.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        Tuple of (latitude, longitude)

    Raises:
        ValidationError: If coordinates are out of range
    """
    return (validate_latitude(latitude), validate_longitude(longitude))


def validate_height(height_m: float) -> float:
    """
    Validate a building height.

    Raises:
        ValidationError: If height is negative
    """
    if height_m < 0:
        raise ValidationError(
            f"Building height {height_m} m cannot be negative",
            field="height",
        )
    return height_m


def validate_irradiance(ghi_w_m2: Any) -> float:
    """
    Validate a global horizontal irradiance value.

    Args:
        ghi_w_m2: Irradiance in W/m²

    Returns:
        Validated irradiance as float

    Raises:
        InvalidIrradianceInput: If the value is not a finite, non-negative number
    """
    value = as_finite_float(ghi_w_m2)
    if value is None:
        raise InvalidIrradianceInput(
            f"Irradiance must be a finite number: got '{ghi_w_m2}'",
            field="ghi_w_m2",
        )

    if value < 0:
        raise InvalidIrradianceInput(
            f"Irradiance {value} W/m² cannot be negative",
            field="ghi_w_m2",
            suggestions=["Use 0 for night-time or missing irradiance"],
        )

    return value


def validate_timestamp(timestamp: datetime) -> datetime:
    """
    Normalize a timestamp to an aware UTC datetime.

    Naive datetimes are interpreted as UTC.

    Raises:
        ValidationError: If the value is not a datetime
    """
    if not isinstance(timestamp, datetime):
        raise ValidationError(
            f"Timestamp must be a datetime: got {type(timestamp).__name__}",
            field="timestamp",
        )

    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        logger.debug(f"Interpreting naive timestamp {timestamp.isoformat()} as UTC")
        return timestamp.replace(tzinfo=timezone.utc)

    return timestamp.astimezone(timezone.utc)
