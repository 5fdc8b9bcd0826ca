"""
Solar Position Model

Converts an instant into the direction of the Sun over the rotating Earth:
- Sun position vector in an Earth-centred inertial frame (low-order ephemeris)
- Inertial-to-fixed rotation from Greenwich apparent sidereal time
- Sub-solar point (geodetic longitude/latitude on the WGS84 ellipsoid)

The sub-solar longitude is reported as azimuth in [0, 360) and the sub-solar
latitude as elevation. Ephemeris terms follow Meeus, Astronomical Algorithms
(the NOAA solar calculator series), valid for roughly 1900-2100.
"""

from __future__ import annotations

import math
from datetime import datetime

import numpy as np

from ..core.config import settings
from ..core.errors import TransformUnavailable
from ..core.models import SunPosition
from ..utils.validation import validate_timestamp


# ============================================================================
# CONSTANTS
# ============================================================================

J2000_JD = 2451545.0
UNIX_EPOCH_JD = 2440587.5
SECONDS_PER_DAY = 86400.0
DAYS_PER_CENTURY = 36525.0

ASTRONOMICAL_UNIT_M = 1.495978707e11

# WGS84
WGS84_FIRST_ECCENTRICITY_SQUARED = 6.69437999014e-3


# ============================================================================
# EPHEMERIS
# ============================================================================

def julian_date(timestamp: datetime) -> float:
    """Julian date of an aware UTC datetime."""
    return timestamp.timestamp() / SECONDS_PER_DAY + UNIX_EPOCH_JD


def julian_century(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000_JD) / DAYS_PER_CENTURY


def _nutation_in_longitude_deg(T: float) -> float:
    omega = math.radians(125.04 - 1934.136 * T)
    return -0.00478 * math.sin(omega)


def _true_obliquity_deg(T: float) -> float:
    seconds = 21.448 - T * (46.8150 + T * (0.00059 - T * 0.001813))
    mean_obliquity = 23.0 + (26.0 + seconds / 60.0) / 60.0
    omega = math.radians(125.04 - 1934.136 * T)
    return mean_obliquity + 0.00256 * math.cos(omega)


def sun_inertial_position(T: float) -> np.ndarray:
    """
    Sun position in the Earth-centred inertial frame (equator and equinox of date).

    Args:
        T: Julian centuries since J2000.0

    Returns:
        Cartesian vector in metres
    """
    mean_longitude = (280.46646 + T * (36000.76983 + 0.0003032 * T)) % 360.0
    mean_anomaly = 357.52911 + T * (35999.05029 - 0.0001537 * T)
    eccentricity = 0.016708634 - T * (0.000042037 + 0.0000001267 * T)

    M = math.radians(mean_anomaly)
    equation_of_center = (
        math.sin(M) * (1.914602 - T * (0.004817 + 0.000014 * T))
        + math.sin(2 * M) * (0.019993 - 0.000101 * T)
        + math.sin(3 * M) * 0.000289
    )

    true_anomaly = math.radians(mean_anomaly + equation_of_center)
    radius_au = (
        1.000001018 * (1 - eccentricity ** 2)
        / (1 + eccentricity * math.cos(true_anomaly))
    )

    # Apparent longitude: aberration plus nutation in longitude
    apparent_longitude = math.radians(
        mean_longitude + equation_of_center - 0.00569 + _nutation_in_longitude_deg(T)
    )
    obliquity = math.radians(_true_obliquity_deg(T))

    r = radius_au * ASTRONOMICAL_UNIT_M
    return np.array([
        r * math.cos(apparent_longitude),
        r * math.cos(obliquity) * math.sin(apparent_longitude),
        r * math.sin(obliquity) * math.sin(apparent_longitude),
    ])


def greenwich_apparent_sidereal_time_deg(jd: float) -> float:
    """Rotation angle of the Earth-fixed frame relative to the equinox of date."""
    T = julian_century(jd)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd - J2000_JD)
        + 0.000387933 * T ** 2
        - T ** 3 / 38710000.0
    )
    equation_of_equinoxes = _nutation_in_longitude_deg(T) * math.cos(
        math.radians(_true_obliquity_deg(T))
    )
    return (gmst + equation_of_equinoxes) % 360.0


def inertial_to_fixed_matrix(jd: float) -> np.ndarray:
    """3x3 rotation taking inertial-of-date vectors into the Earth-fixed frame."""
    theta = math.radians(greenwich_apparent_sidereal_time_deg(jd))
    c, s = math.cos(theta), math.sin(theta)
    return np.array([
        [c, s, 0.0],
        [-s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def subsolar_point(fixed_vector: np.ndarray) -> tuple[float, float]:
    """
    Geodetic (longitude, latitude) in degrees of the surface point beneath a
    fixed-frame direction.
    """
    x, y, z = (float(v) for v in fixed_vector)
    longitude = math.degrees(math.atan2(y, x))
    # Geodetic latitude of the ellipsoid point hit by the geocentric ray
    latitude = math.degrees(
        math.atan2(z, (1.0 - WGS84_FIRST_ECCENTRICITY_SQUARED) * math.hypot(x, y))
    )
    return longitude, latitude


def normalize_azimuth(degrees: float) -> float:
    """Normalize an angle to [0, 360)."""
    azimuth = degrees % 360.0
    # Tiny negative inputs can round up to exactly 360.0
    if azimuth >= 360.0:
        azimuth = 0.0
    return azimuth


# ============================================================================
# MODEL
# ============================================================================

class SolarPositionModel:
    """
    Compute the Sun's direction for an instant.

    Usage:
        model = SolarPositionModel()
        sun = model.compute_sun_position(datetime.now(timezone.utc))
        print(sun.azimuth_deg, sun.elevation_deg)
    """

    def __init__(
        self,
        min_year: int | None = None,
        max_year: int | None = None,
    ):
        self.min_year = settings.ephemeris_min_year if min_year is None else min_year
        self.max_year = settings.ephemeris_max_year if max_year is None else max_year

    def compute_sun_position(self, timestamp: datetime) -> SunPosition:
        """
        Compute the sub-solar azimuth/elevation for a timestamp.

        Args:
            timestamp: Instant to evaluate (naive values are taken as UTC)

        Returns:
            SunPosition for that instant

        Raises:
            TransformUnavailable: If the frame transform cannot be derived
        """
        instant = validate_timestamp(timestamp)

        if not (self.min_year <= instant.year <= self.max_year):
            raise TransformUnavailable(
                f"No inertial-to-fixed transform for {instant.isoformat()}: "
                f"supported years are {self.min_year}-{self.max_year}",
                timestamp=instant,
            )

        jd = julian_date(instant)
        rotation = inertial_to_fixed_matrix(jd)
        if not np.all(np.isfinite(rotation)):
            raise TransformUnavailable(
                f"Inertial-to-fixed rotation is undefined for {instant.isoformat()}",
                timestamp=instant,
            )

        sun_inertial = sun_inertial_position(julian_century(jd))
        sun_fixed = rotation @ sun_inertial

        longitude, latitude = subsolar_point(sun_fixed)

        return SunPosition(
            azimuth_deg=normalize_azimuth(longitude),
            elevation_deg=latitude,
            timestamp=instant,
        )


def compute_sun_position(timestamp: datetime) -> SunPosition:
    """
    Convenience function to compute the sun position with default settings.

    Example:
        sun = compute_sun_position(datetime(2024, 6, 20, 12, tzinfo=timezone.utc))
        print(f"Azimuth {sun.azimuth_deg:.1f}°, elevation {sun.elevation_deg:.1f}°")
    """
    return SolarPositionModel().compute_sun_position(timestamp)
