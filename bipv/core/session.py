"""
Scoring session state.

Holds the SunPosition / IrradianceInput pair every scoring call reads. The
pair is computed on refresh() and stays fixed until the next refresh.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .errors import TransformUnavailable
from .models import IrradianceInput, SunPosition
from ..solar.irradiance import IrradianceProvider, StaticIrradianceProvider
from ..solar.position import SolarPositionModel

logger = logging.getLogger(__name__)


class ScoringSession:
    """
    Session-scoped active sun position and irradiance.

    Usage:
        session = ScoringSession(provider=StaticIrradianceProvider(850.0))
        session.refresh()                 # now
        session.refresh(datetime(...))    # a specific instant
        sun, irradiance = session.active()
    """

    def __init__(
        self,
        provider: Optional[IrradianceProvider] = None,
        solar_model: Optional[SolarPositionModel] = None,
    ):
        self.provider = provider or StaticIrradianceProvider()
        self.solar_model = solar_model or SolarPositionModel()
        self.sun_position: Optional[SunPosition] = None
        self.irradiance: Optional[IrradianceInput] = None
        self.refresh_count = 0

    @property
    def is_active(self) -> bool:
        return self.sun_position is not None and self.irradiance is not None

    def refresh(self, timestamp: Optional[datetime] = None) -> SunPosition:
        """
        Capture a timestamp and recompute the active pair.

        Args:
            timestamp: Instant to score (default: now, UTC)

        Returns:
            The new active SunPosition

        Raises:
            TransformUnavailable: If no sun position exists for the instant
            InvalidIrradianceInput: If the provider supplies a bad value
        """
        instant = timestamp or datetime.now(timezone.utc)

        # A failed refresh must not leave the previous pass's values active
        self.sun_position = None
        self.irradiance = None

        irradiance = self.provider.current()
        try:
            sun_position = self.solar_model.compute_sun_position(instant)
        except TransformUnavailable:
            logger.error(f"Sun position unavailable for {instant.isoformat()}; scoring disabled")
            raise

        self.sun_position = sun_position
        self.irradiance = irradiance
        self.refresh_count += 1

        logger.info(
            f"Sun position: azimuth {sun_position.azimuth_deg:.2f}°, "
            f"elevation {sun_position.elevation_deg:.2f}° "
            f"(GHI {irradiance.ghi_w_m2:.1f} W/m²)"
        )
        return sun_position

    def active(self) -> tuple[SunPosition, IrradianceInput]:
        """
        Return the active pair.

        Raises:
            TransformUnavailable: If the session has not been refreshed successfully
        """
        if self.sun_position is None or self.irradiance is None:
            raise TransformUnavailable("Scoring session has no active sun position")
        return self.sun_position, self.irradiance
