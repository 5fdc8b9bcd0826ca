"""
PV Potential Scorer

Scores the BIPV potential of a building for a single instant:
- Zenith angle from the sun's elevation
- Incident irradiance proxy = GHI x cos(zenith)

The score is a proxy, not a calibrated yield. It is not clamped: with the
sun below the horizon the cosine is negative and so is the potential.
"""

import logging
import math
from typing import Optional

from ..core.config import settings
from ..core.models import BuildingFeature, IrradianceInput, SunPosition

logger = logging.getLogger(__name__)


def incident_potential(elevation_deg: float, ghi_w_m2: float) -> float:
    """GHI scaled by the cosine of the solar zenith angle."""
    zenith_deg = 90.0 - elevation_deg
    cos_zenith = math.cos(math.radians(zenith_deg))
    return ghi_w_m2 * cos_zenith


class PotentialScorer:
    """
    Score buildings and write the result back onto the feature.

    Usage:
        scorer = PotentialScorer()
        potential = scorer.score(sun_position, irradiance, feature)
        feature.accessor.get_property("bipvPotential")  # == potential
    """

    def __init__(self, potential_property: Optional[str] = None):
        """
        Args:
            potential_property: Feature property receiving the score
        """
        self.potential_property = potential_property or settings.potential_property

    def score(
        self,
        sun_position: SunPosition,
        irradiance: IrradianceInput,
        feature: BuildingFeature,
    ) -> float:
        """
        Calculate the potential for one feature.

        Longitude, latitude and height are carried on the feature but do not
        enter the formula.

        Args:
            sun_position: Active sun position for this pass
            irradiance: Active irradiance for this pass
            feature: Building to score

        Returns:
            Potential (W/m² proxy), possibly negative
        """
        potential = incident_potential(sun_position.elevation_deg, irradiance.ghi_w_m2)
        feature.write(self.potential_property, potential)

        logger.debug(
            f"Scored feature at ({feature.longitude:.5f}, {feature.latitude:.5f}): {potential:.2f}",
            extra={"feature_id": feature.feature_id},
        )
        return potential
