"""
Potential classification.

Maps a potential to one of an ordered set of bands (evaluated high to low,
first match wins, trailing catch-all) and renders the same bands as a
3D Tiles style condition list for the render layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..core.config import Settings, settings
from ..core.errors import InvalidBandConfiguration
from ..core.models import Band


@dataclass(frozen=True)
class ClassificationBand:
    """One band; threshold None marks the catch-all."""
    band: Band
    color: str
    threshold: Optional[float] = None

    def matches(self, potential: float) -> bool:
        return self.threshold is None or potential >= self.threshold


def default_bands(config: Settings = settings) -> list[ClassificationBand]:
    """high >= 100 (green), medium >= 50 (yellow), otherwise low (red)."""
    return [
        ClassificationBand(Band.HIGH, config.high_color, config.high_threshold),
        ClassificationBand(Band.MEDIUM, config.medium_color, config.medium_threshold),
        ClassificationBand(Band.LOW, config.low_color),
    ]


def _format_threshold(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


class Classifier:
    """
    Bucket potentials into bands.

    Usage:
        classifier = Classifier()
        classifier.classify(866.0).band  # Band.HIGH
        classifier.style_document()      # {"color": {"conditions": [...]}}
    """

    def __init__(self, bands: Optional[Sequence[ClassificationBand]] = None):
        self.bands = list(bands) if bands is not None else default_bands()
        self._validate()

    def _validate(self) -> None:
        if not self.bands:
            raise InvalidBandConfiguration("At least one band is required", field="bands")

        *thresholded, catch_all = self.bands
        if catch_all.threshold is not None:
            raise InvalidBandConfiguration(
                "The last band must be a catch-all (threshold None)",
                field="bands",
            )

        previous = math.inf
        for band in thresholded:
            if band.threshold is None:
                raise InvalidBandConfiguration(
                    f"Only the last band may be a catch-all, got {band.band.value}",
                    field="bands",
                )
            if not math.isfinite(band.threshold) or band.threshold >= previous:
                raise InvalidBandConfiguration(
                    "Band thresholds must be finite and strictly descending",
                    field="bands",
                    suggestions=["Order bands from highest threshold to lowest"],
                )
            previous = band.threshold

    def classify(self, potential: float) -> ClassificationBand:
        """
        Return the first band whose threshold the potential meets.

        Total over floats: NaN meets no threshold and lands in the catch-all.
        """
        for band in self.bands:
            if band.matches(potential):
                return band
        # Unreachable after validation
        return self.bands[-1]

    def style_rules(self, property_name: Optional[str] = None) -> list[tuple[str, str]]:
        """Ordered (condition, color) pairs for the whole dataset."""
        prop = property_name or settings.potential_property
        rules = []
        for band in self.bands:
            if band.threshold is None:
                condition = "true"
            else:
                condition = f"${{{prop}}} >= {_format_threshold(band.threshold)}"
            rules.append((condition, f"color('{band.color}')"))
        return rules

    def style_document(self, property_name: Optional[str] = None) -> dict[str, Any]:
        """3D Tiles declarative style with one color condition per band."""
        return {
            "color": {
                "conditions": [list(rule) for rule in self.style_rules(property_name)],
            }
        }
