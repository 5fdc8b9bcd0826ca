"""
Data models for the scoring engine.

Covers the values exchanged between the solar model, the scorer and the
classifier, plus the protocols the external tile dataset must satisfy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

from ..utils.validation import validate_irradiance


# =============================================================================
# ENUMS
# =============================================================================


class Band(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# SOLAR / IRRADIANCE VALUES
# =============================================================================


@dataclass(frozen=True)
class SunPosition:
    """Sub-solar direction for one instant."""
    azimuth_deg: float  # [0, 360)
    elevation_deg: float  # [-90, 90]
    timestamp: Optional[datetime] = None

    @property
    def zenith_deg(self) -> float:
        return 90.0 - self.elevation_deg


@dataclass(frozen=True)
class IrradianceInput:
    """Caller-supplied irradiance for a scoring session."""
    date: date
    time_of_day: time
    ghi_w_m2: float  # Global horizontal irradiance, >= 0

    def __post_init__(self):
        object.__setattr__(self, "ghi_w_m2", validate_irradiance(self.ghi_w_m2))


# =============================================================================
# EXTERNAL DATASET PROTOCOLS
# =============================================================================


@runtime_checkable
class FeatureAttributeAccessor(Protocol):
    """A building record owned by the tile dataset."""

    def get_property(self, name: str) -> Any: ...

    def set_property(self, name: str, value: Any) -> None: ...


class TileContent(Protocol):
    feature_count: int

    def get_feature(self, index: int) -> FeatureAttributeAccessor: ...


class Tile(Protocol):
    content: TileContent


# =============================================================================
# SCORING RECORDS
# =============================================================================


@dataclass
class BuildingFeature:
    """A discovered building with the geometry the scorer needs."""
    accessor: FeatureAttributeAccessor
    longitude: float
    latitude: float
    height_m: float
    feature_id: Optional[str] = None

    def write(self, name: str, value: Any) -> None:
        self.accessor.set_property(name, value)


@dataclass(frozen=True)
class ScoreRecord:
    """Which feature produced which score in a scoring pass."""
    feature_id: Optional[str]
    longitude: float
    latitude: float
    height_m: float
    potential: float
    band: Band
