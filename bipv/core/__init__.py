"""Core models, configuration and session state."""

from .errors import (
    BipvError,
    InvalidBandConfiguration,
    InvalidIrradianceInput,
    MissingFeatureAttributes,
    TransformUnavailable,
    ValidationError,
)
from .config import Settings, settings
from .models import (
    Band,
    BuildingFeature,
    FeatureAttributeAccessor,
    IrradianceInput,
    ScoreRecord,
    SunPosition,
)
from .session import ScoringSession

__all__ = [
    "BipvError",
    "InvalidBandConfiguration",
    "InvalidIrradianceInput",
    "MissingFeatureAttributes",
    "TransformUnavailable",
    "ValidationError",
    "Settings",
    "settings",
    "Band",
    "BuildingFeature",
    "FeatureAttributeAccessor",
    "IrradianceInput",
    "ScoreRecord",
    "SunPosition",
    "ScoringSession",
]
