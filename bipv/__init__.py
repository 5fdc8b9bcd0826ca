"""
BIPV Solar Exposure - scoring engine for building-integrated PV potential.

Scores buildings discovered in a streamed 3D tile dataset against the
current sun position and irradiance, and classifies the scores into bands
for styling.
"""

__version__ = "0.1.0"

from .core import (
    Band,
    BipvError,
    BuildingFeature,
    InvalidIrradianceInput,
    IrradianceInput,
    MissingFeatureAttributes,
    ScoreRecord,
    ScoringSession,
    SunPosition,
    TransformUnavailable,
)
from .solar import SolarPositionModel, StaticIrradianceProvider, compute_sun_position
from .geometry import PotentialScorer
from .analysis import ClassificationBand, Classifier
from .ingest import FeatureExtractionPipeline, GeoJSONTileset

__all__ = [
    "__version__",
    "Band",
    "BipvError",
    "BuildingFeature",
    "InvalidIrradianceInput",
    "IrradianceInput",
    "MissingFeatureAttributes",
    "ScoreRecord",
    "ScoringSession",
    "SunPosition",
    "TransformUnavailable",
    "SolarPositionModel",
    "StaticIrradianceProvider",
    "compute_sun_position",
    "PotentialScorer",
    "ClassificationBand",
    "Classifier",
    "FeatureExtractionPipeline",
    "GeoJSONTileset",
]
