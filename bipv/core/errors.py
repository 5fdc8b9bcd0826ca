"""
Exception hierarchy for the scoring engine.

- TransformUnavailable: a scoring pass cannot run for the requested instant
- MissingFeatureAttributes: one building record cannot be scored (recoverable)
- ValidationError and subclasses: caller/configuration errors at the boundary
"""

from typing import List, Optional, Sequence


class BipvError(Exception):
    """Base class for all engine errors."""


class TransformUnavailable(BipvError):
    """Raised when the inertial-to-fixed frame transform cannot be derived."""

    def __init__(self, message: str, timestamp=None):
        super().__init__(message)
        self.timestamp = timestamp


class MissingFeatureAttributes(BipvError):
    """Raised when a feature lacks usable longitude, latitude or height."""

    def __init__(self, missing: Sequence[str], feature_id: Optional[str] = None):
        self.missing = list(missing)
        self.feature_id = feature_id
        label = f"Feature {feature_id}" if feature_id is not None else "Feature"
        super().__init__(f"{label} is missing attributes: {', '.join(self.missing)}")


class ValidationError(BipvError, ValueError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "", suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.suggestions = suggestions or []


class InvalidIrradianceInput(ValidationError):
    """Raised when a caller supplies a negative or non-finite irradiance."""


class InvalidBandConfiguration(ValidationError):
    """Raised when classification bands are not a valid ordered partition."""
