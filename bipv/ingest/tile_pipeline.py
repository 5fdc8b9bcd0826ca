"""
Feature Extraction Pipeline

Turns tile-visibility notifications from the dataset loader into scores:
- Iterates the features of each visible tile in dataset order
- Skips features without usable longitude/latitude/height (logged, counted)
- Scores the rest against the session's active sun and irradiance
- Writes potential and band onto the feature and reports a ScoreRecord

No error raised while handling a tile propagates to the loader.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from ..analysis.classifier import Classifier
from ..core.config import settings
from ..core.errors import MissingFeatureAttributes, ValidationError
from ..core.models import (
    BuildingFeature,
    FeatureAttributeAccessor,
    IrradianceInput,
    ScoreRecord,
    SunPosition,
    Tile,
)
from ..core.session import ScoringSession
from ..geometry.pv_potential import PotentialScorer
from ..utils.validation import (
    as_finite_float,
    validate_height,
    validate_latitude,
    validate_longitude,
)
from .events import EventSource

logger = logging.getLogger(__name__)

ScoreListener = Callable[[ScoreRecord], None]

# Attribute -> range check; a failed check makes the attribute unusable
FIELD_VALIDATORS: Dict[str, Callable[[float], float]] = {
    "longitude": validate_longitude,
    "latitude": validate_latitude,
    "height": validate_height,
}


@dataclass
class PipelineStats:
    """Running counters for a pipeline instance."""
    tiles_seen: int = 0
    tiles_skipped: int = 0  # No active sun position
    tiles_failed: int = 0
    features_scored: int = 0
    features_missing_attributes: int = 0
    features_failed: int = 0
    features_deduplicated: int = 0
    listener_errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return dict(self.__dict__)


@dataclass
class AttributeNames:
    """Feature property names the pipeline reads and writes."""
    longitude: str = field(default_factory=lambda: settings.longitude_property)
    latitude: str = field(default_factory=lambda: settings.latitude_property)
    height: str = field(default_factory=lambda: settings.height_property)
    feature_id: str = field(default_factory=lambda: settings.id_property)
    band: str = field(default_factory=lambda: settings.band_property)


class FeatureExtractionPipeline:
    """
    Score features as their tiles become visible.

    Usage:
        pipeline = FeatureExtractionPipeline(tileset.tile_visible, session)
        session.refresh()
        pipeline.attach()
        ...
        pipeline.detach()
    """

    def __init__(
        self,
        event_source: EventSource,
        session: ScoringSession,
        scorer: Optional[PotentialScorer] = None,
        classifier: Optional[Classifier] = None,
        attributes: Optional[AttributeNames] = None,
        dedupe: Optional[bool] = None,
        reload_source: Optional[EventSource] = None,
    ):
        """
        Args:
            event_source: Loader event raised with each newly visible tile
            session: Holder of the active sun position and irradiance
            scorer: Potential scorer (default: PotentialScorer())
            classifier: Band classifier (default: Classifier())
            attributes: Feature property names
            dedupe: Score each identified feature at most once until reset()
            reload_source: Event raised when the dataset reloads; triggers reset()
        """
        self.event_source = event_source
        self.session = session
        self.scorer = scorer or PotentialScorer()
        self.classifier = classifier or Classifier()
        self.attributes = attributes or AttributeNames()
        self.dedupe = settings.dedupe_features if dedupe is None else dedupe
        self.reload_source = reload_source

        self.stats = PipelineStats()
        self._processed_ids: Set[str] = set()
        self._score_listeners: List[ScoreListener] = []
        self._remove_listener: Optional[Callable[[], None]] = None
        self._remove_reload_listener: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    @property
    def attached(self) -> bool:
        return self._remove_listener is not None

    def attach(self) -> None:
        """Start receiving tile-visible notifications."""
        if self._remove_listener is None:
            self._remove_listener = self.event_source.add_listener(self.on_tile_visible)
        if self.reload_source is not None and self._remove_reload_listener is None:
            self._remove_reload_listener = self.reload_source.add_listener(
                lambda *_: self.reset()
            )

    def detach(self) -> None:
        """Stop receiving notifications; a tile in progress still completes."""
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        if self._remove_reload_listener is not None:
            self._remove_reload_listener()
            self._remove_reload_listener = None

    def add_score_listener(self, listener: ScoreListener) -> Callable[[], None]:
        """Register a callback receiving a ScoreRecord per scored feature."""
        self._score_listeners.append(listener)

        def remove() -> None:
            if listener in self._score_listeners:
                self._score_listeners.remove(listener)

        return remove

    def reset(self) -> None:
        """Forget processed feature ids (call when the dataset is reloaded)."""
        self._processed_ids.clear()

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def on_tile_visible(self, tile: Tile) -> None:
        """Score every feature of a newly visible tile."""
        tile_id = getattr(tile, "tile_id", None)
        self.stats.tiles_seen += 1

        if not self.session.is_active:
            self.stats.tiles_skipped += 1
            logger.warning(
                "No active sun position; tile not scored",
                extra={"tile_id": tile_id},
            )
            return

        sun_position, irradiance = self.session.active()
        try:
            content = tile.content
            feature_count = int(content.feature_count)
        except Exception as e:
            self.stats.tiles_failed += 1
            logger.exception(
                f"Unreadable tile content: {e}",
                extra={"tile_id": tile_id, "error_type": type(e).__name__},
            )
            return

        for index in range(feature_count):
            try:
                record = self._process_feature(content.get_feature(index), sun_position, irradiance)
            except MissingFeatureAttributes as e:
                self.stats.features_missing_attributes += 1
                logger.warning(str(e), extra={"tile_id": tile_id})
                continue
            except Exception as e:
                self.stats.features_failed += 1
                logger.exception(
                    f"Failed to score feature {index}: {e}",
                    extra={"tile_id": tile_id, "error_type": type(e).__name__},
                )
                continue

            if record is not None:
                self._notify(record, tile_id)

    def _process_feature(
        self,
        accessor: FeatureAttributeAccessor,
        sun_position: SunPosition,
        irradiance: IrradianceInput,
    ) -> Optional[ScoreRecord]:
        feature = self.extract_feature(accessor)

        track_id = self.dedupe and feature.feature_id is not None
        if track_id and feature.feature_id in self._processed_ids:
            self.stats.features_deduplicated += 1
            return None

        potential = self.scorer.score(sun_position, irradiance, feature)
        band = self.classifier.classify(potential)
        feature.write(self.attributes.band, band.band.value)

        # Only fully written features count as processed
        if track_id:
            self._processed_ids.add(feature.feature_id)
        self.stats.features_scored += 1

        return ScoreRecord(
            feature_id=feature.feature_id,
            longitude=feature.longitude,
            latitude=feature.latitude,
            height_m=feature.height_m,
            potential=potential,
            band=band.band,
        )

    def _notify(self, record: ScoreRecord, tile_id: Optional[str]) -> None:
        for listener in list(self._score_listeners):
            try:
                listener(record)
            except Exception as e:
                self.stats.listener_errors += 1
                logger.exception(
                    f"Score listener failed for feature {record.feature_id}: {e}",
                    extra={
                        "tile_id": tile_id,
                        "feature_id": record.feature_id,
                        "error_type": type(e).__name__,
                    },
                )

    def extract_feature(self, accessor: FeatureAttributeAccessor) -> BuildingFeature:
        """
        Read geometry from an accessor.

        Raises:
            MissingFeatureAttributes: If longitude, latitude or height is
                absent, non-numeric, out of range, or (for height) negative
        """
        feature_id = self._feature_id(accessor)

        values: Dict[str, Optional[float]] = {}
        for name, validator in FIELD_VALIDATORS.items():
            value = as_finite_float(accessor.get_property(getattr(self.attributes, name)))
            if value is not None:
                try:
                    value = validator(value)
                except ValidationError:
                    value = None
            values[name] = value

        missing = [name for name, value in values.items() if value is None]
        if missing:
            raise MissingFeatureAttributes(missing, feature_id=feature_id)

        return BuildingFeature(
            accessor=accessor,
            longitude=values["longitude"],
            latitude=values["latitude"],
            height_m=values["height"],
            feature_id=feature_id,
        )

    def _feature_id(self, accessor: Any) -> Optional[str]:
        raw = getattr(accessor, "feature_id", None)
        if raw is None:
            raw = accessor.get_property(self.attributes.feature_id)
        return None if raw is None else str(raw)
