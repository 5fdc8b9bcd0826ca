"""
In-memory tileset backed by a GeoJSON FeatureCollection.

Stands in for a streaming 3D tiles loader: buildings are bucketed into a
regular longitude/latitude grid and each grid cell becomes a tile whose
visibility can be raised on demand.

Feature properties are exposed under the same names a 3D Tiles OSM
buildings tileset uses (see Settings.*_property), so the pipeline reads
both sources the same way.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.config import settings
from ..core.errors import ValidationError
from ..utils.validation import as_finite_float, validate_coordinates
from .events import Event

logger = logging.getLogger(__name__)

METERS_PER_LEVEL = 3.0  # ~3m per floor

UNLOCATED_TILE_ID = "unlocated"


@dataclass
class DictFeature:
    """Feature accessor over a plain property dict."""
    properties: Dict[str, Any] = field(default_factory=dict)
    feature_id: Optional[str] = None

    def get_property(self, name: str) -> Any:
        return self.properties.get(name)

    def set_property(self, name: str, value: Any) -> None:
        self.properties[name] = value


@dataclass
class TileContent:
    features: List[DictFeature] = field(default_factory=list)

    @property
    def feature_count(self) -> int:
        return len(self.features)

    def get_feature(self, index: int) -> DictFeature:
        return self.features[index]


@dataclass
class GridTile:
    tile_id: str
    content: TileContent = field(default_factory=TileContent)


def _vertex(point: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(point, (list, tuple)) or len(point) < 2:
        return None
    lon, lat = as_finite_float(point[0]), as_finite_float(point[1])
    if lon is None or lat is None:
        return None
    return lon, lat


def geometry_centroid(geometry: Optional[Dict[str, Any]]) -> Optional[Tuple[float, float]]:
    """Mean of the outer-ring vertices (lon, lat); None if unusable."""
    if not isinstance(geometry, dict):
        return None

    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")
    if not coords or not isinstance(coords, list):
        return None

    if geom_type == "Point":
        rings = [[coords]]
    elif geom_type == "Polygon":
        rings = [coords[0]]
    elif geom_type == "MultiPolygon":
        rings = [polygon[0] for polygon in coords if isinstance(polygon, list) and polygon]
    else:
        return None

    points = []
    for ring in rings:
        if not isinstance(ring, list):
            continue
        # Closed rings repeat the first vertex
        if len(ring) > 1 and ring[0] == ring[-1]:
            ring = ring[:-1]
        # Vertices without a usable lon/lat pair are skipped
        points.extend(v for v in map(_vertex, ring) if v is not None)
    if not points:
        return None

    lon = sum(p[0] for p in points) / len(points)
    lat = sum(p[1] for p in points) / len(points)
    return lon, lat


def _height_from_properties(props: Dict[str, Any]) -> Optional[float]:
    for key in (settings.height_property, "height"):
        if props.get(key) is not None:
            return props[key]

    levels = props.get("building:levels", props.get("levels"))
    if levels is not None:
        try:
            return float(levels) * METERS_PER_LEVEL
        except (TypeError, ValueError):
            return None
    return None


class GeoJSONTileset:
    """
    Grid-partitioned building tileset.

    Usage:
        tileset = GeoJSONTileset.from_file("buildings.geojson")
        pipeline = FeatureExtractionPipeline(tileset.tile_visible, session)
        pipeline.attach()
        tileset.show_all()
    """

    def __init__(self, tile_size_deg: Optional[float] = None):
        self.tile_size_deg = tile_size_deg or settings.tile_size_deg
        self.tiles: Dict[str, GridTile] = {}
        self.tile_visible = Event()
        self.reloaded = Event()

    @classmethod
    def from_file(cls, path: Path | str, tile_size_deg: Optional[float] = None) -> "GeoJSONTileset":
        tileset = cls(tile_size_deg=tile_size_deg)
        with open(path, encoding="utf-8") as f:
            tileset.load(json.load(f))
        return tileset

    def tile_key(self, lon: float, lat: float) -> str:
        col = math.floor(lon / self.tile_size_deg)
        row = math.floor(lat / self.tile_size_deg)
        return f"{col}_{row}"

    def load(self, collection: Dict[str, Any]) -> int:
        """
        Replace the tileset contents with a FeatureCollection.

        Returns:
            Number of features loaded
        """
        kind = collection.get("type") if isinstance(collection, dict) else type(collection).__name__
        if kind != "FeatureCollection":
            raise ValueError(f"Expected a FeatureCollection, got {kind!r}")

        self.tiles = {}
        count = 0

        for index, raw in enumerate(collection.get("features") or []):
            if not isinstance(raw, dict):
                raise ValueError(f"Feature {index} is not a GeoJSON object")

            feature = self._to_feature(raw, index)
            key = self._tile_for(feature)

            tile = self.tiles.setdefault(key, GridTile(tile_id=key))
            tile.content.features.append(feature)
            count += 1

        logger.info(f"Loaded {count} features into {len(self.tiles)} tiles")
        self.reloaded.raise_event(self)
        return count

    def _tile_for(self, feature: DictFeature) -> str:
        lon = as_finite_float(feature.get_property(settings.longitude_property))
        lat = as_finite_float(feature.get_property(settings.latitude_property))
        if lon is None or lat is None:
            return UNLOCATED_TILE_ID
        try:
            validate_coordinates(lat, lon)
        except ValidationError:
            return UNLOCATED_TILE_ID
        return self.tile_key(lon, lat)

    def _to_feature(self, raw: Dict[str, Any], index: int) -> DictFeature:
        properties = raw.get("properties")
        props = dict(properties) if isinstance(properties, dict) else {}

        centroid = geometry_centroid(raw.get("geometry"))
        if centroid is not None:
            props.setdefault(settings.longitude_property, centroid[0])
            props.setdefault(settings.latitude_property, centroid[1])

        height = _height_from_properties(props)
        if height is not None:
            props[settings.height_property] = height

        feature_id = raw.get("id", props.get(settings.id_property))
        if feature_id is None:
            feature_id = f"feature-{index}"

        return DictFeature(properties=props, feature_id=str(feature_id))

    def features(self) -> Iterable[DictFeature]:
        for tile in self.tiles.values():
            yield from tile.content.features

    def show(self, tile_id: str) -> GridTile:
        """Raise the visibility event for one tile."""
        tile = self.tiles[tile_id]
        self.tile_visible.raise_event(tile)
        return tile

    def show_all(self) -> int:
        """Raise the visibility event for every tile; returns tiles shown."""
        for tile_id in sorted(self.tiles):
            self.show(tile_id)
        return len(self.tiles)
