"""Ingest modules - tile events, feature extraction, dataset adapters."""

from .events import Event, EventSource
from .tile_pipeline import AttributeNames, FeatureExtractionPipeline, PipelineStats
from .geojson_tileset import DictFeature, GeoJSONTileset, GridTile, TileContent

__all__ = [
    "Event",
    "EventSource",
    "AttributeNames",
    "FeatureExtractionPipeline",
    "PipelineStats",
    "DictFeature",
    "GeoJSONTileset",
    "GridTile",
    "TileContent",
]
