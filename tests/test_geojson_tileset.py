"""Tests for the GeoJSON-backed tileset adapter."""
import json

import pytest

from bipv.core.config import settings
from bipv.ingest.geojson_tileset import (
    METERS_PER_LEVEL,
    UNLOCATED_TILE_ID,
    GeoJSONTileset,
    geometry_centroid,
)
from bipv.ingest.tile_pipeline import FeatureExtractionPipeline


def square(lon, lat, size=0.0001):
    return {
        "type": "Polygon",
        "coordinates": [[
            [lon, lat], [lon + size, lat], [lon + size, lat + size], [lon, lat + size], [lon, lat],
        ]],
    }


@pytest.fixture
def collection():
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "id": "way/1", "geometry": square(-75.1650, 39.9530), "properties": {"height": 30}},
            {"type": "Feature", "id": "way/2", "geometry": square(-75.1640, 39.9535), "properties": {"building:levels": 4}},
            {"type": "Feature", "id": "way/3", "geometry": square(-75.1400, 39.9600), "properties": {}},
            {"type": "Feature", "geometry": None, "properties": {"height": 9}},
        ],
    }


class TestCentroid:
    """Test footprint centroids."""

    def test_polygon_ignores_closing_vertex(self):
        lon, lat = geometry_centroid(square(10.0, 20.0, size=2.0))
        assert (lon, lat) == pytest.approx((11.0, 21.0))

    def test_point(self):
        assert geometry_centroid({"type": "Point", "coordinates": [5.0, 6.0]}) == (5.0, 6.0)

    def test_multipolygon(self):
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [square(0.0, 0.0, 2.0)["coordinates"], square(10.0, 0.0, 2.0)["coordinates"]],
        }
        lon, lat = geometry_centroid(geometry)
        assert lon == pytest.approx(6.0)
        assert lat == pytest.approx(1.0)

    @pytest.mark.parametrize("geometry", [None, {}, {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}])
    def test_unusable(self, geometry):
        assert geometry_centroid(geometry) is None

    def test_short_vertices_skipped(self):
        geometry = {"type": "Polygon", "coordinates": [[[1.0], [2.0, 4.0], [4.0, 6.0], ["x", 1.0]]]}
        assert geometry_centroid(geometry) == pytest.approx((3.0, 5.0))

    def test_no_usable_vertex(self):
        assert geometry_centroid({"type": "Polygon", "coordinates": [[[1.0], []]]}) is None


class TestLoad:
    """Test partitioning into tiles."""

    def test_features_bucketed_by_grid(self, collection):
        tileset = GeoJSONTileset(tile_size_deg=0.01)
        assert tileset.load(collection) == 4

        # way/1 and way/2 share a cell, way/3 is further east, one feature has no geometry
        assert len(tileset.tiles) == 3
        assert UNLOCATED_TILE_ID in tileset.tiles

    def test_properties_exposed_under_tile_names(self, collection):
        tileset = GeoJSONTileset()
        tileset.load(collection)
        features = {f.feature_id: f for f in tileset.features()}

        first = features["way/1"]
        assert first.get_property(settings.longitude_property) == pytest.approx(-75.16495)
        assert first.get_property(settings.height_property) == 30
        assert features["way/2"].get_property(settings.height_property) == 4 * METERS_PER_LEVEL
        assert features["way/3"].get_property(settings.height_property) is None

    def test_generated_ids(self, collection):
        tileset = GeoJSONTileset()
        tileset.load(collection)
        assert "feature-3" in {f.feature_id for f in tileset.features()}

    def test_rejects_non_collection(self):
        with pytest.raises(ValueError):
            GeoJSONTileset().load({"type": "Feature"})

    def test_from_file(self, tmp_path, collection):
        path = tmp_path / "buildings.geojson"
        path.write_text(json.dumps(collection), encoding="utf-8")

        tileset = GeoJSONTileset.from_file(path)

        assert sum(t.content.feature_count for t in tileset.tiles.values()) == 4

    def test_reload_event(self, collection):
        tileset = GeoJSONTileset()
        seen = []
        tileset.reloaded.add_listener(seen.append)

        tileset.load(collection)

        assert seen == [tileset]

    @pytest.mark.parametrize("longitude", ["abc", None, 250.0, float("nan")])
    def test_unusable_longitude_unlocated(self, longitude):
        """Test coordinate properties that cannot place a feature go to the unlocated tile."""
        tileset = GeoJSONTileset()
        tileset.load({
            "type": "FeatureCollection",
            "features": [{
                "type": "Feature",
                "geometry": None,
                "properties": {settings.longitude_property: longitude, settings.latitude_property: 39.95},
            }],
        })

        assert list(tileset.tiles) == [UNLOCATED_TILE_ID]

    def test_numeric_string_coordinates_bucketed(self):
        tileset = GeoJSONTileset(tile_size_deg=1.0)
        tileset.load({
            "type": "FeatureCollection",
            "features": [{
                "type": "Feature",
                "properties": {settings.longitude_property: "18.5", settings.latitude_property: "59.3"},
            }],
        })

        assert list(tileset.tiles) == ["18_59"]

    @pytest.mark.parametrize("collection", [
        [],
        {"type": "FeatureCollection", "features": ["not-a-feature"]},
    ])
    def test_malformed_input_is_value_error(self, collection):
        with pytest.raises(ValueError):
            GeoJSONTileset().load(collection)

    def test_non_dict_properties_ignored(self):
        tileset = GeoJSONTileset()
        tileset.load({
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "geometry": square(1.0, 1.0), "properties": ["junk"]}],
        })

        assert len(list(tileset.features())) == 1


class TestVisibility:
    """Test replaying tiles through the pipeline."""

    def test_show_all_scores_located_features(self, collection, session_at):
        tileset = GeoJSONTileset()
        tileset.load(collection)
        pipeline = FeatureExtractionPipeline(tileset.tile_visible, session_at(60.0))
        pipeline.attach()

        shown = tileset.show_all()

        assert shown == 3
        assert pipeline.stats.features_scored == 2
        # way/3 has no height, the unlocated feature has no coordinates
        assert pipeline.stats.features_missing_attributes == 2

    def test_show_unknown_tile(self):
        with pytest.raises(KeyError):
            GeoJSONTileset().show("nope")
