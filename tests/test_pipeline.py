"""Tests for feature building and GeoJSON output."""
import json

import pytest

from osmextract.config import ExtractConfig
from osmextract.errors import ConfigurationError
from osmextract.filters import build_filter
from osmextract.models import EntityKind
from osmextract.pipeline import ExtractPipeline


@pytest.fixture
def pipeline():
    return ExtractPipeline(ExtractConfig(workers=1))


class TestExtract:
    """Tests for ExtractPipeline.extract with an in-memory stream."""

    def test_node_features(self, pipeline, memory_stream):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.NODE, "9"))
        assert len(collection.features) == 1
        feature = collection.features[0]
        assert feature.id == 9
        assert feature.geometry.type == "Point"
        assert feature.geometry.coordinates == [20.0, 20.0]
        assert feature.properties == {"amenity": "cafe", "name": "Corner Cafe"}

    def test_way_line(self, pipeline, memory_stream):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.WAY, "104"))
        geometry = collection.features[0].geometry
        assert geometry.type == "LineString"
        assert len(geometry.coordinates) == 4

    def test_way_polygon_closes_ring(self, pipeline, memory_stream):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.WAY, "104"), polygonize=True)
        geometry = collection.features[0].geometry
        assert geometry.type == "Polygon"
        ring = geometry.coordinates[0]
        assert len(ring) == 5
        assert ring[0] == ring[-1]

    def test_relation_role_features(self, pipeline, memory_stream):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.RELATION, "500"))
        assert [f.id for f in collection.features] == ["500:outer", "500:inner"]
        outer = collection.features[0]
        assert outer.geometry.type == "MultiLineString"
        assert len(outer.geometry.coordinates) == 2
        assert outer.properties["name"] == "Park"

    def test_relation_polygon(self, pipeline, memory_stream):
        collection = pipeline.extract(
            memory_stream, build_filter(EntityKind.RELATION, "500"), polygonize=True
        )
        feature = collection.features[0]
        assert feature.id == 500
        assert feature.geometry.type == "Polygon"
        # shell and one hole
        assert len(feature.geometry.coordinates) == 2

    def test_failed_relation_does_not_affect_others(self, pipeline, memory_stream, log_messages):
        collection = pipeline.extract(
            memory_stream, build_filter(EntityKind.RELATION, "500,502"), polygonize=True
        )
        assert [f.id for f in collection.features] == [500]
        assert any(m.startswith("relation 502") for m in log_messages)

    def test_absent_id(self, pipeline, memory_stream):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.WAY, "404"))
        assert collection.features == []


class TestRun:
    """Tests for configuration checks in ExtractPipeline.run."""

    def test_unknown_kind(self, pipeline, sample_osm_path):
        with pytest.raises(ConfigurationError):
            pipeline.run("area", sample_osm_path)

    def test_bad_filter_before_open(self, pipeline, tmp_path):
        # The input does not exist; the filter error must come first
        with pytest.raises(ConfigurationError):
            pipeline.run("node", tmp_path / "missing.osm.pbf", ids="x")

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            ExtractPipeline(ExtractConfig(workers=0))


class TestSave:
    """Tests for GeoJSON writing."""

    def test_indented(self, pipeline, memory_stream, tmp_path):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.NODE, "9,10"))
        output_path = tmp_path / "out" / "nodes.geojson"
        pipeline.save(collection, str(output_path))
        text = output_path.read_text(encoding="utf-8")
        assert "\n\t" in text
        data = json.loads(text)
        assert data["type"] == "FeatureCollection"
        assert [f["id"] for f in data["features"]] == [9, 10]
        assert data["features"][0]["geometry"] == {"type": "Point", "coordinates": [20.0, 20.0]}

    def test_compact(self, pipeline, memory_stream, tmp_path):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.NODE, "9"))
        output_path = tmp_path / "nodes.geojson"
        pipeline.save(collection, str(output_path), compact=True)
        text = output_path.read_text(encoding="utf-8")
        assert text.count("\n") == 1
        assert json.loads(text)["features"][0]["properties"]["amenity"] == "cafe"

    def test_stdout(self, pipeline, memory_stream, capsys):
        collection = pipeline.extract(memory_stream, build_filter(EntityKind.NODE, "10"))
        assert pipeline.save(collection, "-") is None
        data = json.loads(capsys.readouterr().out)
        assert data["features"][0]["id"] == 10
