"""Shared fixtures: a small snapshot with one multipolygon and a few ways."""
from pathlib import Path

import pytest
from loguru import logger

from osmextract.models import Member, Node, NodeRef, Relation, Way
from osmextract.stream import MemoryEntityStream

DATA_DIR = Path(__file__).parent / "data"


def way(way_id, node_ids, **tags):
    return Way(id=way_id, nodes=[NodeRef(node_id) for node_id in node_ids], tags=tags)


@pytest.fixture
def sample_entities():
    """
    Outer square 0..10 split over ways 100 and 101, inner square 2..4 in
    way 102, and two tagged nodes. Way 103 references a node (999) that is
    not in the snapshot; relation 500 references a way (12345) that is not.
    """
    return [
        Node(1, lat=0.0, lon=0.0),
        Node(2, lat=0.0, lon=10.0),
        Node(3, lat=10.0, lon=10.0),
        Node(4, lat=10.0, lon=0.0),
        Node(5, lat=2.0, lon=2.0),
        Node(6, lat=2.0, lon=4.0),
        Node(7, lat=4.0, lon=4.0),
        Node(8, lat=4.0, lon=2.0),
        Node(9, lat=20.0, lon=20.0, tags={"amenity": "cafe", "name": "Corner Cafe"}),
        Node(10, lat=20.0, lon=21.0, tags={"amenity": "pub"}),
        way(100, [1, 2, 3], building="yes"),
        way(101, [3, 4, 1]),
        way(102, [5, 6, 7, 8, 5]),
        way(103, [9, 10, 999], highway="residential", name="Main Street"),
        way(104, [1, 2, 3, 4], building="house"),
        Relation(500, [
            Member("way", 100, "outer"),
            Member("way", 101, "outer"),
            Member("way", 102, "inner"),
            Member("node", 9, "label"),
            Member("way", 12345, "outer"),
        ], tags={"type": "multipolygon", "name": "Park"}),
        Relation(501, [
            Member("way", 104, "outer"),
            Member("relation", 500, "subarea"),
        ], tags={"type": "multipolygon", "landuse": "grass"}),
        Relation(502, [
            Member("way", 103, "street"),
        ], tags={"type": "route"}),
    ]


@pytest.fixture
def memory_stream(sample_entities):
    return MemoryEntityStream(sample_entities)


@pytest.fixture
def sample_osm_path():
    return DATA_DIR / "sample.osm"


@pytest.fixture
def log_messages():
    """Capture loguru messages at WARNING and above"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
