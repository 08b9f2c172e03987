"""Tests for relation role grouping and polygon building."""
import pytest
from shapely.geometry import MultiPolygon, Polygon

from osmextract.assembly import GeometryEngine, PolygonBuilder, assemble_role_groups, close_ring
from osmextract.assembly.polygon_builder import way_ring
from osmextract.errors import GeometryAssemblyError
from osmextract.models import Member, Node, NodeRef, Relation, ResolvedRelation, Way

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
HOLE = [(2.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 4.0), (2.0, 2.0)]


def resolved(relation_id, **lines_by_role):
    return ResolvedRelation(Relation(relation_id, [], {}), lines_by_role)


class TestAssembleRoleGroups:
    """Tests for grouping way members by role."""

    @pytest.fixture
    def nodes_by_id(self):
        return {
            1: Node(1, lat=0.0, lon=0.0),
            2: Node(2, lat=0.0, lon=1.0),
            3: Node(3, lat=1.0, lon=1.0),
        }

    @pytest.fixture
    def ways_by_id(self):
        return {
            10: Way(10, [NodeRef(1), NodeRef(2)]),
            11: Way(11, [NodeRef(2), NodeRef(3), NodeRef(77)]),
            12: Way(12, [NodeRef(3), NodeRef(1)]),
        }

    def test_member_order_within_role(self, ways_by_id, nodes_by_id):
        relation = Relation(1, [
            Member("way", 12, "outer"),
            Member("way", 10, "outer"),
        ])
        groups = assemble_role_groups(relation, ways_by_id, nodes_by_id)
        assert groups == {"outer": [[(1.0, 1.0), (0.0, 0.0)], [(0.0, 0.0), (1.0, 0.0)]]}

    def test_roles_in_first_seen_order(self, ways_by_id, nodes_by_id):
        relation = Relation(1, [
            Member("way", 10, "inner"),
            Member("way", 12, "outer"),
            Member("way", 10, "inner"),
        ])
        groups = assemble_role_groups(relation, ways_by_id, nodes_by_id)
        assert list(groups) == ["inner", "outer"]
        assert len(groups["inner"]) == 2

    def test_missing_node_skipped(self, ways_by_id, nodes_by_id, log_messages):
        relation = Relation(1, [Member("way", 11, "outer")])
        groups = assemble_role_groups(relation, ways_by_id, nodes_by_id)
        assert groups["outer"] == [[(1.0, 0.0), (1.0, 1.0)]]
        assert "relation 1: way 11: node 77: not found" in log_messages

    def test_missing_way_and_other_members_skipped(self, ways_by_id, nodes_by_id):
        relation = Relation(1, [
            Member("way", 99, "outer"),
            Member("node", 1, "label"),
            Member("relation", 5, "subarea"),
            Member("way", 10, "outer"),
        ])
        groups = assemble_role_groups(relation, ways_by_id, nodes_by_id)
        assert list(groups) == ["outer"]
        assert len(groups["outer"]) == 1


class TestCloseRing:
    """Tests for way ring closure."""

    def test_open_ring_closed(self):
        assert close_ring([(0, 0), (1, 0), (1, 1)]) == [(0, 0), (1, 0), (1, 1), (0, 0)]

    def test_closed_ring_unchanged(self):
        assert close_ring(SQUARE) == SQUARE

    def test_empty(self):
        assert close_ring([]) == []

    def test_way_ring(self):
        way = Way(1, [NodeRef(1, 0.0, 0.0), NodeRef(2, 0.0, 1.0), NodeRef(3, 1.0, 1.0)])
        ring = way_ring(way)
        assert len(ring) == 4
        assert ring[0] == ring[-1]

    def test_way_ring_too_short(self):
        way = Way(1, [NodeRef(1, 0.0, 0.0), NodeRef(2, 0.0, 1.0), NodeRef(3)])
        with pytest.raises(GeometryAssemblyError):
            way_ring(way)


class TestGeometryEngine:
    """Tests for polygonization."""

    def test_split_boundary(self):
        engine = GeometryEngine()
        polygon = engine.polygonize_valid([SQUARE[:3], SQUARE[2:]])
        assert isinstance(polygon, Polygon)
        assert polygon.area == pytest.approx(100.0)

    def test_nested_ring_becomes_hole(self):
        polygon = GeometryEngine().polygonize_valid([SQUARE, HOLE])
        assert polygon.area == pytest.approx(96.0)

    def test_open_lines_enclose_nothing(self):
        polygon = GeometryEngine().polygonize_valid([[(0, 0), (1, 0), (1, 1)]])
        assert polygon.is_empty

    def test_short_lines_ignored(self):
        assert GeometryEngine().polygonize_valid([[(0, 0)]]).is_empty


class TestPolygonBuilder:
    """Tests for relation polygons."""

    def test_outer_only(self):
        polygon = PolygonBuilder().build(resolved(1, outer=[SQUARE]))
        assert isinstance(polygon, Polygon)
        assert polygon.area == pytest.approx(100.0)

    def test_inner_subtracted(self):
        polygon = PolygonBuilder().build(resolved(1, outer=[SQUARE[:3], SQUARE[2:]], inner=[HOLE]))
        assert isinstance(polygon, Polygon)
        assert len(polygon.interiors) == 1
        assert polygon.area == pytest.approx(96.0)

    def test_disjoint_outers(self):
        other = [(x + 20.0, y) for x, y in SQUARE]
        polygon = PolygonBuilder().build(resolved(1, outer=[SQUARE, other]))
        assert isinstance(polygon, MultiPolygon)
        assert len(polygon.geoms) == 2

    def test_no_outer(self):
        with pytest.raises(GeometryAssemblyError) as excinfo:
            PolygonBuilder().build(resolved(7, inner=[HOLE]))
        assert excinfo.value.entity_id == 7

    def test_dangling_outer(self):
        with pytest.raises(GeometryAssemblyError):
            PolygonBuilder().build(resolved(1, outer=[SQUARE[:3]]))

    def test_custom_roles(self):
        builder = PolygonBuilder(outer_role="shell", inner_role="hole")
        polygon = builder.build(resolved(1, shell=[SQUARE], hole=[HOLE]))
        assert polygon.area == pytest.approx(96.0)
