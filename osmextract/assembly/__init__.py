"""
Geometry assembly for resolved entities

- relation_geometry: groups member way lines by role
- engine: shapely-backed polygonization and set difference
- polygon_builder: outer/inner roles to Polygon or MultiPolygon
"""

from .relation_geometry import assemble_role_groups
from .engine import GeometryEngine
from .polygon_builder import PolygonBuilder, close_ring

__all__ = [
    "assemble_role_groups",
    "GeometryEngine",
    "PolygonBuilder",
    "close_ring",
]
