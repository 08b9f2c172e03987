"""
Geometry engine

Thin shapely wrapper for the two planar operations relation polygons need:
building valid polygons from unordered boundary lines, and subtracting
one polygonal geometry from another.
"""

from typing import List, Union

import shapely
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from ..models import Coordinate

Polygonal = Union[Polygon, MultiPolygon]


class GeometryEngine:
    """Polygonization and set difference over shapely geometries"""
    
    def polygonize_valid(self, lines: List[List[Coordinate]]) -> Polygonal:
        """
        Build the polygonal area enclosed by a set of lines
        
        Lines may arrive in any order and direction, and a boundary may be
        split over several lines. Rings nested inside other rings become
        holes (even-odd). Lines with fewer than two positions are ignored.
        
        Returns:
            Valid Polygon or MultiPolygon; empty Polygon if no ring closes
        """
        segments = [LineString(line) for line in lines if len(line) >= 2]
        if not segments:
            return Polygon()
        
        # Node the input so segments meet at shared vertices
        noded = unary_union(MultiLineString(segments))
        area = shapely.build_area(noded)
        if not area.is_valid:
            area = shapely.make_valid(area)
        return polygonal_part(area)
    
    def difference(self, outer: Polygonal, inner: Polygonal) -> Polygonal:
        """outer minus inner"""
        if inner.is_empty:
            return outer
        return polygonal_part(outer.difference(inner))


def polygonal_part(geometry: BaseGeometry) -> Polygonal:
    """Reduce a geometry to its polygons (collections may carry stray lines)"""
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    
    polygons: List[Polygon] = []
    for part in getattr(geometry, "geoms", []):
        if isinstance(part, Polygon) and not part.is_empty:
            polygons.append(part)
        elif isinstance(part, MultiPolygon):
            polygons.extend(part.geoms)
    
    if not polygons:
        return Polygon()
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)
