"""
Polygon building

Ways become single-ring polygons by closing their line. Relations become
Polygon/MultiPolygon geometries from their outer and inner member lines.
"""

from typing import List, Optional

from loguru import logger
from shapely.errors import GEOSException

from ..config import get_config
from ..errors import GeometryAssemblyError
from ..models import Coordinate, ResolvedRelation, Way
from .engine import GeometryEngine, Polygonal


def close_ring(coords: List[Coordinate]) -> List[Coordinate]:
    """Ensure ring is closed (first point == last point)"""
    if not coords:
        return coords
    
    if coords[0] != coords[-1]:
        return coords + [coords[0]]
    
    return coords


def way_ring(way: Way) -> List[Coordinate]:
    """
    Closed ring of a way's resolved coordinates
    
    Raises GeometryAssemblyError when fewer than 4 positions remain after
    closing (a ring needs three distinct corners).
    """
    ring = close_ring(way.get_coordinates())
    if len(ring) < 4:
        raise GeometryAssemblyError(way.id, f"ring has {len(ring)} positions, need at least 4")
    return ring


class PolygonBuilder:
    """
    Build relation polygons from role-grouped member lines
    
    Outer lines are polygonized into the shell area; inner lines, if any,
    are polygonized too and subtracted from it.
    """
    
    def __init__(
        self,
        engine: Optional[GeometryEngine] = None,
        outer_role: Optional[str] = None,
        inner_role: Optional[str] = None
    ):
        config = get_config()
        self.engine = engine or GeometryEngine()
        self.outer_role = outer_role or config.outer_role
        self.inner_role = inner_role or config.inner_role
    
    def build(self, resolved: ResolvedRelation) -> Polygonal:
        """
        Build the polygon for one relation
        
        Raises:
            GeometryAssemblyError: no outer lines, or they enclose no area
        """
        relation_id = resolved.relation.id
        outer_lines = resolved.lines_by_role.get(self.outer_role)
        if not outer_lines:
            raise GeometryAssemblyError(relation_id, f"no {self.outer_role!r} members")
        
        try:
            polygon = self.engine.polygonize_valid(outer_lines)
            if polygon.is_empty:
                raise GeometryAssemblyError(relation_id, f"{self.outer_role!r} members do not form a closed boundary")
            
            inner_lines = resolved.lines_by_role.get(self.inner_role)
            if inner_lines is not None:
                holes = self.engine.polygonize_valid(inner_lines)
                logger.debug(f"relation {relation_id}: subtracting {len(inner_lines)} {self.inner_role!r} lines")
                polygon = self.engine.difference(polygon, holes)
        except GEOSException as e:
            raise GeometryAssemblyError(relation_id, str(e)) from e
        
        if polygon.is_empty:
            raise GeometryAssemblyError(relation_id, "polygon is empty after removing holes")
        return polygon
