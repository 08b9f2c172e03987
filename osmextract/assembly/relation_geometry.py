"""
Relation geometry assembly

Turns a relation's way members into per-role line lists
"""

from typing import Dict, List
from loguru import logger

from ..models import Coordinate, Node, Relation, RoleGeometryGroup, Way


def assemble_role_groups(
    relation: Relation,
    ways_by_id: Dict[int, Way],
    nodes_by_id: Dict[int, Node]
) -> RoleGeometryGroup:
    """
    Group a relation's member ways by role
    
    Only way members are used. A member way missing from ways_by_id, or a
    node missing from nodes_by_id, is logged and left out; the rest of the
    relation is still assembled.
    
    Args:
        relation: Relation whose members are grouped
        ways_by_id: Member ways found in the snapshot
        nodes_by_id: Nodes referenced by those ways
        
    Returns:
        Dict of role -> list of line coordinates, roles in first-seen order
        and lines in member order
    """
    lines_by_role: RoleGeometryGroup = {}
    
    for member in relation.members:
        if member.type != "way":
            continue
        
        way = ways_by_id.get(member.ref)
        if way is None:
            logger.warning(f"relation {relation.id}: way {member.ref}: not found")
            continue
        
        line: List[Coordinate] = []
        for ref in way.nodes:
            node = nodes_by_id.get(ref.id)
            if node is None:
                logger.warning(f"relation {relation.id}: way {way.id}: node {ref.id}: not found")
                continue
            line.append(node.coordinate)
        
        lines_by_role.setdefault(member.role, []).append(line)
    
    return lines_by_role
