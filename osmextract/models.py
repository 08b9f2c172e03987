"""
OSM entity models

Data classes for nodes, ways and relations read from a snapshot
"""

from typing import List, Dict, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigurationError


Coordinate = Tuple[float, float]  # (lon, lat)


class EntityKind(Enum):
    """OSM entity kinds"""
    NODE = "node"
    WAY = "way"
    RELATION = "relation"
    
    @classmethod
    def parse(cls, value: str) -> "EntityKind":
        """Look up a kind by its name, e.g. 'way'"""
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"{value}: unknown type") from None


@dataclass
class Node:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    
    kind = EntityKind.NODE
    
    @property
    def coordinate(self) -> Coordinate:
        return (self.lon, self.lat)


@dataclass
class NodeRef:
    """A node reference inside a way; lat/lon stay None until resolved"""
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    
    @property
    def resolved(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass
class Way:
    """Represents an OSM way (line or ring)"""
    id: int
    nodes: List[NodeRef]
    tags: Dict[str, str] = field(default_factory=dict)
    
    kind = EntityKind.WAY
    
    @property
    def node_ids(self) -> List[int]:
        return [ref.id for ref in self.nodes]
    
    def get_coordinates(self) -> List[Coordinate]:
        """Get (lon, lat) pairs of resolved references, in way order"""
        return [(ref.lon, ref.lat) for ref in self.nodes if ref.resolved]


@dataclass
class Member:
    """A relation member: referenced kind ("node", "way", "relation"), ID and role"""
    type: str
    ref: int
    role: str = ""


@dataclass
class Relation:
    """Represents an OSM relation"""
    id: int
    members: List[Member]
    tags: Dict[str, str] = field(default_factory=dict)
    
    kind = EntityKind.RELATION
    
    @property
    def way_ids(self) -> List[int]:
        """IDs of way members in member order (other member kinds are ignored)"""
        return [member.ref for member in self.members if member.type == "way"]


# Role -> line coordinates of each way member with that role, in member order.
# Plain dicts keep insertion order, which polygon assembly relies on.
RoleGeometryGroup = Dict[str, List[List[Coordinate]]]


@dataclass
class ResolvedRelation:
    """A relation together with its role-grouped member lines"""
    relation: Relation
    lines_by_role: RoleGeometryGroup
