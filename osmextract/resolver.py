"""
Stream resolver

Joins nodes, ways and relations by ID with repeated passes over an entity
stream. Each pass narrows the set of IDs the next pass looks for:

    nodes:      nodes
    ways:       ways -> nodes
    relations:  relations -> ways -> nodes

Every pass rewinds the stream first. Filtering happens inside the stream, so
only matching records are kept in memory.
"""

from typing import Dict, List, Optional, Set
from loguru import logger

from .assembly.relation_geometry import assemble_role_groups
from .filters import EntityFilter, id_set_filter
from .models import EntityKind, Node, Relation, ResolvedRelation, Way
from .stream.base import EntityStream


class StreamResolver:
    """
    Resolve filtered entities against an entity stream
    
    Usage:
        with OsmiumEntityStream("region.osm.pbf") as stream:
            ways = StreamResolver(stream).find_ways(way_filter)
    """
    
    def __init__(self, stream: EntityStream):
        self.stream = stream
    
    def find_nodes(self, node_filter: Optional[EntityFilter] = None) -> List[Node]:
        """Single pass: collect matching nodes"""
        _check_kind(node_filter, EntityKind.NODE)
        
        self.stream.rewind()
        nodes = [
            node for node in self.stream.scan(
                node_filter=node_filter,
                skip_ways=True,
                skip_relations=True
            )
            if isinstance(node, Node)
        ]
        logger.info(f"Found {len(nodes)} nodes")
        return nodes
    
    def find_ways(self, way_filter: Optional[EntityFilter] = None) -> List[Way]:
        """
        Two passes: collect matching ways, then the nodes they reference
        
        Node references are filled in place. A reference whose node is not in
        the snapshot is logged and left unresolved.
        """
        _check_kind(way_filter, EntityKind.WAY)
        
        # Pass 1: ways
        self.stream.rewind()
        ways: List[Way] = []
        node_ids: Set[int] = set()
        for way in self.stream.scan(
            way_filter=way_filter,
            skip_nodes=True,
            skip_relations=True
        ):
            if isinstance(way, Way):
                node_ids.update(way.node_ids)
                ways.append(way)
        logger.info(f"Found {len(ways)} ways referencing {len(node_ids)} nodes")
        
        if not ways:
            return ways
        
        # Pass 2: nodes
        nodes_by_id = self._scan_nodes(node_ids)
        
        for way in ways:
            for ref in way.nodes:
                node = nodes_by_id.get(ref.id)
                if node is None:
                    logger.warning(f"way {way.id}: node {ref.id}: not found")
                    continue
                ref.lat = node.lat
                ref.lon = node.lon
        
        return ways
    
    def find_relations(self, relation_filter: Optional[EntityFilter] = None) -> List[ResolvedRelation]:
        """
        Three passes: matching relations, their member ways, then the ways' nodes
        
        Returns:
            One ResolvedRelation per matching relation, in stream order, with
            member lines grouped by role
        """
        _check_kind(relation_filter, EntityKind.RELATION)
        
        # Pass 1: relations
        self.stream.rewind()
        relations: List[Relation] = []
        way_ids: Set[int] = set()
        for relation in self.stream.scan(
            relation_filter=relation_filter,
            skip_nodes=True,
            skip_ways=True
        ):
            if isinstance(relation, Relation):
                way_ids.update(relation.way_ids)
                relations.append(relation)
        logger.info(f"Found {len(relations)} relations referencing {len(way_ids)} ways")
        
        if not relations:
            return []
        
        # Pass 2: member ways
        self.stream.rewind()
        ways_by_id: Dict[int, Way] = {}
        node_ids: Set[int] = set()
        if way_ids:
            for way in self.stream.scan(
                way_filter=id_set_filter(EntityKind.WAY, way_ids),
                skip_nodes=True,
                skip_relations=True
            ):
                if isinstance(way, Way):
                    ways_by_id[way.id] = way
                    node_ids.update(way.node_ids)
        logger.info(f"Found {len(ways_by_id)} member ways referencing {len(node_ids)} nodes")
        
        # Pass 3: nodes
        nodes_by_id = self._scan_nodes(node_ids)
        
        return [
            ResolvedRelation(
                relation=relation,
                lines_by_role=assemble_role_groups(relation, ways_by_id, nodes_by_id)
            )
            for relation in relations
        ]
    
    def _scan_nodes(self, node_ids: Set[int]) -> Dict[int, Node]:
        """Build an ID -> node lookup for the given node IDs"""
        nodes_by_id: Dict[int, Node] = {}
        if not node_ids:
            return nodes_by_id
        
        self.stream.rewind()
        for node in self.stream.scan(
            node_filter=id_set_filter(EntityKind.NODE, node_ids),
            skip_ways=True,
            skip_relations=True
        ):
            if isinstance(node, Node):
                nodes_by_id[node.id] = node
        logger.debug(f"Resolved {len(nodes_by_id)} of {len(node_ids)} nodes")
        return nodes_by_id


def _check_kind(entity_filter: Optional[EntityFilter], kind: EntityKind) -> None:
    if entity_filter is not None and entity_filter.kind is not kind:
        raise TypeError(f"expected a {kind.value} filter, got a {entity_filter.kind.value} filter")
