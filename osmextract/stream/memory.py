"""
In-memory entity stream

Serves an ordered list of entities (nodes, then ways, then relations, as
in a snapshot file). Each scan hands out fresh copies so callers may
modify what they receive.
"""

import copy
from typing import Iterable, Iterator, List, Optional

from ..filters import EntityFilter
from ..models import Node, Way, Relation
from .base import EntityStream, Entity, accepts


class MemoryEntityStream(EntityStream):
    """Entity stream over a list of entities"""
    
    def __init__(self, entities: Iterable[Entity]):
        super().__init__()
        self.entities: List[Entity] = list(entities)
        self.passes = 0
    
    def _seek_start(self) -> None:
        pass
    
    def _scan(
        self,
        node_filter: Optional[EntityFilter],
        way_filter: Optional[EntityFilter],
        relation_filter: Optional[EntityFilter],
        skip_nodes: bool,
        skip_ways: bool,
        skip_relations: bool
    ) -> Iterator[Entity]:
        self.passes += 1
        for entity in self.entities:
            if isinstance(entity, Node):
                if skip_nodes or not accepts(node_filter, entity):
                    continue
            elif isinstance(entity, Way):
                if skip_ways or not accepts(way_filter, entity):
                    continue
            elif isinstance(entity, Relation):
                if skip_relations or not accepts(relation_filter, entity):
                    continue
            yield copy.deepcopy(entity)
