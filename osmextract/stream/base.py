"""
Entity stream base class
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Union

from ..errors import StreamError
from ..filters import EntityFilter
from ..models import Node, Way, Relation

Entity = Union[Node, Way, Relation]


class EntityStream(ABC):
    """
    Forward-only stream of decoded entities
    
    Subclasses implement _seek_start() and _scan(). The caller owns the
    rewind discipline: scan() refuses to run unless rewind() was called
    since the previous scan.
    """
    
    def __init__(self):
        self._at_start = False
        self._closed = False
    
    def rewind(self) -> None:
        """Position the stream at its first record"""
        if self._closed:
            raise StreamError("stream is closed")
        self._seek_start()
        self._at_start = True
    
    def scan(
        self,
        node_filter: Optional[EntityFilter] = None,
        way_filter: Optional[EntityFilter] = None,
        relation_filter: Optional[EntityFilter] = None,
        skip_nodes: bool = False,
        skip_ways: bool = False,
        skip_relations: bool = False
    ) -> Iterator[Entity]:
        """
        Iterate over matching entities in stream order
        
        Args:
            node_filter: Per-node predicate, None to accept all nodes
            way_filter: Per-way predicate, None to accept all ways
            relation_filter: Per-relation predicate, None to accept all relations
            skip_nodes: Do not emit nodes at all
            skip_ways: Do not emit ways at all
            skip_relations: Do not emit relations at all
        """
        if self._closed:
            raise StreamError("stream is closed")
        if not self._at_start:
            raise StreamError("stream must be rewound before scanning")
        self._at_start = False
        return self._scan(
            node_filter, way_filter, relation_filter,
            skip_nodes, skip_ways, skip_relations
        )
    
    def close(self) -> None:
        self._closed = True
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
    
    @abstractmethod
    def _seek_start(self) -> None:
        ...
    
    @abstractmethod
    def _scan(
        self,
        node_filter: Optional[EntityFilter],
        way_filter: Optional[EntityFilter],
        relation_filter: Optional[EntityFilter],
        skip_nodes: bool,
        skip_ways: bool,
        skip_relations: bool
    ) -> Iterator[Entity]:
        ...


def accepts(entity_filter: Optional[EntityFilter], entity: Entity) -> bool:
    return entity_filter is None or entity_filter(entity)
