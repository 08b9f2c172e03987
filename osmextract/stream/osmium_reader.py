"""
pyosmium-backed entity stream

Reads .osm.pbf (or any format libosmium recognises from the file name).
Decoding runs in libosmium's worker pool; entities reach Python one at a
time and in file order.
"""

import functools
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

import osmium
from loguru import logger

from ..errors import StreamDecodeError
from ..filters import EntityFilter
from ..models import Node, NodeRef, Way, Member, Relation
from .base import EntityStream, Entity, accepts

MEMBER_TYPES = {"n": "node", "w": "way", "r": "relation"}


def set_decode_threads(workers: int) -> None:
    """
    Size libosmium's decode pool
    
    libosmium reads OSMIUM_POOL_THREADS once per process, when the first
    file is opened, so this only has an effect before any stream is read.
    """
    os.environ["OSMIUM_POOL_THREADS"] = str(workers)


class _CollectingHandler(osmium.SimpleHandler):
    """
    Converts matching osmium objects into extractor entities
    
    Records rejected by a filter's ID set are dropped before any entity is
    built. Callbacks are attached per scan by _handler_class(), so kinds
    that are skipped never reach Python.
    """
    
    def __init__(
        self,
        node_filter: Optional[EntityFilter],
        way_filter: Optional[EntityFilter],
        relation_filter: Optional[EntityFilter]
    ):
        super().__init__()
        self.node_filter = node_filter
        self.way_filter = way_filter
        self.relation_filter = relation_filter
        self.entities: List[Entity] = []
        self.scanned = 0
    
    def _node(self, n):
        self.scanned += 1
        if self.node_filter is not None and not self.node_filter.accepts_id(n.id):
            return
        node = Node(
            id=n.id,
            lat=n.location.lat,
            lon=n.location.lon,
            tags={tag.k: tag.v for tag in n.tags}
        )
        if accepts(self.node_filter, node):
            self.entities.append(node)
    
    def _way(self, w):
        self.scanned += 1
        if self.way_filter is not None and not self.way_filter.accepts_id(w.id):
            return
        way = Way(
            id=w.id,
            nodes=[NodeRef(nd.ref) for nd in w.nodes],
            tags={tag.k: tag.v for tag in w.tags}
        )
        if accepts(self.way_filter, way):
            self.entities.append(way)
    
    def _relation(self, r):
        self.scanned += 1
        if self.relation_filter is not None and not self.relation_filter.accepts_id(r.id):
            return
        relation = Relation(
            id=r.id,
            members=[
                Member(MEMBER_TYPES.get(m.type, m.type), m.ref, m.role)
                for m in r.members
            ],
            tags={tag.k: tag.v for tag in r.tags}
        )
        if accepts(self.relation_filter, relation):
            self.entities.append(relation)


@functools.lru_cache(maxsize=None)
def _handler_class(with_nodes: bool, with_ways: bool, with_relations: bool):
    callbacks = {}
    if with_nodes:
        callbacks["node"] = _CollectingHandler._node
    if with_ways:
        callbacks["way"] = _CollectingHandler._way
    if with_relations:
        callbacks["relation"] = _CollectingHandler._relation
    return type("ScanHandler", (_CollectingHandler,), callbacks)


class OsmiumEntityStream(EntityStream):
    """
    Entity stream over an OSM file
    
    rewind() opens a new osmium reader at the start of the file; the next
    scan consumes it and closes it. close() releases a reader that was
    opened but never scanned.
    """
    
    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        if not self.path.is_file():
            raise FileNotFoundError(f"{self.path}: no such file")
        self._reader = None
    
    def _seek_start(self) -> None:
        self._close_reader()
        if not self.path.is_file():
            raise FileNotFoundError(f"{self.path}: no such file")
        try:
            self._reader = osmium.io.Reader(str(self.path))
        except RuntimeError as e:
            raise StreamDecodeError(f"{self.path}: {e}") from e
    
    def _scan(
        self,
        node_filter: Optional[EntityFilter],
        way_filter: Optional[EntityFilter],
        relation_filter: Optional[EntityFilter],
        skip_nodes: bool,
        skip_ways: bool,
        skip_relations: bool
    ) -> Iterator[Entity]:
        if skip_nodes and skip_ways and skip_relations:
            self._close_reader()
            return iter([])
        
        handler_class = _handler_class(not skip_nodes, not skip_ways, not skip_relations)
        handler = handler_class(node_filter, way_filter, relation_filter)
        try:
            osmium.apply(self._reader, handler)
        except RuntimeError as e:
            raise StreamDecodeError(f"{self.path}: {e}") from e
        finally:
            self._close_reader()
        
        logger.debug(f"Scanned {handler.scanned:,} records in {self.path.name}, {len(handler.entities):,} matched")
        return iter(handler.entities)
    
    def _close_reader(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
    
    def close(self) -> None:
        self._close_reader()
        super().close()
