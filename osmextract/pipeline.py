"""
Extraction pipeline

Runs one extraction end to end:

  1. Compile the ID/tag filter for the requested entity kind
  2. Open the snapshot and resolve matching entities
  3. Build geometries (lines, or polygons when polygonizing)
  4. Collect GeoJSON features and write them out
"""

import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Union
from loguru import logger

from .assembly.polygon_builder import PolygonBuilder, way_ring
from .config import ExtractConfig, get_config, validate_config
from .errors import GeometryAssemblyError
from .filters import EntityFilter, build_filter
from .geojson import (
    Feature, FeatureCollection, GeoJSONPoint, GeoJSONLineString,
    GeoJSONMultiLineString, GeoJSONPolygon, from_shapely
)
from .models import EntityKind, Node, ResolvedRelation, Way
from .resolver import StreamResolver
from .stream import EntityStream, OsmiumEntityStream


class ExtractPipeline:
    """
    Extract entities from an OSM snapshot into a FeatureCollection
    
    Usage:
        pipeline = ExtractPipeline()
        collection = pipeline.run("relation", "region.osm.pbf", ids="58446", polygonize=True)
        pipeline.save(collection, "relation.geojson")
    """
    
    def __init__(self, config: Optional[ExtractConfig] = None):
        self.config = config or get_config()
        validate_config(self.config)
        self.polygon_builder = PolygonBuilder(
            outer_role=self.config.outer_role,
            inner_role=self.config.inner_role
        )
    
    def run(
        self,
        kind: Union[str, EntityKind],
        input_path: Union[str, Path],
        ids: str = "",
        tags: str = "",
        polygonize: bool = False
    ) -> FeatureCollection:
        """
        Extract entities of one kind from an OSM file
        
        Args:
            kind: "node", "way" or "relation"
            input_path: Snapshot file (.osm.pbf)
            ids: Comma separated entity IDs
            tags: Comma separated tag expressions
            polygonize: Build polygons instead of lines for ways and relations
            
        Returns:
            FeatureCollection of the matching entities
        """
        if not isinstance(kind, EntityKind):
            kind = EntityKind.parse(kind)
        
        # Filter problems surface before the input is opened
        entity_filter = build_filter(kind, ids, tags)
        
        logger.info(f"Extracting {kind.value}s from {input_path}")
        with OsmiumEntityStream(input_path) as stream:
            return self.extract(stream, entity_filter, polygonize)
    
    def extract(
        self,
        stream: EntityStream,
        entity_filter: EntityFilter,
        polygonize: bool = False
    ) -> FeatureCollection:
        """Resolve entities matching entity_filter from an open stream"""
        resolver = StreamResolver(stream)
        collection = FeatureCollection()
        
        if entity_filter.kind is EntityKind.NODE:
            for node in resolver.find_nodes(entity_filter):
                collection.append(self._node_feature(node))
        
        elif entity_filter.kind is EntityKind.WAY:
            for way in resolver.find_ways(entity_filter):
                feature = self._way_feature(way, polygonize)
                if feature is not None:
                    collection.append(feature)
        
        else:
            for resolved in resolver.find_relations(entity_filter):
                if polygonize:
                    feature = self._relation_polygon_feature(resolved)
                    if feature is not None:
                        collection.append(feature)
                else:
                    for feature in self._relation_role_features(resolved):
                        collection.append(feature)
        
        logger.info(f"Extracted {len(collection.features)} features")
        return collection
    
    def save(
        self,
        collection: FeatureCollection,
        output_path: Optional[str] = None,
        compact: Optional[bool] = None
    ) -> Optional[str]:
        """
        Write a FeatureCollection as GeoJSON
        
        Writes to stdout when output_path is empty or "-".
        """
        if compact is None:
            compact = self.config.compact
        if compact:
            dump_kwargs = {"separators": (",", ":")}
        else:
            dump_kwargs = {"indent": self.config.indent}
        
        data = collection.model_dump()
        
        if not output_path or output_path == "-":
            json.dump(data, sys.stdout, ensure_ascii=False, **dump_kwargs)
            sys.stdout.write("\n")
            return None
        
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, **dump_kwargs)
            f.write("\n")
        
        logger.info(f"Saved {len(collection.features)} features to {output_path}")
        return output_path
    
    # ============================================================
    # Feature builders
    # ============================================================
    
    def _node_feature(self, node: Node) -> Feature:
        return Feature(
            id=node.id,
            geometry=GeoJSONPoint(coordinates=[node.lon, node.lat]),
            properties=dict(node.tags)
        )
    
    def _way_feature(self, way: Way, polygonize: bool) -> Optional[Feature]:
        if polygonize:
            try:
                ring = way_ring(way)
            except GeometryAssemblyError as e:
                logger.warning(f"way {e}: skipped")
                return None
            geometry = GeoJSONPolygon(coordinates=[_positions(ring)])
        else:
            geometry = GeoJSONLineString(coordinates=_positions(way.get_coordinates()))
        
        return Feature(id=way.id, geometry=geometry, properties=dict(way.tags))
    
    def _relation_polygon_feature(self, resolved: ResolvedRelation) -> Optional[Feature]:
        try:
            polygon = self.polygon_builder.build(resolved)
        except GeometryAssemblyError as e:
            logger.warning(f"relation {e}: skipped")
            return None
        
        return Feature(
            id=resolved.relation.id,
            geometry=from_shapely(polygon),
            properties=dict(resolved.relation.tags)
        )
    
    def _relation_role_features(self, resolved: ResolvedRelation) -> List[Feature]:
        relation = resolved.relation
        return [
            Feature(
                id=f"{relation.id}:{role}",
                geometry=GeoJSONMultiLineString(
                    coordinates=[_positions(line) for line in lines]
                ),
                properties=dict(relation.tags)
            )
            for role, lines in resolved.lines_by_role.items()
        ]


def _positions(coords) -> List[List[float]]:
    return [[lon, lat] for lon, lat in coords]
