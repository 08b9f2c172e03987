"""
OSM entity extractor

Pulls filtered nodes, ways or relations out of a local OSM snapshot and
rebuilds their geometries:
- Filters: ID lists and tag expressions compiled into predicates
- Stream: pyosmium-backed entity stream with rewind discipline
- Resolver: multi-pass node/way/relation join
- Assembly: role grouping and polygon building for relations
- Pipeline: end-to-end extraction to a GeoJSON FeatureCollection
"""

from .config import ExtractConfig, get_config, validate_config
from .filters import EntityFilter, build_filter
from .pipeline import ExtractPipeline
from .resolver import StreamResolver

__all__ = [
    "ExtractConfig",
    "get_config",
    "validate_config",
    "EntityFilter",
    "build_filter",
    "ExtractPipeline",
    "StreamResolver",
]
