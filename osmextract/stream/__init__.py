"""
Entity streams

Sequential readers over the records of an OSM snapshot. Every scan starts
from the beginning of the input and must be preceded by rewind().
"""

from .base import EntityStream
from .memory import MemoryEntityStream
from .osmium_reader import OsmiumEntityStream

__all__ = [
    "EntityStream",
    "MemoryEntityStream",
    "OsmiumEntityStream",
]
