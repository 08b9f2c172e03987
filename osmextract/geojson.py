"""
Pydantic models for GeoJSON output
"""

from typing import List, Dict, Any, Union, Literal
from pydantic import BaseModel, Field
from shapely.geometry import mapping


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lon, lat], ...]


class GeoJSONMultiLineString(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]], shell first


class GeoJSONMultiPolygon(BaseModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: List[List[List[List[float]]]]


Geometry = Union[
    GeoJSONPoint,
    GeoJSONLineString,
    GeoJSONMultiLineString,
    GeoJSONPolygon,
    GeoJSONMultiPolygon,
]


# ============================================================
# Features
# ============================================================

class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: Union[int, str]
    geometry: Geometry
    properties: Dict[str, Any] = Field(default_factory=dict)


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)
    
    def append(self, feature: Feature) -> None:
        self.features.append(feature)


def from_shapely(geometry) -> Geometry:
    """Convert a shapely Polygon or MultiPolygon to its GeoJSON model"""
    data = mapping(geometry)
    if data["type"] == "Polygon":
        return GeoJSONPolygon(coordinates=_as_lists(data["coordinates"]))
    if data["type"] == "MultiPolygon":
        return GeoJSONMultiPolygon(coordinates=_as_lists(data["coordinates"]))
    raise ValueError(f"Unsupported geometry type: {data['type']}")


def _as_lists(value):
    """mapping() returns nested tuples; output models want lists"""
    if isinstance(value, (list, tuple)):
        if value and isinstance(value[0], (int, float)):
            return list(value)
        return [_as_lists(v) for v in value]
    return value
