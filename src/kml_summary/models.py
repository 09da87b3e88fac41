"""Pydantic data models for KML geometry summaries."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class GeometryType(str, Enum):
    """The standard vector-geometry type labels."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"


class Geometry(BaseModel):
    """A single geometry in GeoJSON shape.

    ``coordinates`` nesting depends on ``type``: a position for Point, a list of
    positions for LineString/MultiPoint, a list of rings or paths for
    Polygon/MultiLineString, and so on. Payloads are not checked against the
    type; the summarizer treats anything unusable as zero length. Members of a
    GeometryCollection are kept as given and never validated.
    """

    model_config = ConfigDict(extra="allow")

    type: Any = None
    coordinates: Any = None
    geometries: Any = None


class Feature(BaseModel):
    """One geographic entity: a geometry plus opaque properties."""

    type: Literal["Feature"] = "Feature"
    geometry: Geometry | None = None
    properties: Any = None


class FeatureCollection(BaseModel):
    """Ordered sequence of features produced from one uploaded file."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature]


class TypeCount(BaseModel):
    """Number of features of one geometry type."""

    type: str
    count: int


class TypeLength(BaseModel):
    """Cumulative path length for one line-bearing geometry type."""

    type: str
    length_km: float


class SummaryReport(BaseModel):
    """Display-ready summary of a feature collection."""

    total_features: int
    summary: list[TypeCount]
    details: list[TypeLength]


class UploadResult(BaseModel):
    """Response body of a stored upload."""

    filePath: str
    message: str
