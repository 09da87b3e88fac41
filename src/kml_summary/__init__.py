"""KML geometry summary library: per-type counts and great-circle path lengths."""

from .aggregator import Aggregator
from .distance import haversine_km, path_length_km
from .errors import InvalidCollectionError, KmlParseError
from .kml_reader import read_kml
from .models import Feature, FeatureCollection, Geometry, GeometryType, SummaryReport
from .report import build_report, report_to_csv
from .walker import summarize

__all__ = [
    "Aggregator",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "GeometryType",
    "InvalidCollectionError",
    "KmlParseError",
    "SummaryReport",
    "build_report",
    "haversine_km",
    "path_length_km",
    "read_kml",
    "report_to_csv",
    "summarize",
]
