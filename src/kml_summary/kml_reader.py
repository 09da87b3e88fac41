"""KMZ/KML reader: converts KML placemarks into a GeoJSON-shaped FeatureCollection.

KMZ is a ZIP archive containing KML. KML coordinates are always WGS84 (EPSG:4326)
in ``longitude,latitude[,altitude]`` format.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from .errors import KmlParseError
from .models import Feature, FeatureCollection, Geometry

logger = logging.getLogger(__name__)

GEOMETRY_TAGS = {"Point", "LineString", "LinearRing", "Polygon", "MultiGeometry", "Track", "MultiTrack"}

_MULTI_TYPES = {"Point": "MultiPoint", "LineString": "MultiLineString", "Polygon": "MultiPolygon"}


def read_kml(file: str | Path | bytes | BinaryIO) -> FeatureCollection:
    """Read a KMZ (or plain KML) file and return its placemarks as features.

    Args:
        file: Path to a .kmz/.kml file, raw bytes, or a file-like object
            containing KMZ/KML bytes.

    Raises:
        KmlParseError: If the XML is malformed or a KMZ holds no ``.kml`` entry.
    """
    data = _read_bytes(file)

    # KMZ is a ZIP; plain KML is XML text
    kml_bytes = _extract_kml_from_kmz(data) if _is_zip(data) else data

    try:
        root = ET.fromstring(kml_bytes)
    except ET.ParseError as exc:
        raise KmlParseError(f"Invalid KML document: {exc}") from exc

    features = []
    for placemark in (e for e in root.iter() if _local(e.tag) == "Placemark"):
        feature = _placemark_to_feature(placemark)
        if feature is None:
            logger.debug("Skipping placemark without geometry")
            continue
        features.append(feature)
    logger.info("Converted %d placemarks from KML", len(features))
    return FeatureCollection(features=features)


def _read_bytes(file: str | Path | bytes | BinaryIO) -> bytes:
    if isinstance(file, bytes):
        return file
    if isinstance(file, (str, Path)):
        with open(file, "rb") as f:
            return f.read()
    return file.read()


def _is_zip(data: bytes) -> bool:
    return data[:4] == b"PK\x03\x04"


def _extract_kml_from_kmz(data: bytes) -> bytes:
    """Extract the first .kml file from a KMZ (ZIP) archive."""
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise KmlParseError(f"Invalid KMZ archive: {exc}") from exc

    with zf:
        # Prefer doc.kml, fall back to any .kml
        names = zf.namelist()
        kml_name = next((n for n in names if n.lower() == "doc.kml"), None)
        if kml_name is None:
            kml_name = next((n for n in names if n.lower().endswith(".kml")), None)
        if kml_name is None:
            raise KmlParseError("No .kml file found in KMZ archive")
        return zf.read(kml_name)


def _local(tag: Any) -> str:
    """Strip the XML namespace from a tag (KML 2.1, 2.2 and gx: share local names)."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(elem: ET.Element, name: str) -> ET.Element | None:
    return next((c for c in elem if _local(c.tag) == name), None)


def _children(elem: ET.Element, name: str) -> list[ET.Element]:
    return [c for c in elem if _local(c.tag) == name]


def _placemark_to_feature(placemark: ET.Element) -> Feature | None:
    geometry_elem = next((c for c in placemark if _local(c.tag) in GEOMETRY_TAGS), None)
    geometry = _parse_geometry(geometry_elem) if geometry_elem is not None else None
    if geometry is None:
        return None
    return Feature(
        geometry=Geometry.model_validate(geometry),
        properties=_properties(placemark),
    )


def _properties(placemark: ET.Element) -> dict[str, Any]:
    """Collect name, description and ExtendedData values of a placemark."""
    props: dict[str, Any] = {}
    for key in ("name", "description"):
        elem = _child(placemark, key)
        if elem is not None and elem.text:
            props[key] = elem.text.strip()

    extended = _child(placemark, "ExtendedData")
    if extended is not None:
        for data in _children(extended, "Data"):
            value = _child(data, "value")
            if data.get("name") and value is not None:
                props[data.get("name")] = (value.text or "").strip()
        for schema_data in _children(extended, "SchemaData"):
            for simple in _children(schema_data, "SimpleData"):
                if simple.get("name"):
                    props[simple.get("name")] = (simple.text or "").strip()
    return props


def _parse_geometry(elem: ET.Element) -> dict[str, Any] | None:
    """Convert one KML geometry element into a GeoJSON geometry dict."""
    tag = _local(elem.tag)

    if tag == "Point":
        positions = _coordinates_of(elem)
        return {"type": "Point", "coordinates": positions[0] if positions else []}

    if tag in ("LineString", "LinearRing"):
        return {"type": "LineString", "coordinates": _coordinates_of(elem)}

    if tag == "Polygon":
        rings = []
        for boundary in ("outerBoundaryIs", "innerBoundaryIs"):
            for b in _children(elem, boundary):
                for ring in _children(b, "LinearRing"):
                    rings.append(_coordinates_of(ring))
        return {"type": "Polygon", "coordinates": rings}

    if tag == "Track":
        return {"type": "LineString", "coordinates": _track_positions(elem)}

    if tag == "MultiTrack":
        paths = [_track_positions(t) for t in _children(elem, "Track")]
        return {"type": "MultiLineString", "coordinates": paths}

    if tag == "MultiGeometry":
        parts = [_parse_geometry(c) for c in elem if _local(c.tag) in GEOMETRY_TAGS]
        return _combine([p for p in parts if p is not None])

    return None


def _combine(parts: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Merge MultiGeometry children into one geometry."""
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]

    kinds = {p["type"] for p in parts}
    if len(kinds) == 1 and (kind := kinds.pop()) in _MULTI_TYPES:
        return {"type": _MULTI_TYPES[kind], "coordinates": [p["coordinates"] for p in parts]}
    return {"type": "GeometryCollection", "geometries": parts}


def _coordinates_of(elem: ET.Element) -> list[list[float]]:
    coords_elem = _child(elem, "coordinates")
    if coords_elem is None or not coords_elem.text:
        return []
    return _parse_coordinates_text(coords_elem.text)


def _parse_coordinates_text(text: str) -> list[list[float]]:
    """Parse a KML ``<coordinates>`` text block.

    Format: ``lon,lat[,alt] lon,lat[,alt] ...`` (whitespace-separated tuples).
    """
    positions: list[list[float]] = []
    for token in text.strip().split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        try:
            positions.append([float(p) for p in parts[:3] if p != ""])
        except ValueError:
            logger.debug("Skipping unparseable coordinate %r", token)
    return [p for p in positions if len(p) >= 2]


def _track_positions(track: ET.Element) -> list[list[float]]:
    """Positions of a ``gx:Track``, whose ``gx:coord`` values are space-separated."""
    positions: list[list[float]] = []
    for coord in _children(track, "coord"):
        try:
            values = [float(v) for v in (coord.text or "").split()]
        except ValueError:
            logger.debug("Skipping unparseable track coordinate %r", coord.text)
            continue
        if len(values) >= 2:
            positions.append(values[:3])
    return positions
