"""Walk a feature collection and summarize it per geometry type."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .aggregator import Aggregator
from .distance import path_length_km
from .errors import InvalidCollectionError
from .models import FeatureCollection, GeometryType

logger = logging.getLogger(__name__)


def summarize(
    collection: FeatureCollection | Mapping[str, Any] | Sequence[Any],
) -> tuple[dict[str, int], dict[str, float]]:
    """Count features per geometry type and total the length of line geometries.

    Args:
        collection: A ``FeatureCollection``, a GeoJSON-shaped mapping, or a plain
            sequence of features.

    Returns:
        ``(summary, details)``: feature count per type label, and cumulative
        great-circle length in km for ``LineString`` and ``MultiLineString``.
        Both keep first-seen type order.

    Raises:
        InvalidCollectionError: If ``collection`` is not a collection of features.
    """
    features = _coerce(collection).features
    aggregator = Aggregator()

    for index, feature in enumerate(features):
        geometry = feature.geometry
        if geometry is None or not isinstance(geometry.type, str) or not geometry.type:
            logger.debug("Feature %d has no geometry type, skipping", index)
            continue

        tag = geometry.type
        aggregator.count_type(tag)

        try:
            kind = GeometryType(tag)
        except ValueError:
            kind = None

        match kind:
            case GeometryType.LINE_STRING:
                aggregator.add_length(tag, _line_length(geometry.coordinates))
            case GeometryType.MULTI_LINE_STRING:
                coords = geometry.coordinates
                paths = coords if isinstance(coords, (list, tuple)) else []
                aggregator.add_length(tag, sum(_line_length(path) for path in paths))
            case (
                GeometryType.POINT
                | GeometryType.POLYGON
                | GeometryType.MULTI_POINT
                | GeometryType.MULTI_POLYGON
                | GeometryType.GEOMETRY_COLLECTION
            ):
                pass
            case _:
                logger.debug("Feature %d has unrecognised geometry type %r", index, tag)

    summary, details = aggregator.snapshot()
    logger.info("Summarized %d features into %d geometry types", len(features), len(summary))
    return summary, details


def _coerce(collection: Any) -> FeatureCollection:
    """Validate the input into a ``FeatureCollection``."""
    if isinstance(collection, FeatureCollection):
        return collection
    if isinstance(collection, Mapping):
        payload = collection
    elif isinstance(collection, Sequence) and not isinstance(collection, (str, bytes)):
        payload = {"features": list(collection)}
    else:
        raise InvalidCollectionError(
            f"Expected a feature collection, got {type(collection).__name__}"
        )

    try:
        return FeatureCollection.model_validate(payload)
    except ValidationError as exc:
        raise InvalidCollectionError(f"Invalid feature collection: {exc}") from exc


def _line_length(path: Any) -> float:
    """Length in km of one path; unusable positions are dropped first."""
    if not isinstance(path, (list, tuple)):
        return 0.0
    return path_length_km([pos for pos in path if _is_position(pos)])


def _is_position(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return False
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value[:2])
