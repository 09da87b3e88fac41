"""Map rendering of a feature collection on OpenStreetMap tiles."""

from __future__ import annotations

import folium

from .models import FeatureCollection

DEFAULT_CENTER = (20.0, 78.0)
DEFAULT_ZOOM = 5


def render_map(
    collection: FeatureCollection,
    center: tuple[float, float] = DEFAULT_CENTER,
    zoom: int = DEFAULT_ZOOM,
) -> folium.Map:
    """Build a Leaflet map with every drawable feature as one GeoJSON layer."""
    fmap = folium.Map(location=list(center), zoom_start=zoom, tiles="OpenStreetMap")

    # Leaflet rejects features without geometry
    features = [
        f.model_dump(exclude_none=True)
        for f in collection.features
        if f.geometry is not None and isinstance(f.geometry.type, str) and f.geometry.type
    ]
    if features:
        folium.GeoJson(
            {"type": "FeatureCollection", "features": features},
            name="Uploaded geometry",
        ).add_to(fmap)
    return fmap


def render_map_html(
    collection: FeatureCollection,
    center: tuple[float, float] = DEFAULT_CENTER,
    zoom: int = DEFAULT_ZOOM,
) -> str:
    """Render the map to a standalone HTML document."""
    return render_map(collection, center=center, zoom=zoom).get_root().render()
