import pytest

from kml_summary.config import ServerConfig
from kml_summary.models import FeatureCollection

KML_MIXED = """\
<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark><name>A</name><Point><coordinates>1.0,2.0,100</coordinates></Point></Placemark>
    <Placemark><name>B</name><Point><coordinates>3.0,4.0</coordinates></Point></Placemark>
    <Placemark>
      <name>Equator</name>
      <LineString>
        <coordinates>0,0,0 1,0,0</coordinates>
      </LineString>
    </Placemark>
  </Document>
</kml>"""


@pytest.fixture
def mixed_collection():
    """Two points plus one degree of longitude along the equator."""
    return FeatureCollection.model_validate(
        {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [10, 10]}},
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [20, 20]}},
                {"type": "Feature", "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 0]]}},
            ],
        }
    )


@pytest.fixture
def mixed_kml():
    return KML_MIXED


@pytest.fixture
def server_config(tmp_path):
    return ServerConfig(upload_dir=tmp_path / "uploads")
