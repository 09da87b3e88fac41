"""Tests for the FastAPI server endpoints."""

import io
import zipfile
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from kml_summary.server import create_app


@pytest.fixture
def client(server_config):
    transport = ASGITransport(app=create_app(server_config))
    return AsyncClient(transport=transport, base_url="http://test")


def _kml_file(kml: str, name: str = "route.kml") -> list:
    return [("file", (name, kml.encode(), "application/vnd.google-earth.kml+xml"))]


@pytest.mark.asyncio
class TestUpload:
    async def test_upload_stores_file(self, client, server_config, mixed_kml):
        resp = await client.post("/upload", files=_kml_file(mixed_kml))
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "File uploaded successfully"
        stored = Path(data["filePath"])
        assert stored.parent == server_config.upload_dir
        assert stored.name.startswith("file-")
        assert stored.suffix == ".kml"
        assert stored.read_text() == mixed_kml

    async def test_upload_without_file_returns_400(self, client):
        resp = await client.post("/upload")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No file uploaded"

    async def test_uploaded_file_is_served(self, client, mixed_kml):
        resp = await client.post("/upload", files=_kml_file(mixed_kml))
        name = Path(resp.json()["filePath"]).name
        served = await client.get(f"/uploads/{name}")
        assert served.status_code == 200
        assert served.text == mixed_kml


@pytest.mark.asyncio
class TestSummarize:
    async def test_json(self, client, mixed_kml):
        resp = await client.post("/summarize", files=_kml_file(mixed_kml))
        assert resp.status_code == 200
        data = resp.json()
        report = data["report"]
        assert report["total_features"] == 3
        assert report["summary"] == [{"type": "Point", "count": 2}, {"type": "LineString", "count": 1}]
        assert report["details"][0]["type"] == "LineString"
        assert report["details"][0]["length_km"] == pytest.approx(111.19, abs=0.5)
        assert data["geojson"]["type"] == "FeatureCollection"
        assert len(data["geojson"]["features"]) == 3

    async def test_geojson_has_no_null_members(self, client, mixed_kml):
        resp = await client.post("/summarize", files=_kml_file(mixed_kml))
        for feat in resp.json()["geojson"]["features"]:
            assert "geometries" not in feat["geometry"]
            assert None not in feat["geometry"].values()

    async def test_total_matches_returned_features(self, client):
        kml = """\
<kml xmlns="http://www.opengis.net/kml/2.2"><Document>
  <Placemark><name>Empty</name></Placemark>
  <Placemark><Point><coordinates>0,0</coordinates></Point></Placemark>
</Document></kml>"""
        resp = await client.post("/summarize", files=_kml_file(kml))
        data = resp.json()
        assert data["report"]["total_features"] == len(data["geojson"]["features"]) == 1

    async def test_csv(self, client, mixed_kml):
        resp = await client.post("/summarize?format=csv", files=_kml_file(mixed_kml))
        assert resp.status_code == 200
        assert "text/csv" in resp.headers["content-type"]
        lines = resp.text.strip().splitlines()
        assert lines[0] == "section,type,value"
        assert "summary,Point,2" in lines
        assert "details,LineString,111.19" in lines

    async def test_kmz(self, client, mixed_kml):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("doc.kml", mixed_kml)
        files = [("file", ("route.kmz", buf.getvalue(), "application/vnd.google-earth.kmz"))]
        resp = await client.post("/summarize", files=files)
        assert resp.status_code == 200
        assert resp.json()["report"]["total_features"] == 3

    async def test_empty_document(self, client):
        kml = '<kml xmlns="http://www.opengis.net/kml/2.2"><Document/></kml>'
        resp = await client.post("/summarize", files=_kml_file(kml))
        assert resp.status_code == 200
        assert resp.json()["report"] == {"total_features": 0, "summary": [], "details": []}

    async def test_malformed_kml_returns_400(self, client):
        resp = await client.post("/summarize", files=_kml_file("<kml><Document>"))
        assert resp.status_code == 400

    async def test_wrong_extension_returns_400(self, client, mixed_kml):
        resp = await client.post("/summarize", files=_kml_file(mixed_kml, name="route.txt"))
        assert resp.status_code == 400

    async def test_bad_format_rejected(self, client, mixed_kml):
        resp = await client.post("/summarize?format=xml", files=_kml_file(mixed_kml))
        assert resp.status_code == 422


@pytest.mark.asyncio
class TestMap:
    async def test_renders_html(self, client, mixed_kml):
        resp = await client.post("/map", files=_kml_file(mixed_kml))
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "leaflet" in resp.text.lower()
        assert "geo_json" in resp.text


class TestAppFactory:
    def test_building_app_does_not_create_upload_dir(self, server_config):
        create_app(server_config)
        assert not server_config.upload_dir.exists()

    def test_module_has_no_prebuilt_app(self):
        from kml_summary import server

        assert not hasattr(server, "app")

    def test_config_read_from_env_when_missing(self, monkeypatch, tmp_path):
        monkeypatch.setenv("KML_SUMMARY_UPLOAD_DIR", str(tmp_path / "env_uploads"))
        app = create_app()
        assert app.title == "KML Summary"
        assert not (tmp_path / "env_uploads").exists()


@pytest.mark.asyncio
class TestUploadDir:
    async def test_first_upload_creates_dir(self, client, server_config, mixed_kml):
        assert not server_config.upload_dir.exists()
        resp = await client.post("/upload", files=_kml_file(mixed_kml))
        assert resp.status_code == 200
        assert server_config.upload_dir.is_dir()

    async def test_startup_creates_dir(self, server_config):
        app = create_app(server_config)
        async with app.router.lifespan_context(app):
            assert server_config.upload_dir.is_dir()
