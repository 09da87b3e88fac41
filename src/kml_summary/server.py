"""FastAPI server for KML uploads, summaries and map rendering."""

from __future__ import annotations

import io
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles

from .config import ServerConfig
from .errors import KmlParseError
from .kml_reader import read_kml
from .map_view import render_map_html
from .models import FeatureCollection, UploadResult
from .report import build_report, report_to_csv
from .walker import summarize

logger = logging.getLogger(__name__)

KML_EXTS = (".kml", ".kmz")


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build the API app, reading ``ServerConfig.from_env()`` when no config is given.

    The upload directory is created at startup, never at import.
    """
    config = config or ServerConfig.from_env()
    upload_dir = Path(config.upload_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Serving uploads from %s", upload_dir)
        yield

    app = FastAPI(title="KML Summary", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/upload", response_model=UploadResult)
    async def upload_file(file: UploadFile | None = File(None)):
        """Store an uploaded file under the upload directory."""
        if file is None:
            logger.warning("Upload request without a file")
            raise HTTPException(status_code=400, detail="No file uploaded")

        suffix = Path(file.filename or "").suffix
        upload_dir.mkdir(parents=True, exist_ok=True)
        target = upload_dir / f"file-{int(time.time() * 1000)}{suffix}"
        target.write_bytes(await file.read())
        logger.info("Stored upload %s as %s", file.filename, target)
        return UploadResult(filePath=str(target), message="File uploaded successfully")

    @app.post("/summarize")
    async def summarize_file(
        file: UploadFile,
        format: str = Query("json", pattern="^(csv|json)$"),
    ):
        """Convert an uploaded KML/KMZ and summarize its geometry.

        Returns the report together with the converted GeoJSON, or the report
        rows as a CSV download.
        """
        collection = await _read_upload(file)
        summary, details = summarize(collection)
        report = build_report(summary, details)

        if format == "csv":
            return StreamingResponse(
                report_to_csv(report),
                media_type="text/csv",
                headers={"Content-Disposition": "attachment; filename=kml_summary.csv"},
            )
        return {"report": report.model_dump(), "geojson": collection.model_dump(exclude_none=True)}

    @app.post("/map", response_class=HTMLResponse)
    async def map_file(file: UploadFile):
        """Render the raw geometry of an uploaded KML/KMZ as an HTML map."""
        collection = await _read_upload(file)
        return HTMLResponse(render_map_html(collection))

    app.mount("/uploads", StaticFiles(directory=upload_dir, check_dir=False), name="uploads")
    return app


async def _read_upload(upload: UploadFile) -> FeatureCollection:
    """Convert a KML or KMZ upload, mapping parse failures to HTTP 400."""
    filename = (upload.filename or "").lower()
    if not filename.endswith(KML_EXTS):
        raise HTTPException(status_code=400, detail="Expected a .kml or .kmz file")

    content = await upload.read()
    try:
        return read_kml(io.BytesIO(content))
    except KmlParseError as exc:
        logger.warning("Rejected upload %s: %s", upload.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

