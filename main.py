"""Launch the KML summary FastAPI server."""

import logging

import uvicorn

from kml_summary.config import ServerConfig


def main():
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "kml_summary.server:create_app", factory=True, host=config.host, port=config.port, reload=True
    )


if __name__ == "__main__":
    main()
