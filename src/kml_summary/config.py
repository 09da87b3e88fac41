"""Server configuration loaded from environment variables.

``from_env()`` raises ``ConfigValidationError`` for out-of-range values so a
bad setting fails at startup rather than on the first request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


class ConfigValidationError(ValueError):
    """Raised when a configuration value is invalid.

    Attributes:
        key: The environment variable that failed validation.
        value: The invalid value.
    """

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Immutable server configuration.

    Attributes:
        upload_dir: Directory where uploaded files are stored and served from.
        host: Bind address for uvicorn.
        port: Bind port for uvicorn.
        cors_origins: Origins allowed to call the API.
        log_level: Root logging level name.
    """

    upload_dir: Path = Path("uploads")
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Load and validate configuration from ``KML_SUMMARY_*`` variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
        """
        port_raw = os.getenv("KML_SUMMARY_PORT", "5000")
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigValidationError("KML_SUMMARY_PORT", port_raw, "must be an integer") from None

        upload_dir = os.getenv("KML_SUMMARY_UPLOAD_DIR", "uploads")
        if not upload_dir.strip():
            raise ConfigValidationError("KML_SUMMARY_UPLOAD_DIR", upload_dir, "must not be empty")

        origins = tuple(
            o.strip() for o in os.getenv("KML_SUMMARY_CORS_ORIGINS", "*").split(",") if o.strip()
        )
        config = cls(
            upload_dir=Path(upload_dir),
            host=os.getenv("KML_SUMMARY_HOST", "0.0.0.0"),
            port=port,
            cors_origins=origins,
            log_level=os.getenv("KML_SUMMARY_LOG_LEVEL", "INFO").upper(),
        )
        _validate(config)
        return config


def _validate(config: ServerConfig) -> None:
    if not 1 <= config.port <= 65535:
        raise ConfigValidationError("KML_SUMMARY_PORT", config.port, "must be between 1 and 65535")

    if not config.cors_origins:
        raise ConfigValidationError("KML_SUMMARY_CORS_ORIGINS", config.cors_origins, "must not be empty")

    if config.log_level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
        raise ConfigValidationError(
            "KML_SUMMARY_LOG_LEVEL", config.log_level, "must be a standard logging level name"
        )
