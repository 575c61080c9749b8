"""Environment-driven settings shared by the client engine and the reference server."""
from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def api_base_url() -> str:
    return os.getenv("NOTEMANAGER_API_URL", DEFAULT_API_URL).rstrip("/")


def state_dir() -> Path:
    raw = os.getenv("NOTEMANAGER_STATE_DIR")
    if raw:
        return Path(raw)
    return Path.home() / ".notemanager"


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


def configure_logging(level: str | None = None) -> None:
    level = (level or os.getenv("NOTEMANAGER_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
