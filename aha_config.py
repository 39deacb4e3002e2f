"""Runtime settings for the AHA MCP server, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_RESOURCES_PATH = BASE_DIR / "resources" / "aha-resources.json"
DEFAULT_WIDGET_PATH = BASE_DIR / "public" / "aha-widget.html"


def _to_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None:
        return default
    return max(minimum, int(value))


def _to_path(value: str | None, *, default: Path) -> Path:
    if not value:
        return default
    path = Path(value)
    return path if path.is_absolute() else BASE_DIR / path


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    resources_path: Path
    widget_path: Path
    max_results: int
    json_response: bool
    log_level: str
    log_file: Path | None


@lru_cache
def get_settings() -> Settings:
    log_file = os.getenv("AHA_LOG_FILE")
    return Settings(
        host=os.getenv("AHA_HOST", "0.0.0.0"),
        port=_to_int(os.getenv("PORT"), default=8787, minimum=1),
        resources_path=_to_path(os.getenv("AHA_RESOURCES_PATH"), default=DEFAULT_RESOURCES_PATH),
        widget_path=_to_path(os.getenv("AHA_WIDGET_PATH"), default=DEFAULT_WIDGET_PATH),
        max_results=_to_int(os.getenv("AHA_MAX_RESULTS"), default=3, minimum=1),
        json_response=_to_bool(os.getenv("AHA_JSON_RESPONSE"), default=True),
        log_level=os.getenv("AHA_LOG_LEVEL", "INFO").strip().upper(),
        log_file=_to_path(log_file, default=BASE_DIR) if log_file else None,
    )
