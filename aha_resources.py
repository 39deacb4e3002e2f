"""Static corpus of American Heart Association resources.

The corpus lives in ``resources/aha-resources.json`` with the shape
``{"resources": [{"id": ..., "title": ..., ...}, ...]}``. It is validated and
normalized once at startup; the search code downstream assumes every record
is fully populated (``keywords`` is always a tuple, ``url`` is ``None`` or a
non-empty string).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from aha_logging import get_logger

logger = get_logger("resources")


class ResourceLoadError(ValueError):
    """Raised when the resource file cannot be turned into a valid corpus."""


class AhaResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: str
    content: str
    keywords: tuple[str, ...] = ()
    url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("keywords", mode="before")
    @classmethod
    def _default_keywords(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("url", mode="before")
    @classmethod
    def _blank_url(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def parse_resources(payload: Any) -> tuple[AhaResource, ...]:
    if not isinstance(payload, dict) or not isinstance(payload.get("resources"), list):
        raise ResourceLoadError("Expected a JSON object with a 'resources' array")

    resources: list[AhaResource] = []
    seen: set[str] = set()
    for index, raw in enumerate(payload["resources"]):
        try:
            resource = AhaResource.model_validate(raw)
        except ValidationError as exc:
            raise ResourceLoadError(f"Invalid resource at index {index}: {exc}") from exc
        if resource.id in seen:
            raise ResourceLoadError(f"Duplicate resource id: {resource.id!r}")
        seen.add(resource.id)
        resources.append(resource)
    return tuple(resources)


def load_resources(path: Path) -> tuple[AhaResource, ...]:
    """Load and validate the corpus file at ``path``."""
    if not path.exists():
        raise FileNotFoundError(f"Resource file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ResourceLoadError(f"Invalid JSON in {path}: {exc}") from exc

    resources = parse_resources(payload)
    logger.info("Loaded %d AHA resources from %s", len(resources), path)
    return resources
