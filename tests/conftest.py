from collections.abc import Iterator
from pathlib import Path

import pytest

from aha_config import DEFAULT_RESOURCES_PATH, Settings, get_settings
from aha_resources import AhaResource, load_resources


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session")
def bundled_resources() -> tuple[AhaResource, ...]:
    return load_resources(DEFAULT_RESOURCES_PATH)


@pytest.fixture
def heart_attack() -> AhaResource:
    return AhaResource(
        id="heart-attack",
        title="Heart Attack Symptoms",
        category="Symptoms",
        content="Chest pain, shortness of breath...",
        keywords=("chest pain", "heart attack"),
        url="https://www.heart.org/heart-attack",
    )


@pytest.fixture
def widget_path(tmp_path: Path) -> Path:
    path = tmp_path / "aha-widget.html"
    path.write_text("<div>American Heart Association</div>", encoding="utf-8")
    return path


@pytest.fixture
def settings(widget_path: Path) -> Settings:
    return Settings(
        host="127.0.0.1",
        port=8787,
        resources_path=DEFAULT_RESOURCES_PATH,
        widget_path=widget_path,
        max_results=3,
        json_response=True,
        log_level="INFO",
        log_file=None,
    )
