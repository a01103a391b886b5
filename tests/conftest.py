from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blog.config import SiteConfig, get_config
from blog.main import app


@pytest.fixture
def site_config(tmp_path: Path) -> SiteConfig:
    return SiteConfig(content_dir=tmp_path)


@pytest.fixture
def make_post(site_config: SiteConfig):
    def _make(name: str, text: str, section: str = "posts") -> Path:
        path = site_config.content_dir / section / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def client(site_config: SiteConfig):
    app.dependency_overrides[get_config] = lambda: site_config
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
