from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from boilweb.core.config import AssetSettings, Settings
from boilweb.main import create_app

FAVICON = b"\x00\x00\x01\x00\x01\x00fake-icon"

INDEX = """<!DOCTYPE html>
<html><body><h1>{{ title | default('home') }}</h1><p id="date">{{ DateStr }}</p></body></html>
"""


@pytest.fixture
def site_dir(tmp_path) -> Path:
    """Asset tree with templates and static files."""
    site = tmp_path / "site"
    templates = site / "templates"
    static = site / "static"
    templates.mkdir(parents=True)
    static.mkdir()

    (templates / "index.html").write_text(INDEX)
    (templates / "about.html").write_text("<p>about</p>")
    (static / "app.js").write_text("console.log('hello');")
    (static / "style.css").write_text("body { color: red; }")
    (static / "favicon.ico").write_bytes(FAVICON)
    (static / "my file.txt").write_text("spaced")

    nested = static / "s"
    nested.mkdir()
    (nested / "inner.txt").write_text("inner")
    return site


def make_settings(site_dir: Path, **values) -> Settings:
    return Settings(assets=AssetSettings(backend="directory", directory=site_dir), **values)


@pytest.fixture
def settings(site_dir) -> Settings:
    return make_settings(site_dir)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
