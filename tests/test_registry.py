"""Tests for the template registry."""

import os
import threading

import pytest

from boilweb.assets import DirectoryAssetSource
from boilweb.templating import (
    MissingTemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateRegistry,
)


def write_atomic(path, text: str) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(text)
    os.replace(tmp, path)


@pytest.fixture
def registry(site_dir) -> TemplateRegistry:
    return TemplateRegistry(DirectoryAssetSource(site_dir))


class TestLoad:
    def test_indexes_templates_by_base_name(self, registry) -> None:
        registry.load()
        assert registry.names() == ["about.html", "index.html"]
        assert registry.lookup("about.html").render() == "<p>about</p>"

    def test_lookup_before_load(self, registry) -> None:
        assert not registry.loaded
        assert registry.lookup("index.html") is None

    def test_lookup_unknown_name(self, registry) -> None:
        registry.load()
        assert registry.lookup("nope.html") is None
        with pytest.raises(TemplateNotFoundError):
            registry.require("nope.html")

    def test_autoescapes(self, registry, site_dir) -> None:
        (site_dir / "templates" / "about.html").write_text("{{ value }}")
        registry.load()
        assert registry.lookup("about.html").render(value="<b>") == "&lt;b&gt;"

    def test_pattern_without_matches(self, site_dir) -> None:
        registry = TemplateRegistry(DirectoryAssetSource(site_dir), pattern="templates/*.tmpl")
        with pytest.raises(TemplateLoadError, match="matches no files"):
            registry.load()

    def test_syntax_error_fails_whole_set(self, registry, site_dir) -> None:
        (site_dir / "templates" / "about.html").write_text("{% if %}")
        with pytest.raises(TemplateLoadError, match="about.html"):
            registry.load()
        assert not registry.loaded

    def test_missing_required_template(self, site_dir) -> None:
        (site_dir / "templates" / "index.html").unlink()
        registry = TemplateRegistry(DirectoryAssetSource(site_dir))
        with pytest.raises(MissingTemplateError) as excinfo:
            registry.load()
        assert excinfo.value.names == ["index.html"]


class TestReload:
    def test_valid_reload_replaces_content(self, registry, site_dir) -> None:
        registry.load()
        (site_dir / "templates" / "index.html").write_text("v2")
        registry.load()
        assert registry.lookup("index.html").render() == "v2"

    def test_invalid_reload_keeps_previous_set(self, registry, site_dir) -> None:
        first = registry.load()
        (site_dir / "templates" / "index.html").write_text("{% for %}")

        with pytest.raises(TemplateLoadError):
            registry.load()

        assert registry.snapshot is first
        assert '<p id="date">x</p>' in registry.lookup("index.html").render(DateStr="x")

    def test_reload_dropping_index_keeps_previous_set(self, registry, site_dir) -> None:
        first = registry.load()
        (site_dir / "templates" / "index.html").unlink()

        with pytest.raises(MissingTemplateError):
            registry.load()
        assert registry.snapshot is first

    def test_reload_if_dev_logs_and_swallows(self, registry, site_dir, caplog) -> None:
        first = registry.load()
        (site_dir / "templates" / "index.html").write_text("{% if %}")

        with caplog.at_level("ERROR", logger="boilweb.templating.registry"):
            assert registry.reload_if_dev() is False
        assert "error reloading templates" in caplog.text
        assert registry.snapshot is first

    def test_reload_if_dev_is_noop_in_prod(self, site_dir) -> None:
        registry = TemplateRegistry(DirectoryAssetSource(site_dir), prod=True)
        first = registry.load()
        (site_dir / "templates" / "index.html").write_text("v2")

        assert registry.reload_if_dev() is False
        assert registry.snapshot is first

    def test_reload_if_dev_in_dev(self, registry, site_dir) -> None:
        registry.load()
        (site_dir / "templates" / "index.html").write_text("v2")
        assert registry.reload_if_dev() is True
        assert registry.lookup("index.html").render() == "v2"


class TestConcurrency:
    def test_readers_never_see_partial_set(self, site_dir) -> None:
        templates = site_dir / "templates"
        write_atomic(templates / "index.html", "A")
        write_atomic(templates / "about.html", "A")
        registry = TemplateRegistry(DirectoryAssetSource(site_dir))
        registry.load()

        stop = threading.Event()
        errors: list[str] = []

        def writer() -> None:
            version = "B"
            while not stop.is_set():
                write_atomic(templates / "index.html", version)
                write_atomic(templates / "about.html", version)
                registry.load()
                version = "A" if version == "B" else "B"

        def reader() -> None:
            for _ in range(500):
                snapshot = registry.snapshot
                if snapshot is None or set(snapshot.names()) != {"about.html", "index.html"}:
                    errors.append("incomplete snapshot")
                    return
                if snapshot.get("index.html").render() not in ("A", "B"):
                    errors.append("unexpected content")
                    return

        writer_thread = threading.Thread(target=writer)
        readers = [threading.Thread(target=reader) for _ in range(4)]
        writer_thread.start()
        for thread in readers:
            thread.start()
        for thread in readers:
            thread.join()
        stop.set()
        writer_thread.join()

        assert errors == []
