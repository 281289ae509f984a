"""Tests for ResolveService — end-to-end request resolution."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from doclayer.config.settings import DoclayerSettings
from doclayer.services.resolve import ResolveService

pytestmark = pytest.mark.usefixtures("_isolated_cwd")


@pytest.fixture
def layered_conf(tmp_path: Path, docroot: Path, write_conf: Callable[..., Path]) -> Path:
    alt = tmp_path / "alt"
    (alt / "index.html").write_text("alt index")
    return write_conf(
        f'DocumentRoot "{docroot}"\n'
        "EnableDocumentRootLayers On\n"
        "DocumentRootLayers layered/xmas layered/promo\n"
        "\n"
        "<VirtualHost *:80>\n"
        "    ServerName www.example.com\n"
        "</VirtualHost>\n"
        "\n"
        "<VirtualHost *:80>\n"
        "    ServerName plain.example.com\n"
        "    EnableDocumentRootLayers Off\n"
        "    <Location /special>\n"
        "        EnableDocumentRootLayers On\n"
        f"        DocumentRootLayers {alt}\n"
        "    </Location>\n"
        "</VirtualHost>\n"
    )


def _service(tmp_path: Path, conf: Path | None) -> ResolveService:
    return ResolveService(DoclayerSettings.from_cli(project_root=tmp_path, conf_file=conf))


class TestResolve:
    def test_layer_overrides_document_root(
        self, tmp_path: Path, docroot: Path, layered_conf: Path
    ) -> None:
        result = _service(tmp_path, layered_conf).resolve("/banner.png", host="www.example.com")
        assert result.ok
        data = result.data
        assert data["filename"] == f"{docroot}/layered/promo/banner.png"
        assert data["source"] == "layer"
        assert data["layer"] == "layered/promo"
        assert data["exists"] is True
        assert data["kind"] == "file"
        assert data["size"] == len("promo banner")
        assert data["host"] == "www.example.com"
        assert data["scope"] == "<VirtualHost *:80> www.example.com"
        assert result.warnings == []

    def test_falls_back_to_document_root(
        self, tmp_path: Path, docroot: Path, layered_conf: Path
    ) -> None:
        result = _service(tmp_path, layered_conf).resolve("/index.html", host="www.example.com")
        assert result.data["filename"] == f"{docroot}/index.html"
        assert result.data["source"] == "document_root"
        assert result.data["layer"] is None

    def test_disabled_vhost_ignores_layers(
        self, tmp_path: Path, docroot: Path, layered_conf: Path
    ) -> None:
        result = _service(tmp_path, layered_conf).resolve("/banner.png", host="plain.example.com")
        assert result.data["enabled"] is False
        assert result.data["filename"] == f"{docroot}/banner.png"

    def test_location_enables_absolute_layer(
        self, tmp_path: Path, docroot: Path, layered_conf: Path
    ) -> None:
        (tmp_path / "alt" / "special").mkdir()
        (tmp_path / "alt" / "special" / "page.html").write_text("special")
        result = _service(tmp_path, layered_conf).resolve(
            "/special/page.html", host="plain.example.com"
        )
        assert result.data["filename"] == f"{tmp_path}/alt/special/page.html"
        assert result.data["locations"] == ["<Location /special>"]

    def test_missing_file_warns(self, tmp_path: Path, docroot: Path, layered_conf: Path) -> None:
        result = _service(tmp_path, layered_conf).resolve("/nothing.txt")
        assert result.ok
        assert result.data["exists"] is False
        assert result.data["filename"] == f"{docroot}/nothing.txt"
        assert "size" not in result.data
        assert result.warnings == ["No file for /nothing.txt: the server would answer 404"]

    def test_default_host_from_settings(
        self, tmp_path: Path, docroot: Path, layered_conf: Path
    ) -> None:
        (tmp_path / "doclayer.toml").write_text('[resolve]\ndefault_host = "plain.example.com"\n')
        result = _service(tmp_path, layered_conf).resolve("/banner.png")
        assert result.data["host"] == "plain.example.com"
        assert result.data["source"] == "document_root"

    def test_relative_uri_rejected(self, tmp_path: Path, layered_conf: Path) -> None:
        result = _service(tmp_path, layered_conf).resolve("banner.png")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_URI"

    def test_load_error(self, tmp_path: Path) -> None:
        result = _service(tmp_path, None).resolve("/banner.png")
        assert not result.ok
        assert result.op == "resolve"
        assert result.error is not None
        assert result.error.code == "NO_CONFIG"

    def test_relative_conf_path_resolves_absolute(self, tmp_path: Path) -> None:
        (tmp_path / "htdocs").mkdir()
        (tmp_path / "htdocs" / "a.html").write_text("a")
        (tmp_path / "httpd.conf").write_text("DocumentRoot htdocs\n")
        result = _service(tmp_path, Path("httpd.conf")).resolve("/a.html")
        assert result.ok
        assert result.data["filename"] == f"{tmp_path}/htdocs/a.html"
        assert result.data["exists"] is True
