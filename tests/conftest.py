"""Shared pytest fixtures for doclayer tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """Document root with the seasonal layer layout used across tests.

    ``www/`` holds the base content; ``www/layered/xmas`` and
    ``www/layered/promo`` are relative layers; ``alt/`` is an absolute layer
    outside the document root.
    """
    root = tmp_path / "www"
    (root / "layered" / "xmas").mkdir(parents=True)
    (root / "layered" / "promo").mkdir(parents=True)
    (tmp_path / "alt").mkdir()
    (root / "index.html").write_text("base index")
    (root / "banner.png").write_text("base banner")
    (root / "layered" / "promo" / "banner.png").write_text("promo banner")
    return root


@pytest.fixture
def write_conf(tmp_path: Path) -> Callable[[str], Path]:
    """Write httpd configuration text to ``tmp_path/httpd.conf``."""

    def _write(text: str, name: str = "httpd.conf") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from a temp directory with no doclayer.toml above it."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DOCLAYER_CONFIG", raising=False)
    monkeypatch.delenv("DOCLAYER_CONF_FILE", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo CLI logging setup so handlers never outlive a CliRunner stream."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("doclayer")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)
