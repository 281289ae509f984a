"""Tests for the layer resolver."""

from __future__ import annotations

from pathlib import Path

import pytest

from doclayer.domain.resolver import NO_OVERRIDE, NoOverride, Override, resolve
from doclayer.domain.scope import EffectiveConfig
from doclayer.infrastructure.filesystem import FileInfo


def _info(path: str) -> FileInfo:
    return FileInfo(path=path, size=1, mtime=0.0, mode=0o100644, inode=1, device=1)


class _RecordingProber:
    """Answers from a fixed set of existing paths and records every call."""

    def __init__(self, existing: set[str], denied: set[str] | None = None) -> None:
        self.existing = existing
        self.denied = denied or set()
        self.calls: list[str] = []

    def __call__(self, path: str) -> FileInfo | None:
        self.calls.append(path)
        if any(path.startswith(d) for d in self.denied):
            return None
        return _info(path) if path in self.existing else None


class TestResolve:
    def test_first_layer_wins(self) -> None:
        prober = _RecordingProber({"/srv/www/A/x.html", "/srv/www/B/x.html"})
        cfg = EffectiveConfig(enabled=True, layers=("A", "B"))
        outcome = resolve(cfg, "/srv/www", "/x.html", prober=prober)
        assert isinstance(outcome, Override)
        assert outcome.path == "/srv/www/A/x.html"
        assert outcome.layer == "A"
        assert prober.calls == ["/srv/www/A/x.html"]

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_no_match_is_no_override(self, count: int) -> None:
        prober = _RecordingProber(set())
        cfg = EffectiveConfig(enabled=True, layers=tuple(f"l{i}" for i in range(count)))
        assert resolve(cfg, "/srv/www", "/x", prober=prober) is NO_OVERRIDE
        assert len(prober.calls) == count

    def test_disabled_short_circuits(self) -> None:
        prober = _RecordingProber({"/srv/www/A/x", "/srv/www/B/x"})
        cfg = EffectiveConfig(enabled=False, layers=("A", "B"))
        outcome = resolve(cfg, "/srv/www", "/x", prober=prober)
        assert isinstance(outcome, NoOverride)
        assert prober.calls == []

    def test_absolute_and_relative_layers(self) -> None:
        prober = _RecordingProber(set())
        cfg = EffectiveConfig(enabled=True, layers=("/alt", "alt"))
        resolve(cfg, "/srv/www", "/page.html", prober=prober)
        assert prober.calls == ["/alt/page.html", "/srv/www/alt/page.html"]

    def test_unreadable_layer_is_skipped(self) -> None:
        prober = _RecordingProber({"/srv/www/ok/x"}, denied={"/srv/www/locked"})
        cfg = EffectiveConfig(enabled=True, layers=("locked", "ok"))
        outcome = resolve(cfg, "/srv/www", "/x", prober=prober)
        assert isinstance(outcome, Override)
        assert outcome.path == "/srv/www/ok/x"

    def test_duplicate_layers_probe_twice(self) -> None:
        prober = _RecordingProber(set())
        cfg = EffectiveConfig(enabled=True, layers=("a", "a"))
        resolve(cfg, "/srv/www", "/x", prober=prober)
        assert prober.calls == ["/srv/www/a/x", "/srv/www/a/x"]


class TestResolveOnDisk:
    def test_seasonal_scenario(self, docroot: Path) -> None:
        cfg = EffectiveConfig(enabled=True, layers=("layered/xmas", "layered/promo"))
        outcome = resolve(cfg, str(docroot), "/banner.png")
        assert isinstance(outcome, Override)
        assert outcome.path == str(docroot / "layered" / "promo" / "banner.png")
        assert outcome.info.size == len("promo banner")
        assert outcome.info.kind == "file"

    def test_earlier_layer_shadows_later(self, docroot: Path) -> None:
        (docroot / "layered" / "xmas" / "banner.png").write_text("xmas")
        cfg = EffectiveConfig(enabled=True, layers=("layered/xmas", "layered/promo"))
        outcome = resolve(cfg, str(docroot), "/banner.png")
        assert isinstance(outcome, Override)
        assert outcome.layer == "layered/xmas"

    def test_document_root_only_file(self, docroot: Path) -> None:
        cfg = EffectiveConfig(enabled=True, layers=("layered/xmas", "layered/promo"))
        assert resolve(cfg, str(docroot), "/index.html") is NO_OVERRIDE

    def test_absolute_layer_outside_root(self, docroot: Path) -> None:
        alt = docroot.parent / "alt"
        (alt / "index.html").write_text("alt index")
        cfg = EffectiveConfig(enabled=True, layers=(str(alt),))
        outcome = resolve(cfg, str(docroot), "/index.html")
        assert isinstance(outcome, Override)
        assert outcome.path == str(alt / "index.html")

    def test_missing_layer_directory(self, docroot: Path) -> None:
        cfg = EffectiveConfig(enabled=True, layers=("does/not/exist", "layered/promo"))
        outcome = resolve(cfg, str(docroot), "/banner.png")
        assert isinstance(outcome, Override)
        assert outcome.layer == "layered/promo"
