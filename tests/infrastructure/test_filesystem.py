"""Tests for candidate joining and stat probing."""

from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from doclayer.infrastructure.filesystem import FileInfo, canonicalize, join_layer_path, probe


class TestJoinLayerPath:
    def test_absolute_layer(self) -> None:
        assert join_layer_path("/alt", "/srv/www", "/banner.png") == "/alt/banner.png"

    def test_relative_layer(self) -> None:
        assert join_layer_path("alt", "/srv/www", "/banner.png") == "/srv/www/alt/banner.png"

    def test_redundant_separators_collapse(self) -> None:
        assert join_layer_path("/alt//", "/srv/www/", "//img//a.png") == "/alt/img/a.png"

    def test_dot_segments_collapse(self) -> None:
        assert join_layer_path("./alt/./x/..", "/srv/www", "/a.png") == "/srv/www/alt/a.png"

    def test_request_path_not_sanitized_beyond_syntax(self) -> None:
        assert join_layer_path("alt", "/srv/www", "/../../etc/passwd") == "/srv/etc/passwd"

    def test_root_request(self) -> None:
        assert join_layer_path("/alt", "/srv/www", "/") == "/alt"


class TestCanonicalize:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/a//b", "/a/b"),
            ("//a/b", "/a/b"),
            ("/a/./b/", "/a/b"),
            ("/a/b/../c", "/a/c"),
        ],
    )
    def test_syntactic(self, raw: str, expected: str) -> None:
        assert canonicalize(raw) == expected

    def test_symlinks_not_resolved(self, tmp_path: Path) -> None:
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert canonicalize(f"{link}/x") == f"{link}/x"


class TestProbe:
    def test_existing_file(self, tmp_path: Path) -> None:
        f = tmp_path / "a.txt"
        f.write_text("hello")
        info = probe(str(f))
        assert isinstance(info, FileInfo)
        assert info.path == str(f)
        assert info.size == 5
        assert info.kind == "file"

    def test_directory(self, tmp_path: Path) -> None:
        info = probe(str(tmp_path))
        assert info is not None
        assert info.kind == "directory"

    def test_missing(self, tmp_path: Path) -> None:
        assert probe(str(tmp_path / "nope")) is None

    def test_not_a_directory(self, tmp_path: Path) -> None:
        f = tmp_path / "file"
        f.write_text("")
        assert probe(str(f / "child")) is None

    def test_embedded_nul(self) -> None:
        assert probe("/tmp/bad\x00name") is None

    @pytest.mark.parametrize("code", [errno.EACCES, errno.EIO, errno.ENAMETOOLONG])
    def test_os_errors_are_absent(self, monkeypatch: pytest.MonkeyPatch, code: int) -> None:
        def _fail(path: str, *args: object, **kwargs: object) -> os.stat_result:
            raise OSError(code, os.strerror(code), path)

        monkeypatch.setattr(os, "stat", _fail)
        assert probe("/srv/www/locked/file") is None

    def test_failure_logged_at_debug(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("DEBUG", logger="doclayer.infrastructure.filesystem"):
            probe(str(tmp_path / "nope"))
        assert all(r.levelname == "DEBUG" for r in caplog.records)
        assert any("nope" in r.getMessage() for r in caplog.records)
