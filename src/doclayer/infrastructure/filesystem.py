"""Filesystem primitives for layer lookup: candidate joining and stat probing.

INVARIANT: Stat-only. Nothing here opens, reads, or writes files.
Canonicalization is purely syntactic; symbolic links are never resolved.
"""

from __future__ import annotations

import logging
import os
import posixpath
import stat
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    """Stat result handed to the host so it can serve without re-statting."""

    path: str
    size: int
    mtime: float
    mode: int
    inode: int
    device: int

    @property
    def kind(self) -> str:
        """``file``, ``directory``, or ``other``."""
        if stat.S_ISREG(self.mode):
            return "file"
        if stat.S_ISDIR(self.mode):
            return "directory"
        return "other"

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> FileInfo:
        return cls(
            path=path,
            size=st.st_size,
            mtime=st.st_mtime,
            mode=st.st_mode,
            inode=st.st_ino,
            device=st.st_dev,
        )


# ---------------------------------------------------------------------------
# Path joining
# ---------------------------------------------------------------------------


def canonicalize(path: str) -> str:
    """Collapse duplicate separators and ``.``/``..`` segments."""
    result = posixpath.normpath(path)
    # POSIX normpath keeps exactly two leading slashes; httpd paths never mean that.
    if result.startswith("//"):
        result = "/" + result.lstrip("/")
    return result


def join_layer_path(layer_dir: str, document_root: str, request_path: str) -> str:
    """Build the candidate path for *request_path* inside *layer_dir*.

    - Absolute layer: ``{layer_dir}/{request_path}``
    - Relative layer: ``{document_root}/{layer_dir}/{request_path}``

    *request_path* is the URI path as the server decoded it. It is always
    appended as a sub-path even though it starts with ``/``.
    """
    base = layer_dir if posixpath.isabs(layer_dir) else f"{document_root}/{layer_dir}"
    return canonicalize(f"{base}/{request_path}")


# ---------------------------------------------------------------------------
# Existence probing
# ---------------------------------------------------------------------------


def probe(path: str) -> FileInfo | None:
    """Stat *path*, returning its metadata or None.

    Every failure mode (missing, permission denied, I/O error, bad name) is
    reported as None. A broken layer degrades to "skip this layer".
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError) as exc:
        logger.debug("Layer candidate unavailable: %s (%s)", path, exc)
        return None
    return FileInfo.from_stat(path, st)
