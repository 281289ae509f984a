"""Locate ``doclayer.toml``.

The settings file is found by walking up from the working directory, the
way git finds ``.git/``. ``DOCLAYER_CONFIG`` names a file directly and
disables the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "doclayer.toml"
CONFIG_ENV_VAR = "DOCLAYER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``doclayer.toml`` at or above *start* (default: cwd).

    When ``DOCLAYER_CONFIG`` is set, its target is returned if it is a file
    and None otherwise.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
