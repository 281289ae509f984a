"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, doclayer.toml only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel

from doclayer.config.loader import DEFAULT_DOCUMENT_ROOT


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    conf_file: str | None = None
    server_root: str | None = None
    default_document_root: str = DEFAULT_DOCUMENT_ROOT


class ResolveConfig(BaseModel):
    """[resolve] section."""

    model_config = {"frozen": True}

    default_host: str | None = None
    warn_missing_layers: bool = True
