"""Scope kinds, phase statuses, and the directive names this module owns."""

from __future__ import annotations

from enum import StrEnum


class ScopeKind(StrEnum):
    """Configuration contexts that can carry their own directive values."""

    SERVER = "server"
    VIRTUAL_HOST = "virtual_host"
    LOCATION = "location"


class Status(StrEnum):
    """Return codes for request-pipeline phase handlers."""

    OK = "ok"
    DECLINED = "declined"


class Source(StrEnum):
    """Where a request's final filename came from."""

    LAYER = "layer"
    DOCUMENT_ROOT = "document_root"


ENABLE_DIRECTIVE = "EnableDocumentRootLayers"
LAYERS_DIRECTIVE = "DocumentRootLayers"

ENABLE_USAGE = "EnableDocumentRootLayers On|Off"
LAYERS_USAGE = "DocumentRootLayers DirPath1 [DirPath2 ... [DirPathN]]"
