"""Per-request state shared between pipeline phases.

A :class:`Request` lives for exactly one pipeline run. It is the only
mutable object the layer module touches at request time, and it is never
shared between requests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from doclayer.domain.types import Source, Status

if TYPE_CHECKING:
    from doclayer.config.loader import RequestScope
    from doclayer.domain.scope import EffectiveConfig
    from doclayer.infrastructure.filesystem import FileInfo

MapHandler = Callable[["Request"], Status]


class Request:
    """A request travelling through the translate and map-to-storage phases.

    Attributes:
        uri: Decoded URI path, e.g. ``/banner.png``.
        host: ``Host`` header value, if any.
        scope: Effective configuration and document root for this request.
        filename: Filesystem path the request maps to (set during the phases).
        finfo: Stat result for *filename*, once known.
        layer: The layer directory that supplied *filename*, if one did.
    """

    def __init__(self, uri: str, scope: RequestScope, *, host: str | None = None) -> None:
        self.uri = uri
        self.host = host
        self.scope = scope
        self.filename: str | None = None
        self.finfo: FileInfo | None = None
        self.layer: str | None = None
        self._map_handlers: list[MapHandler] = []

    @property
    def document_root(self) -> str:
        return self.scope.document_root

    @property
    def config(self) -> EffectiveConfig:
        return self.scope.config

    @property
    def source(self) -> Source:
        return Source.LAYER if self.layer is not None else Source.DOCUMENT_ROOT

    def push_map_to_storage(self, handler: MapHandler) -> None:
        """Defer *handler* to this request's map-to-storage phase."""
        self._map_handlers.append(handler)

    @property
    def map_to_storage_handlers(self) -> tuple[MapHandler, ...]:
        return tuple(self._map_handlers)

    def __repr__(self) -> str:
        return f"Request(uri={self.uri!r}, host={self.host!r}, filename={self.filename!r})"
