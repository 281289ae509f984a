"""Host request pipeline — translate, then map-to-storage.

A minimal stand-in for an httpd request cycle, enough to drive the layer
module exactly as a server would:

1. **translate**: plugin hooks run until one returns ``Status.OK``. If all
   decline, the host maps ``filename = document_root + uri``.
2. **map-to-storage**: handlers deferred onto the request run first, then
   plugin hooks. If ``finfo`` is still unset afterwards, the host stats
   ``filename`` itself.

The pipeline holds only frozen state (layout, plugin registry) and may be
shared across threads; each :meth:`run` builds its own :class:`Request`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from doclayer.domain.types import Status
from doclayer.infrastructure.filesystem import canonicalize, probe
from doclayer.infrastructure.request import Request
from doclayer.plugins.manager import PluginManager

if TYPE_CHECKING:
    from doclayer.config.loader import ServerLayout

logger = logging.getLogger(__name__)


class RequestPipeline:
    """Runs requests against a loaded :class:`ServerLayout`."""

    def __init__(self, layout: ServerLayout, plugins: PluginManager | None = None) -> None:
        self.layout = layout
        self.plugins = plugins or PluginManager()

    def run(self, uri: str, *, host: str | None = None) -> Request:
        """Push one request through both phases and return it."""
        scope = self.layout.select(host, uri)
        request = Request(uri, scope, host=host)
        self._translate(request)
        self._map_to_storage(request)
        return request

    def _translate(self, request: Request) -> None:
        result = self.plugins.hook.translate_name(request=request)
        if result is Status.OK:
            return
        request.filename = canonicalize(f"{request.document_root}/{request.uri}")

    def _map_to_storage(self, request: Request) -> None:
        for handler in request.map_to_storage_handlers:
            if handler(request) is Status.OK:
                return
        result = self.plugins.hook.map_to_storage(request=request)
        if result is Status.OK:
            return
        if request.finfo is None and request.filename is not None:
            request.finfo = probe(request.filename)


def build_pipeline(layout: ServerLayout, *, discover: bool = False) -> RequestPipeline:
    """Create a pipeline with the layer module registered.

    Args:
        layout: Loaded server layout.
        discover: Also load third-party plugins from entry points.
    """
    from doclayer.plugins.builtins import layers

    plugins = PluginManager()
    if discover:
        plugins.discover_and_load()
    layers.register(plugins)
    logger.debug("Pipeline plugins: %s", ", ".join(plugins.plugin_names()))
    return RequestPipeline(layout, plugins)
