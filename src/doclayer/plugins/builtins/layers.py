"""Built-in DocumentRootLayers module.

Hooks the translate phase. When layering is enabled for the request's
scope, it defers a map-to-storage handler that runs the layer resolver;
both steps decline so the host's own handling continues.

On a hit the deferred handler sets ``filename`` and ``finfo`` directly,
which stops the host from re-statting the document-root path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from doclayer.domain.resolver import Override, resolve
from doclayer.domain.types import Status

if TYPE_CHECKING:
    from doclayer.infrastructure.request import Request
    from doclayer.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("doclayer")

logger = logging.getLogger(__name__)

PLUGIN_NAME = "document_root_layers"


def map_layer(request: Request) -> Status:
    """Deferred map-to-storage handler: swap in the first layer hit."""
    outcome = resolve(request.config, request.document_root, request.uri)
    if isinstance(outcome, Override):
        request.filename = outcome.path
        request.finfo = outcome.info
        request.layer = outcome.layer
        logger.debug("Layer override %s -> %s", request.uri, outcome.path)
    return Status.DECLINED


class DocumentRootLayers:
    """Translate-phase hook that defers layer lookup to map-to-storage."""

    @hookimpl
    def translate_name(self, request: Request) -> Status | None:
        if not request.config.enabled:
            return None
        request.push_map_to_storage(map_layer)
        return None


def register(plugins: PluginManager) -> None:
    """Register the layer module once at startup. Idempotent."""
    if plugins.has_plugin(PLUGIN_NAME):
        return
    plugins.register_plugin(DocumentRootLayers(), name=PLUGIN_NAME)
