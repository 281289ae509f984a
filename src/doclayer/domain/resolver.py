"""Layer resolution — the per-request decision.

Given a request's effective configuration, walk the layers in declared
order and stop at the first one that holds the requested file. Earlier
layers win over later ones and over the document root.

INVARIANT: Resolution never raises on filesystem trouble. A layer that
cannot be statted is skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from doclayer.infrastructure.filesystem import FileInfo, join_layer_path, probe

if TYPE_CHECKING:
    from doclayer.domain.scope import EffectiveConfig

Prober = Callable[[str], "FileInfo | None"]


@dataclass(frozen=True)
class Override:
    """Serve *path* instead of the document-root mapping."""

    path: str
    info: FileInfo
    layer: str


@dataclass(frozen=True)
class NoOverride:
    """Leave the host's default mapping untouched."""


NO_OVERRIDE = NoOverride()

Resolution = Override | NoOverride


def resolve(
    cfg: EffectiveConfig,
    document_root: str,
    request_path: str,
    *,
    prober: Prober = probe,
) -> Resolution:
    """Decide whether a layer file should replace the document-root file."""
    if not cfg.enabled:
        return NO_OVERRIDE

    for layer in cfg.layers:
        candidate = join_layer_path(layer, document_root, request_path)
        info = prober(candidate)
        if info is not None:
            return Override(path=candidate, info=info, layer=layer)

    return NO_OVERRIDE
