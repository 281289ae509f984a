"""Per-scope layer configuration and the scope merge rules.

Two distinct accumulation rules apply:
- Within one scope, repeated ``DocumentRootLayers`` occurrences append.
- Across scopes, a descendant that declares any layers replaces the
  ancestor's list wholesale. Nothing is concatenated across scopes.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel


class ScopeConfig(BaseModel):
    """Directive values declared locally in one scope.

    ``enabled`` is None when ``EnableDocumentRootLayers`` never appeared in
    the scope; an empty ``layers`` tuple means ``DocumentRootLayers`` never
    appeared.
    """

    model_config = {"frozen": True}

    enabled: bool | None = None
    layers: tuple[str, ...] = ()

    def with_enabled(self, enabled: bool) -> ScopeConfig:
        """Return a copy with ``enabled`` set (last occurrence wins)."""
        return self.model_copy(update={"enabled": enabled})

    def with_layers(self, *layers: str) -> ScopeConfig:
        """Return a copy with *layers* appended in declaration order."""
        return self.model_copy(update={"layers": (*self.layers, *layers)})


class EffectiveConfig(BaseModel):
    """Layer configuration actually applicable to a request scope."""

    model_config = {"frozen": True}

    enabled: bool = False
    layers: tuple[str, ...] = ()


DEFAULT_CONFIG = EffectiveConfig()


def merge_config(parent: EffectiveConfig, child: ScopeConfig) -> EffectiveConfig:
    """Overlay *child*'s declared fields onto *parent*.

    Shallow field-level override: a declared ``enabled`` wins, and a
    non-empty ``layers`` tuple replaces the parent's list entirely.
    """
    return EffectiveConfig(
        enabled=parent.enabled if child.enabled is None else child.enabled,
        layers=child.layers if child.layers else parent.layers,
    )


def merge_chain(
    scopes: Iterable[ScopeConfig],
    base: EffectiveConfig = DEFAULT_CONFIG,
) -> EffectiveConfig:
    """Fold *scopes* (outermost first) onto *base*."""
    effective = base
    for scope in scopes:
        effective = merge_config(effective, scope)
    return effective
