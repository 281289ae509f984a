"""Pluggy hook specifications for the host request pipeline.

Both phases are ``firstresult``: an implementation returns ``Status.OK`` to
claim the phase and stop further handlers, or None to decline and let the
next handler (and finally the host default) run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from doclayer.domain.types import Status
    from doclayer.infrastructure.request import Request

hookspec = pluggy.HookspecMarker("doclayer")


class PipelineHookSpec:
    """Hook specifications for the doclayer request pipeline."""

    @hookspec(firstresult=True)
    def translate_name(self, request: Request) -> Status | None:
        """Decide routing for *request* before any file mapping happens."""

    @hookspec(firstresult=True)
    def map_to_storage(self, request: Request) -> Status | None:
        """Finalize ``request.filename`` and ``request.finfo``."""
