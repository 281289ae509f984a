"""BaseService — shared foundation for doclayer services.

Every service receives :class:`DoclayerSettings` at construction time and
loads the server layout on demand. Configuration errors are converted to a
failed :class:`ServiceResult` here, so commands never see raw exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from doclayer.config.loader import ServerLayout, load_layout
from doclayer.domain.errors import ConfigSyntaxError, ContextError, DirectiveError
from doclayer.services.result import ServiceResult

if TYPE_CHECKING:
    from doclayer.config.settings import DoclayerSettings

logger = logging.getLogger(__name__)


class ConfigUnavailable(Exception):
    """No usable httpd configuration file was given."""


class BaseService:
    """Base for service classes that operate on a loaded layout.

    Usage::

        class CheckService(BaseService):
            def check(self) -> ServiceResult:
                try:
                    layout = self._load_layout()
                except self.LOAD_ERRORS as exc:
                    return self._load_failure("check", exc)
                ...
    """

    LOAD_ERRORS = (ConfigUnavailable, DirectiveError, ConfigSyntaxError, OSError)

    def __init__(self, settings: DoclayerSettings, layout: ServerLayout | None = None) -> None:
        self._settings = settings
        self._layout = layout

    def _load_layout(self) -> ServerLayout:
        """Return the cached layout, loading it on first use."""
        if self._layout is not None:
            return self._layout

        path = self._settings.httpd_conf
        if path is None:
            msg = "No httpd configuration given (use --config or [server] conf_file)"
            raise ConfigUnavailable(msg)
        if not path.is_file():
            msg = f"Configuration file not found: {path}"
            raise ConfigUnavailable(msg)

        self._layout = load_layout(
            path,
            default_document_root=self._settings.server.default_document_root,
            server_root=self._settings.server_root,
        )
        return self._layout

    @staticmethod
    def _load_failure(op: str, exc: Exception) -> ServiceResult:
        """Convert a load-time exception into a failed result."""
        if isinstance(exc, ConfigUnavailable):
            code, detail = "NO_CONFIG", {}
        elif isinstance(exc, DirectiveError):
            code = exc.code
            detail = {"directive": exc.directive}
            if exc.location:
                detail["location"] = exc.location
            if isinstance(exc, ContextError):
                detail["ancestor"] = exc.ancestor
        elif isinstance(exc, ConfigSyntaxError):
            code, detail = exc.code, {}
            if exc.source:
                detail["location"] = f"{exc.source}:{exc.line}" if exc.line else exc.source
        else:
            code, detail = "IO_ERROR", {}

        logger.debug("Configuration load failed (%s): %s", code, exc)
        return ServiceResult.failure(op, code, str(exc), detail)
