"""ConfigService — configuration validation and scope listing."""

from __future__ import annotations

from pathlib import Path

from doclayer.services.base import BaseService
from doclayer.services.result import ServiceResult


class ConfigService(BaseService):
    """Loads the httpd configuration and reports on its layer scopes."""

    def check(self) -> ServiceResult:
        """Validate directive placement and values.

        Layer directories that do not exist are reported as warnings: at
        request time they are simply skipped.
        """
        try:
            layout = self._load_layout()
        except self.LOAD_ERRORS as exc:
            return self._load_failure("check", exc)

        warnings: list[str] = []
        layer_dirs = layout.layer_dirs()
        if self._settings.resolve.warn_missing_layers:
            for scope, directory in layer_dirs:
                if not Path(directory).is_dir():
                    warnings.append(f"{scope}: layer directory not found: {directory}")

        hosts = (layout.server, *layout.virtual_hosts)
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "conf_file": layout.source,
                "virtual_hosts": len(layout.virtual_hosts),
                "locations": sum(len(h.locations) for h in hosts),
                "layer_dirs": len(layer_dirs),
                "enabled_scopes": sum(1 for row in layout.scopes() if row["enabled"]),
            },
            warnings=warnings,
        )

    def scopes(self) -> ServiceResult:
        """List every scope with its effective layer configuration."""
        try:
            layout = self._load_layout()
        except self.LOAD_ERRORS as exc:
            return self._load_failure("scopes", exc)

        rows = layout.scopes()
        return ServiceResult(
            ok=True,
            op="scopes",
            data={"items": rows, "count": len(rows)},
        )
