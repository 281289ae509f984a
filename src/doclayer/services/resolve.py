"""ResolveService — run a request through the pipeline and report its file."""

from __future__ import annotations

from typing import Any

from doclayer.infrastructure.pipeline import RequestPipeline, build_pipeline
from doclayer.services.base import BaseService
from doclayer.services.result import ServiceResult


class ResolveService(BaseService):
    """Answers "which file would this request be served from?"."""

    _pipeline: RequestPipeline | None = None

    def _get_pipeline(self) -> RequestPipeline:
        if self._pipeline is None:
            self._pipeline = build_pipeline(self._load_layout(), discover=True)
        return self._pipeline

    def resolve(self, uri: str, *, host: str | None = None) -> ServiceResult:
        """Resolve *uri* (optionally for a ``Host``) to its final filename."""
        if not uri.startswith("/"):
            return ServiceResult.failure(
                "resolve", "INVALID_URI", f"URI path must start with '/': {uri!r}"
            )

        try:
            pipeline = self._get_pipeline()
        except self.LOAD_ERRORS as exc:
            return self._load_failure("resolve", exc)

        request = pipeline.run(uri, host=host or self._settings.resolve.default_host)
        data: dict[str, Any] = {
            "uri": request.uri,
            "scope": request.scope.name,
            "locations": list(request.scope.locations),
            "document_root": request.document_root,
            "enabled": request.config.enabled,
            "layers": list(request.config.layers),
            "filename": request.filename,
            "source": str(request.source),
            "layer": request.layer,
            "exists": request.finfo is not None,
        }
        if request.host:
            data["host"] = request.host
        if request.finfo is not None:
            data["kind"] = request.finfo.kind
            data["size"] = request.finfo.size

        warnings: list[str] = []
        if request.finfo is None:
            warnings.append(f"No file for {uri}: the server would answer 404")
        return ServiceResult(ok=True, op="resolve", data=data, warnings=warnings)
