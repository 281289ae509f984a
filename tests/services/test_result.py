"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from doclayer.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="resolve", data={"filename": "/srv/www/a.png"})
        assert result.ok is True
        assert result.op == "resolve"
        assert result.data == {"filename": "/srv/www/a.png"}
        assert result.warnings == []
        assert result.error is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="NO_CONFIG", message="No httpd configuration given")
        result = ServiceResult(ok=False, op="check", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NO_CONFIG"
        assert result.error.detail == {}

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check",
            data={"virtual_hosts": 2},
            warnings=["server: layer directory not found: /srv/x"],
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["virtual_hosts"] == 2
        assert parsed["warnings"] == ["server: layer directory not found: /srv/x"]
        assert parsed["error"] is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="check")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(
            code="CONTEXT_ERROR",
            message="DocumentRootLayers not allowed within <Directory ...>",
            detail={"ancestor": "<Directory", "location": "httpd.conf:2"},
        )
        assert error.detail["ancestor"] == "<Directory"

    def test_failure_shortcut(self) -> None:
        result = ServiceResult.failure("resolve", "INVALID_URI", "bad uri")
        assert result.ok is False
        assert result.error == ServiceError(code="INVALID_URI", message="bad uri")
