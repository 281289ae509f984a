"""The value every service operation returns.

Commands never see exceptions from the configuration layer: services turn
them into a failed :class:`ServiceResult` carrying a stable error code
(``NO_CONFIG``, ``CONTEXT_ERROR``, ``INVALID_VALUE`` ...) that ``--json``
consumers can branch on.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    ``detail`` holds optional context such as the ``file:line`` location of
    an offending directive or the enclosing block that rejected it.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``check``, ``scopes`` or ``resolve``)."""

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(
        cls, op: str, code: str, message: str, detail: dict[str, Any] | None = None
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
