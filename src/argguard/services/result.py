"""ServiceResult and ServiceError — the default response shape of guarded operations.

A guarded operation whose failure response cannot be derived from its
return annotation answers with a ServiceResult. The CLI emits one per
command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from argguard.domain.verdict import Verdict


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> ServiceError:
        """Build an error whose code is the upper-cased verdict kind."""
        detail: dict[str, Any] = {}
        if verdict.rule_index is not None:
            detail["rule_index"] = verdict.rule_index
        if verdict.element_index is not None:
            detail["element_index"] = verdict.element_index
        return cls(code=verdict.kind.upper(), message=verdict.message, detail=detail)


class ServiceResult(BaseModel):
    """Outcome of an operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"margin_pay"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def rejected(cls, op: str, verdict: Verdict) -> ServiceResult:
        """Failure result for an operation whose arguments did not validate."""
        return cls(ok=False, op=op, error=ServiceError.from_verdict(verdict))
