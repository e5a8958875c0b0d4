"""Verdict — the pass/fail outcome of one rule or one rule-set evaluation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class VerdictKind(StrEnum):
    """Why a verdict has the outcome it has."""

    PASSED = "passed"
    VALIDATION_FAILURE = "validation_failure"
    MALFORMED_RULE = "malformed_rule"
    FIELD_RESOLUTION = "field_resolution"


class Verdict(BaseModel):
    """Outcome of an evaluation.

    Attributes:
        ok: Whether every evaluated constraint held.
        message: Empty on success, otherwise the first failure's message.
        kind: Distinguishes data failures from rule declaration defects.
        rule_index: Position of the failing rule in its rule set.
        element_index: Position of the failing element for collection rules.
    """

    model_config = {"frozen": True}

    ok: bool
    message: str = ""
    kind: VerdictKind = VerdictKind.PASSED
    rule_index: int | None = None
    element_index: int | None = None

    @classmethod
    def passed(cls) -> Verdict:
        return cls(ok=True)

    @classmethod
    def failed(
        cls,
        message: str,
        *,
        kind: VerdictKind = VerdictKind.VALIDATION_FAILURE,
        element_index: int | None = None,
    ) -> Verdict:
        return cls(ok=False, message=message, kind=kind, element_index=element_index)

    @property
    def is_rule_defect(self) -> bool:
        """True for malformed rules and unresolvable fields."""
        return self.kind in (VerdictKind.MALFORMED_RULE, VerdictKind.FIELD_RESOLUTION)

    def at_rule(self, index: int) -> Verdict:
        """Return a copy tagged with the position of the rule that produced it."""
        return self.model_copy(update={"rule_index": index})
