"""Exception hierarchy for argguard.

Three outcomes are kept apart during evaluation:

- validation failures are data defects and never raise; they become a
  failing :class:`~argguard.domain.verdict.Verdict`;
- :class:`MalformedRuleError` and :class:`FieldResolutionError` are rule
  declaration defects (:class:`RuleDefectError`). They are raised by the
  domain helpers and converted to verdicts by the evaluator.

The remaining errors are raised at declaration time (registry, rule tables).
"""

from __future__ import annotations

from pathlib import Path


class ArgGuardError(Exception):
    """Base class for all argguard errors."""


class RuleDefectError(ArgGuardError):
    """A rule descriptor does not fit the arguments it is applied to."""


class MalformedRuleError(RuleDefectError):
    """A rule descriptor is malformed (bad path shape, bad argument index)."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class FieldResolutionError(RuleDefectError):
    """A named field does not exist, or cannot be read, on the runtime value."""

    def __init__(self, field_name: str, value: object, *, reason: str | None = None) -> None:
        self.field_name = field_name
        self.value_type = type(value).__name__
        self.reason = reason
        message = f"Field '{field_name}' not found on {self.value_type}"
        if reason:
            message = f"Field '{field_name}' could not be read on {self.value_type}: {reason}"
        super().__init__(message)


class RuleTableError(ArgGuardError):
    """A rule table file could not be read or does not have the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid rule table {path}: {reason}")


class DuplicateOperationError(ArgGuardError):
    """An operation was registered twice."""

    def __init__(self, op: str) -> None:
        self.op = op
        super().__init__(f"Rules already registered for operation '{op}'")


class UnknownOperationError(ArgGuardError):
    """No rules are registered for the requested operation."""

    def __init__(self, op: str) -> None:
        self.op = op
        super().__init__(f"No rules registered for operation '{op}'")


class UnresolvedResponseError(ArgGuardError):
    """A guarded handler's return annotation names a type that cannot be resolved."""

    def __init__(self, handler: str, annotation: str) -> None:
        self.handler = handler
        self.annotation = annotation
        super().__init__(
            f"Cannot resolve return annotation '{annotation}' of {handler}; "
            "import it at runtime or pass response_factory"
        )
