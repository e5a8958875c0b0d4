"""RuleSetEvaluator — ordered, short-circuiting evaluation of a rule set.

INVARIANT: ``evaluate`` always returns a Verdict. Data failures, malformed
rules and unresolvable fields each map to their own ``VerdictKind``; none
of them escapes as an exception.

INVARIANT: The evaluator holds no per-call state. One instance can serve
any number of concurrent calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from argguard.config.models import ConstraintConfig
from argguard.domain.accessors import get_field
from argguard.domain.collection_rules import evaluate_collection
from argguard.domain.constraints import evaluate_constraints
from argguard.domain.errors import FieldResolutionError, MalformedRuleError
from argguard.domain.paths import parse_path
from argguard.domain.rules import RuleDescriptor
from argguard.domain.verdict import Verdict, VerdictKind


def null_container_message(container_name: str) -> str:
    return f"{container_name} must not be null"


def index_out_of_range_message(index: int, arity: int) -> str:
    return (
        f"Argument validation failed: argument index {index} out of range "
        f"for {arity} argument(s)"
    )


class RuleSetEvaluator:
    """Evaluate rule descriptors against the arguments of one call.

    Usage::

        evaluator = RuleSetEvaluator()
        verdict = evaluator.evaluate(rules, (request,))
        if not verdict.ok:
            ...
    """

    def __init__(self, constraints: ConstraintConfig | None = None) -> None:
        self._constraints = constraints or ConstraintConfig()

    @property
    def constraints(self) -> ConstraintConfig:
        return self._constraints

    def evaluate(self, rules: Sequence[RuleDescriptor], args: Sequence[Any]) -> Verdict:
        """Evaluate *rules* in order and return the first failing verdict.

        Returns a passing verdict when every rule holds (or *rules* is empty).
        """
        for index, descriptor in enumerate(rules):
            try:
                verdict = self._evaluate_rule(descriptor, args)
            except MalformedRuleError as exc:
                verdict = Verdict.failed(str(exc), kind=VerdictKind.MALFORMED_RULE)
            except FieldResolutionError as exc:
                verdict = Verdict.failed(str(exc), kind=VerdictKind.FIELD_RESOLUTION)
            if not verdict.ok:
                return verdict.at_rule(index)
        return Verdict.passed()

    # ------------------------------------------------------------------
    # Per-rule dispatch
    # ------------------------------------------------------------------

    def _evaluate_rule(self, descriptor: RuleDescriptor, args: Sequence[Any]) -> Verdict:
        if descriptor.argument_index >= len(args):
            raise MalformedRuleError(
                index_out_of_range_message(descriptor.argument_index, len(args))
            )
        argument = args[descriptor.argument_index]

        path = parse_path(descriptor.path)
        if path is None:
            return self._check(descriptor, argument)

        container = get_field(argument, path.container)
        if descriptor.is_collection_path:
            return evaluate_collection(
                container,
                path.container,
                path.field,
                descriptor,
                separator=self._constraints.message_separator,
                whitespace_is_blank=self._constraints.whitespace_is_blank,
            )

        if container is None:
            return Verdict.failed(null_container_message(path.container))
        return self._check(descriptor, get_field(container, path.field))

    def _check(self, descriptor: RuleDescriptor, value: Any) -> Verdict:
        return evaluate_constraints(
            descriptor,
            value,
            separator=self._constraints.message_separator,
            whitespace_is_blank=self._constraints.whitespace_is_blank,
        )
