"""RuleRegistry — rule sets keyed by operation name.

Rules are registered once, usually at import time or from a rule table,
and looked up when a handler is guarded. Lookups happen at decoration
time so a missing registration fails on startup, not on the first call.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from argguard.domain.errors import DuplicateOperationError, UnknownOperationError
from argguard.domain.rules import RuleDescriptor, RuleSet, build_rule_set
from argguard.services.guard import guarded

if TYPE_CHECKING:
    from argguard.config.settings import ArgGuardSettings


class RuleRegistry:
    """Explicit registration table from operation name to rule set.

    *settings*, when given, supplies the evaluator and observer of every
    handler guarded through :meth:`guard`.
    """

    def __init__(self, settings: ArgGuardSettings | None = None) -> None:
        self._settings = settings
        self._rules: dict[str, RuleSet] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_table(
        cls,
        table: Mapping[str, Iterable[RuleDescriptor | dict[str, Any]]],
        settings: ArgGuardSettings | None = None,
    ) -> RuleRegistry:
        """Build a registry from an ``{op: rules}`` mapping (see ``load_rule_table``)."""
        registry = cls(settings)
        for op, rules in table.items():
            registry.register(op, rules)
        return registry

    def register(self, op: str, rules: Iterable[RuleDescriptor | dict[str, Any]]) -> RuleSet:
        """Attach *rules* to *op* and return the frozen rule set.

        Raises:
            DuplicateOperationError: *op* already has rules.
        """
        rule_set = build_rule_set(rules)
        with self._lock:
            if op in self._rules:
                raise DuplicateOperationError(op)
            self._rules[op] = rule_set
        return rule_set

    def rules_for(self, op: str) -> RuleSet:
        """Return the rule set of *op*.

        Raises:
            UnknownOperationError: nothing is registered for *op*.
        """
        try:
            return self._rules[op]
        except KeyError:
            raise UnknownOperationError(op) from None

    def operations(self) -> list[str]:
        """Registered operation names, in registration order."""
        return list(self._rules)

    def guard(self, op: str, **options: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator: guard a handler with the rules registered for *op*.

        *options* are passed through to :func:`guarded`.
        """
        options.setdefault("settings", self._settings)
        return guarded(self.rules_for(op), op=op, **options)

    def __contains__(self, op: object) -> bool:
        return op in self._rules

    def __len__(self) -> int:
        return len(self._rules)


default_registry = RuleRegistry()
