"""Atomic constraints applied to one resolved value.

All enabled constraints are checked; none short-circuits another. Every
constraint that fires contributes the rule's ``error_message`` once, in
declared order (presence, then non-blank), joined by *separator*. The
default separator is empty, so a rule with both constraints enabled that
fails on ``None`` reports its message twice back to back.

"Blank" only has meaning for strings. For any other value the non-blank
constraint narrows to an absence check: ``0``, ``False`` and empty
collections are never blank.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from argguard.domain.verdict import Verdict

if TYPE_CHECKING:
    from argguard.domain.rules import RuleDescriptor


def is_absent(value: Any) -> bool:
    return value is None


def is_blank(value: Any, *, whitespace_is_blank: bool = False) -> bool:
    """Check whether *value* is absent or an empty string.

    With *whitespace_is_blank*, whitespace-only strings count as blank too.
    """
    if value is None:
        return True
    if not isinstance(value, str):
        return False
    if whitespace_is_blank:
        return value.strip() == ""
    return value == ""


def evaluate_constraints(
    rule: RuleDescriptor,
    value: Any,
    *,
    separator: str = "",
    whitespace_is_blank: bool = False,
) -> Verdict:
    """Apply every constraint enabled on *rule* to *value*."""
    messages: list[str] = []
    if rule.require_present and is_absent(value):
        messages.append(rule.error_message)
    if rule.require_non_blank and is_blank(value, whitespace_is_blank=whitespace_is_blank):
        messages.append(rule.error_message)

    if not messages:
        return Verdict.passed()
    return Verdict.failed(separator.join(messages))
