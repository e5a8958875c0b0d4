"""Apply one rule's constraints to a field of every element in a collection."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from argguard.domain.accessors import get_field
from argguard.domain.constraints import evaluate_constraints
from argguard.domain.verdict import Verdict

if TYPE_CHECKING:
    from argguard.domain.rules import RuleDescriptor

_NON_COLLECTION_TYPES = (str, bytes, bytearray, Mapping)


def absent_collection_message(container_name: str) -> str:
    return f"{container_name} must not be empty"


def not_a_collection_message(container_name: str) -> str:
    return f"Argument validation failed: {container_name} is not a collection"


def is_collection(value: Any) -> bool:
    """Whether *value* can be iterated element-wise without being consumed.

    Strings, bytes and mappings are containers but not element collections.
    One-shot iterators are rejected since iterating them mutates the argument.
    """
    return isinstance(value, Collection) and not isinstance(value, _NON_COLLECTION_TYPES)


def evaluate_collection(
    container: Any,
    container_name: str,
    field_name: str,
    rule: RuleDescriptor,
    *,
    separator: str = "",
    whitespace_is_blank: bool = False,
) -> Verdict:
    """Check *field_name* on each element of *container* in iteration order.

    Stops at the first failing element. Empty collections pass.

    Raises:
        FieldResolutionError: An element has no member called *field_name*.
    """
    if container is None:
        return Verdict.failed(absent_collection_message(container_name))
    if not is_collection(container):
        return Verdict.failed(not_a_collection_message(container_name))

    for position, element in enumerate(container):
        value = get_field(element, field_name)
        verdict = evaluate_constraints(
            rule, value, separator=separator, whitespace_is_blank=whitespace_is_blank
        )
        if not verdict.ok:
            return verdict.model_copy(update={"element_index": position})
    return Verdict.passed()
