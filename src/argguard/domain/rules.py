"""RuleDescriptor — one declarative argument check.

A rule names which positional argument to look at, optionally a
``container.field`` path into it, and which constraints apply. An
operation owns an ordered tuple of rules; the order is evaluation order.

INVARIANT: Rules are frozen once built and shared across every call.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RuleDescriptor(BaseModel):
    """Declarative check applied to one argument of an operation call.

    Attributes:
        argument_index: Position of the argument in the call's positional args.
        path: Empty to check the argument itself, else ``container.field``.
        require_present: Fail when the addressed value is ``None``.
        require_non_blank: Fail when the addressed value is ``None`` or ``""``.
        is_collection_path: The container is a collection; check every element.
        error_message: Message reported when a constraint fails.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    argument_index: int = Field(
        ge=0, validation_alias=AliasChoices("argument_index", "argumentIndex", "index")
    )
    path: str = Field(default="", validation_alias=AliasChoices("path", "fieldName"))
    require_present: bool = Field(
        default=False, validation_alias=AliasChoices("require_present", "requirePresent")
    )
    require_non_blank: bool = Field(
        default=False, validation_alias=AliasChoices("require_non_blank", "requireNonBlank")
    )
    is_collection_path: bool = Field(
        default=False, validation_alias=AliasChoices("is_collection_path", "isCollectionPath")
    )
    error_message: str = Field(
        default="", validation_alias=AliasChoices("error_message", "errorMessage")
    )

    @property
    def has_constraints(self) -> bool:
        """Whether any constraint is enabled (a rule without one always passes)."""
        return self.require_present or self.require_non_blank


RuleSet = tuple[RuleDescriptor, ...]


def rule(argument_index: int, path: str = "", **options: Any) -> RuleDescriptor:
    """Shorthand constructor used when declaring rules in code.

    Examples:
        >>> rule(0, "dto.buyer_id", require_present=True).path
        'dto.buyer_id'
    """
    return RuleDescriptor(argument_index=argument_index, path=path, **options)


def build_rule_set(rules: Iterable[RuleDescriptor | dict[str, Any]]) -> RuleSet:
    """Normalize descriptors or raw mappings into an immutable rule set."""
    return tuple(
        r if isinstance(r, RuleDescriptor) else RuleDescriptor.model_validate(r) for r in rules
    )
