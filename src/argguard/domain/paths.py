"""Field path parsing for the ``container.field`` addressing syntax.

A path is either empty (the argument itself is the value) or exactly two
ASCII word segments joined by one dot. Deeper paths and index segments
are not supported.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from argguard.domain.errors import MalformedRuleError

FIELD_PATH_PATTERN = re.compile(r"\w+\.\w+", re.ASCII)
PATH_SEPARATOR = "."

MALFORMED_PATH_MESSAGE = "Argument validation failed: malformed field path"


class FieldPath(NamedTuple):
    """A parsed two-segment path."""

    container: str
    field: str

    def __str__(self) -> str:
        return f"{self.container}{PATH_SEPARATOR}{self.field}"


def is_valid_path(path: str) -> bool:
    """Check whether *path* is empty or a well-formed ``container.field`` path."""
    return path == "" or FIELD_PATH_PATTERN.fullmatch(path) is not None


def parse_path(path: str) -> FieldPath | None:
    """Parse *path* into a :class:`FieldPath`.

    Returns None for the empty path. Raises :class:`MalformedRuleError`
    for any other shape than ``word.word``.

    Examples:
        >>> parse_path("order.id")
        FieldPath(container='order', field='id')
        >>> parse_path("") is None
        True
    """
    if path == "":
        return None
    if FIELD_PATH_PATTERN.fullmatch(path) is None:
        raise MalformedRuleError(MALFORMED_PATH_MESSAGE, path=path)
    container, field = path.split(PATH_SEPARATOR)
    return FieldPath(container, field)
