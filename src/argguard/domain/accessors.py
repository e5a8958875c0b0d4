"""Single-hop field access on arbitrary argument values.

Resolution order:

1. Values implementing :class:`FieldReadable` answer for themselves.
2. Mappings are read by key.
3. Everything else is read by attribute, underscore-prefixed names included.
   Methods are not fields: a name that resolves to a function or method
   defined on the type is reported as missing.

A member that does not exist raises :class:`FieldResolutionError`. A member
that exists and holds ``None`` is returned as ``None``; the two are never
conflated. A getter that fails while reading (a property, ``__getattr__``
or ``read_field`` raising) is reported as a :class:`FieldResolutionError`
chained to the original exception.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from argguard.domain.errors import FieldResolutionError

_MISSING = object()


@runtime_checkable
class FieldReadable(Protocol):
    """Capability for argument types that expose their fields explicitly.

    ``read_field`` must raise :class:`KeyError` or :class:`AttributeError`
    for unknown names.
    """

    def read_field(self, name: str) -> Any: ...


def _is_method(value: Any, name: str) -> bool:
    """Whether *name* on *value* is behaviour defined on its type, not state."""
    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict) and name in instance_dict:
        return False
    try:
        member = inspect.getattr_static(type(value), name)
    except AttributeError:
        return False
    return inspect.isroutine(member) or isinstance(member, (staticmethod, classmethod))


def _read_failed(name: str, value: Any, exc: Exception) -> FieldResolutionError:
    return FieldResolutionError(name, value, reason=f"{type(exc).__name__}: {exc}")


def get_field(value: Any, name: str) -> Any:
    """Read the member *name* from *value*.

    Raises:
        FieldResolutionError: *value* is None, has no field called *name*,
            or reading it raised.
    """
    if value is None:
        raise FieldResolutionError(name, value)

    if isinstance(value, FieldReadable):
        try:
            return value.read_field(name)
        except (KeyError, AttributeError) as exc:
            raise FieldResolutionError(name, value) from exc
        except Exception as exc:
            raise _read_failed(name, value, exc) from exc

    is_mapping = isinstance(value, Mapping)
    if not is_mapping and _is_method(value, name):
        raise FieldResolutionError(name, value)
    try:
        if is_mapping:
            result = value.get(name, _MISSING)
        else:
            result = getattr(value, name, _MISSING)
    except Exception as exc:
        raise _read_failed(name, value, exc) from exc

    if result is _MISSING:
        raise FieldResolutionError(name, value)
    return result
