"""Observability port for guarded calls.

The guard never logs through a global logger; it reports to whichever
:class:`CallObserver` it was given. :class:`StructlogObserver` is the
default and keeps validation failures and rule defects under distinct
event names so broken rule declarations are easy to find.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from pydantic_core import to_jsonable_python

from argguard.domain.verdict import VerdictKind

if TYPE_CHECKING:
    from argguard.domain.verdict import Verdict
    from argguard.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class CallObserver(Protocol):
    """Receives the lifecycle of one guarded call."""

    def call_started(self, op: str, args: tuple[Any, ...]) -> None: ...

    def call_finished(self, op: str, result: Any) -> None: ...

    def validation_failed(self, op: str, verdict: Verdict) -> None: ...

    def rule_defect(self, op: str, verdict: Verdict) -> None: ...


def to_loggable(value: Any) -> Any:
    """Convert an argument or result into JSON-compatible data for logging."""
    return to_jsonable_python(value, fallback=repr)


class NullObserver:
    """Observer that ignores every notification."""

    def call_started(self, op: str, args: tuple[Any, ...]) -> None:
        pass

    def call_finished(self, op: str, result: Any) -> None:
        pass

    def validation_failed(self, op: str, verdict: Verdict) -> None:
        pass

    def rule_defect(self, op: str, verdict: Verdict) -> None:
        pass


class StructlogObserver:
    """Log guarded calls through structlog.

    Call start and end are logged at debug with their arguments and
    result. Validation failures are routine and logged at info; rule
    defects are configuration bugs and logged at error.
    """

    def __init__(
        self,
        *,
        log_arguments: bool = True,
        log_results: bool = True,
        logger_name: str = "argguard.guard",
    ) -> None:
        self._log = structlog.get_logger(logger_name)
        self._log_arguments = log_arguments
        self._log_results = log_results

    def call_started(self, op: str, args: tuple[Any, ...]) -> None:
        if self._log_arguments:
            self._log.debug("call.start", op=op, args=to_loggable(args))
        else:
            self._log.debug("call.start", op=op, arg_count=len(args))

    def call_finished(self, op: str, result: Any) -> None:
        if self._log_results:
            self._log.debug("call.end", op=op, result=to_loggable(result))
        else:
            self._log.debug("call.end", op=op)

    def validation_failed(self, op: str, verdict: Verdict) -> None:
        self._log.info(
            "validation.failed",
            op=op,
            message=verdict.message,
            rule_index=verdict.rule_index,
            element_index=verdict.element_index,
        )

    def rule_defect(self, op: str, verdict: Verdict) -> None:
        if verdict.kind is VerdictKind.MALFORMED_RULE:
            event = "rule.malformed"
        else:
            event = "rule.field_unresolved"
        self._log.error(event, op=op, message=verdict.message, rule_index=verdict.rule_index)


class PluginObserver:
    """Relay notifications to pluggy hooks.

    INVARIANT: Plugin failures are warnings, never errors.
    """

    def __init__(self, plugins: PluginManager) -> None:
        self._plugins = plugins

    def call_started(self, op: str, args: tuple[Any, ...]) -> None:
        self._dispatch("guard_call_started", op=op, args=args)

    def call_finished(self, op: str, result: Any) -> None:
        self._dispatch("guard_call_finished", op=op, result=result)

    def validation_failed(self, op: str, verdict: Verdict) -> None:
        self._dispatch("guard_validation_failed", op=op, verdict=verdict)

    def rule_defect(self, op: str, verdict: Verdict) -> None:
        self._dispatch("guard_rule_defect", op=op, verdict=verdict)

    def _dispatch(self, hook_name: str, **payload: Any) -> None:
        hook = getattr(self._plugins.hook, hook_name)
        try:
            hook(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)


class MultiObserver:
    """Fan every notification out to several observers, in order."""

    def __init__(self, observers: Iterable[CallObserver]) -> None:
        self._observers = tuple(observers)

    def call_started(self, op: str, args: tuple[Any, ...]) -> None:
        for observer in self._observers:
            observer.call_started(op, args)

    def call_finished(self, op: str, result: Any) -> None:
        for observer in self._observers:
            observer.call_finished(op, result)

    def validation_failed(self, op: str, verdict: Verdict) -> None:
        for observer in self._observers:
            observer.validation_failed(op, verdict)

    def rule_defect(self, op: str, verdict: Verdict) -> None:
        for observer in self._observers:
            observer.rule_defect(op, verdict)
