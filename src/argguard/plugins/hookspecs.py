"""Pluggy hook specifications for guarded-call events.

Hooks are dispatched synchronously by
:class:`~argguard.services.observer.PluginObserver`, one per observer
notification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from argguard.domain.verdict import Verdict

PROJECT_NAME = "argguard"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ArgGuardHookSpec:
    """Hook specifications for the argguard plugin system."""

    @hookspec
    def guard_call_started(self, op: str, args: tuple[Any, ...]) -> None:
        """Called before the arguments of a guarded call are evaluated."""

    @hookspec
    def guard_call_finished(self, op: str, result: Any) -> None:
        """Called after a guarded operation returned."""

    @hookspec
    def guard_validation_failed(self, op: str, verdict: Verdict) -> None:
        """Called when argument data violated a rule."""

    @hookspec
    def guard_rule_defect(self, op: str, verdict: Verdict) -> None:
        """Called when a rule is malformed or names a field that does not exist."""
