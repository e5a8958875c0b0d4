"""Tests for call observers."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from typing import Any

import pytest

from argguard.config.logging import configure_logging
from argguard.domain.verdict import Verdict, VerdictKind
from argguard.plugins import PluginManager, hookimpl
from argguard.services.observer import (
    MultiObserver,
    NullObserver,
    PluginObserver,
    StructlogObserver,
    to_loggable,
)
from tests.conftest import Order, PayRequest, RecordingObserver


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    guard = logging.getLogger("argguard")
    guard_level = guard.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    guard.setLevel(guard_level)


def _events(capfd: pytest.CaptureFixture[str]) -> list[dict[str, Any]]:
    err = capfd.readouterr().err
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestToLoggable:
    def test_dataclass_arguments(self) -> None:
        data = to_loggable((PayRequest(order=Order(id="o-1")),))
        assert data[0]["order"]["id"] == "o-1"

    def test_unknown_objects_fall_back_to_repr(self) -> None:
        class Opaque:
            def __repr__(self) -> str:
                return "<opaque>"

        assert to_loggable(Opaque()) == "<opaque>"


class TestStructlogObserver:
    def test_call_lifecycle_at_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        observer = StructlogObserver()
        observer.call_started("pay", ("a", 1))
        observer.call_finished("pay", {"ok": True})

        start, end = _events(capfd)
        assert start["event"] == "call.start"
        assert start["level"] == "debug"
        assert start["logger"] == "argguard.guard"
        assert start["args"] == ["a", 1]
        assert end["event"] == "call.end"
        assert end["result"] == {"ok": True}

    def test_arguments_and_results_can_be_withheld(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        observer = StructlogObserver(log_arguments=False, log_results=False)
        observer.call_started("pay", ("secret",))
        observer.call_finished("pay", "secret")

        start, end = _events(capfd)
        assert "args" not in start
        assert start["arg_count"] == 1
        assert "result" not in end

    def test_validation_failure_at_info(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        verdict = Verdict.failed("sku!", element_index=1).at_rule(2)
        StructlogObserver().validation_failed("pay", verdict)

        (event,) = _events(capfd)
        assert event["event"] == "validation.failed"
        assert event["level"] == "info"
        assert event["message"] == "sku!"
        assert event["rule_index"] == 2
        assert event["element_index"] == 1

    @pytest.mark.parametrize(
        "kind,event_name",
        [
            (VerdictKind.MALFORMED_RULE, "rule.malformed"),
            (VerdictKind.FIELD_RESOLUTION, "rule.field_unresolved"),
        ],
    )
    def test_rule_defects_at_error(
        self, capfd: pytest.CaptureFixture[str], kind: VerdictKind, event_name: str
    ) -> None:
        configure_logging(verbose=False, log_json=True)
        StructlogObserver().rule_defect("pay", Verdict.failed("bad", kind=kind).at_rule(0))

        (event,) = _events(capfd)
        assert event["event"] == event_name
        assert event["level"] == "error"

    def test_debug_suppressed_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        observer = StructlogObserver()
        observer.call_started("pay", ())
        observer.validation_failed("pay", Verdict.failed("x"))
        assert capfd.readouterr().err == ""


class _Collector:
    def __init__(self) -> None:
        self.seen: list[tuple[str, str]] = []

    @hookimpl
    def guard_call_started(self, op: str, args: tuple[Any, ...]) -> None:
        self.seen.append(("started", op))

    @hookimpl
    def guard_call_finished(self, op: str, result: Any) -> None:
        self.seen.append(("finished", op))

    @hookimpl
    def guard_validation_failed(self, op: str, verdict: Verdict) -> None:
        self.seen.append(("failed", verdict.message))

    @hookimpl
    def guard_rule_defect(self, op: str, verdict: Verdict) -> None:
        self.seen.append(("defect", verdict.kind))


class _Broken:
    @hookimpl
    def guard_call_started(self, op: str, args: tuple[Any, ...]) -> None:
        raise RuntimeError("plugin crashed")


class TestPluginObserver:
    def test_relays_every_notification(self) -> None:
        plugins = PluginManager()
        collector = _Collector()
        plugins.register_plugin(collector)
        observer = PluginObserver(plugins)

        observer.call_started("pay", ())
        observer.call_finished("pay", None)
        observer.validation_failed("pay", Verdict.failed("sku!"))
        observer.rule_defect("pay", Verdict.failed("x", kind=VerdictKind.MALFORMED_RULE))

        assert collector.seen == [
            ("started", "pay"),
            ("finished", "pay"),
            ("failed", "sku!"),
            ("defect", VerdictKind.MALFORMED_RULE),
        ]

    def test_plugin_failure_is_a_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        plugins = PluginManager()
        plugins.register_plugin(_Broken())
        with caplog.at_level(logging.WARNING, logger="argguard.services.observer"):
            PluginObserver(plugins).call_started("pay", ())
        assert any("guard_call_started" in r.getMessage() for r in caplog.records)

    def test_no_plugins_is_silent(self) -> None:
        PluginObserver(PluginManager()).call_started("pay", ())


class TestComposition:
    def test_null_observer_accepts_everything(self) -> None:
        observer = NullObserver()
        observer.call_started("pay", ())
        observer.call_finished("pay", None)
        observer.validation_failed("pay", Verdict.failed("x"))
        observer.rule_defect("pay", Verdict.failed("x", kind=VerdictKind.FIELD_RESOLUTION))

    def test_multi_observer_fans_out_in_order(self) -> None:
        first, second = RecordingObserver(), RecordingObserver()
        observer = MultiObserver([first, second])
        observer.call_started("pay", ())
        observer.validation_failed("pay", Verdict.failed("x"))
        assert first.names == second.names == ["call_started", "validation_failed"]
