"""Shared pytest fixtures and test helpers for argguard tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from argguard.domain.verdict import Verdict
from argguard.services.evaluator import RuleSetEvaluator

# ---------------------------------------------------------------------------
# Argument shapes used across tests
# ---------------------------------------------------------------------------


@dataclass
class Item:
    sku: str | None
    quantity: int = 1


@dataclass
class Order:
    id: str | None
    note: str | None = None


@dataclass
class PayRequest:
    order: Order | None
    items: Any = field(default_factory=list)
    buyer: str | None = "buyer-1"


class AttrBag:
    """Records every attribute read, to prove what evaluation touched."""

    def __init__(self, **values: Any) -> None:
        object.__setattr__(self, "_values", values)
        object.__setattr__(self, "reads", [])

    def __getattr__(self, name: str) -> Any:
        reads = object.__getattribute__(self, "reads")
        reads.append(name)
        values = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        raise AttributeError(name)


class RecordingObserver:
    """CallObserver that keeps every notification in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, Any]] = []

    def call_started(self, op: str, args: tuple[Any, ...]) -> None:
        self.events.append(("call_started", op, args))

    def call_finished(self, op: str, result: Any) -> None:
        self.events.append(("call_finished", op, result))

    def validation_failed(self, op: str, verdict: Verdict) -> None:
        self.events.append(("validation_failed", op, verdict))

    def rule_defect(self, op: str, verdict: Verdict) -> None:
        self.events.append(("rule_defect", op, verdict))

    @property
    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def evaluator() -> RuleSetEvaluator:
    return RuleSetEvaluator()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory so no argguard.toml is discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ARGGUARD_CONFIG", raising=False)


PAY_TABLE_TOML = """\
[[operations.margin_pay.rules]]
argument_index = 0
path = "order.id"
require_present = true
error_message = "order id is required"

[[operations.margin_pay.rules]]
argument_index = 0
path = "items.sku"
is_collection_path = true
require_non_blank = true
error_message = "sku is required"
"""


def write_file(directory: Path, name: str, content: str) -> Path:
    """Write *content* to ``directory/name`` and return the path."""
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path
