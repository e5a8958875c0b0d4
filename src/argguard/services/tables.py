"""Rule tables — operation rule sets authored in TOML, YAML or JSON.

Expected shape (TOML shown)::

    [[operations.margin_pay.rules]]
    argument_index = 0
    path = "dto.buyer_id"
    require_present = true
    error_message = "buyer id is required"

The YAML and JSON forms carry the same ``operations -> {name: {rules: [...]}}``
structure.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from argguard.domain.errors import RuleTableError
from argguard.domain.paths import is_valid_path
from argguard.domain.rules import RuleDescriptor, RuleSet

RuleTable = dict[str, RuleSet]

_YAML_SUFFIXES = {".yaml", ".yml"}


class OperationEntry(BaseModel):
    """One ``[operations.<name>]`` table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rules: tuple[RuleDescriptor, ...] = ()


class RuleTableFile(BaseModel):
    """Top-level shape of a rule table file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    operations: dict[str, OperationEntry] = Field(default_factory=dict)


class LintFinding(BaseModel):
    """One static problem found in a rule table."""

    model_config = {"frozen": True}

    op: str
    rule_index: int
    severity: Literal["warning", "error"]
    message: str


def _read_raw(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise RuleTableError(path, str(exc)) from exc

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return tomllib.loads(text)
        if suffix in _YAML_SUFFIXES:
            return YAML(typ="safe").load(text) or {}
        if suffix == ".json":
            return json.loads(text)
    except (tomllib.TOMLDecodeError, YAMLError, json.JSONDecodeError) as exc:
        raise RuleTableError(path, str(exc)) from exc
    raise RuleTableError(path, f"unsupported file type '{suffix or path.name}'")


def parse_rule_table(data: Any, *, source: Path | None = None) -> RuleTable:
    """Validate already-loaded table *data* and return ``{op: rules}``."""
    try:
        parsed = RuleTableFile.model_validate(data)
    except ValidationError as exc:
        raise RuleTableError(source or Path("<memory>"), str(exc)) from exc
    return {op: entry.rules for op, entry in parsed.operations.items()}


def load_rule_table(path: Path) -> RuleTable:
    """Load a rule table from a ``.toml``, ``.yaml``/``.yml`` or ``.json`` file.

    Raises:
        RuleTableError: The file is unreadable, unparsable, or has the wrong shape.
    """
    return parse_rule_table(_read_raw(path), source=path)


def lint_rule_table(table: RuleTable) -> list[LintFinding]:
    """Report rule declarations that cannot work or can never fail.

    - error: the path is not empty and not ``container.field``;
    - warning: no constraint is enabled, so the rule always passes;
    - warning: ``is_collection_path`` on a rule without a path has no effect.
    """
    findings: list[LintFinding] = []
    for op, rules in table.items():
        for index, descriptor in enumerate(rules):
            if not is_valid_path(descriptor.path):
                findings.append(
                    LintFinding(
                        op=op,
                        rule_index=index,
                        severity="error",
                        message=f"Malformed field path '{descriptor.path}'",
                    )
                )
            if not descriptor.has_constraints:
                findings.append(
                    LintFinding(
                        op=op,
                        rule_index=index,
                        severity="warning",
                        message="No constraint enabled; rule always passes",
                    )
                )
            if descriptor.is_collection_path and not descriptor.path:
                findings.append(
                    LintFinding(
                        op=op,
                        rule_index=index,
                        severity="warning",
                        message="Collection flag ignored on a rule without a path",
                    )
                )
    return findings
