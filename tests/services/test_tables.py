"""Tests for rule table loading and linting."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from argguard.domain.errors import RuleTableError
from argguard.domain.rules import rule
from argguard.services.tables import lint_rule_table, load_rule_table, parse_rule_table
from tests.conftest import PAY_TABLE_TOML, write_file

PAY_TABLE_YAML = """\
operations:
  margin_pay:
    rules:
      - argument_index: 0
        path: order.id
        require_present: true
        error_message: order id is required
      - argumentIndex: 0
        path: items.sku
        isCollectionPath: true
        requireNonBlank: true
        errorMessage: sku is required
"""


class TestLoadRuleTable:
    def test_toml(self, tmp_path: Path) -> None:
        table = load_rule_table(write_file(tmp_path, "rules.toml", PAY_TABLE_TOML))
        assert list(table) == ["margin_pay"]
        first, second = table["margin_pay"]
        assert first.path == "order.id"
        assert first.require_present
        assert second.is_collection_path
        assert second.error_message == "sku is required"

    @pytest.mark.parametrize("name", ["rules.yaml", "rules.yml"])
    def test_yaml(self, tmp_path: Path, name: str) -> None:
        table = load_rule_table(write_file(tmp_path, name, PAY_TABLE_YAML))
        toml_table = load_rule_table(write_file(tmp_path, "rules.toml", PAY_TABLE_TOML))
        assert table == toml_table

    def test_json(self, tmp_path: Path) -> None:
        data = {"operations": {"refund": {"rules": [{"argument_index": 1, "path": "a.b"}]}}}
        table = load_rule_table(write_file(tmp_path, "rules.json", json.dumps(data)))
        assert table == {"refund": (rule(1, "a.b"),)}

    def test_empty_toml(self, tmp_path: Path) -> None:
        assert load_rule_table(write_file(tmp_path, "rules.toml", "")) == {}

    def test_operation_without_rules(self, tmp_path: Path) -> None:
        table = load_rule_table(write_file(tmp_path, "rules.toml", "[operations.ping]\n"))
        assert table == {"ping": ()}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RuleTableError) as exc_info:
            load_rule_table(tmp_path / "absent.toml")
        assert exc_info.value.path == tmp_path / "absent.toml"

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(RuleTableError, match="unsupported"):
            load_rule_table(write_file(tmp_path, "rules.ini", "[x]"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(RuleTableError):
            load_rule_table(write_file(tmp_path, "rules.toml", "[operations\n"))

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(RuleTableError):
            load_rule_table(write_file(tmp_path, "rules.yaml", "operations: [unclosed\n"))

    def test_unknown_rule_key(self, tmp_path: Path) -> None:
        content = "[[operations.pay.rules]]\nargument_index = 0\nnot_null = true\n"
        with pytest.raises(RuleTableError):
            load_rule_table(write_file(tmp_path, "rules.toml", content))

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(RuleTableError):
            parse_rule_table({"operation": {}})


class TestLintRuleTable:
    def test_clean_table(self) -> None:
        assert lint_rule_table({"pay": (rule(0, "order.id", require_present=True),)}) == []

    def test_malformed_path_is_error(self) -> None:
        findings = lint_rule_table({"pay": (rule(0, "a.b.c", require_present=True),)})
        assert len(findings) == 1
        assert findings[0].severity == "error"
        assert findings[0].op == "pay"
        assert findings[0].rule_index == 0
        assert "a.b.c" in findings[0].message

    def test_rule_without_constraints_is_warning(self) -> None:
        findings = lint_rule_table({"pay": (rule(0, "order.id"),)})
        assert [f.severity for f in findings] == ["warning"]

    def test_collection_flag_without_path_is_warning(self) -> None:
        findings = lint_rule_table(
            {"pay": (rule(0, is_collection_path=True, require_present=True),)}
        )
        assert [f.severity for f in findings] == ["warning"]
        assert "Collection flag" in findings[0].message

    def test_negative_index_rejected_on_load(self) -> None:
        with pytest.raises(RuleTableError):
            parse_rule_table({"operations": {"pay": {"rules": [{"argument_index": -1}]}}})
