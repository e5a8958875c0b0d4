"""Tests for the format_result dispatcher and OutputSettings."""

import json

from argguard.output.console import GUARD_THEME, create_console, get_output, style_for_severity
from argguard.output.formatters import OutputSettings, format_result
from argguard.services.result import ServiceError, ServiceResult


def _ok(op: str = "check", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "check", msg: str = "fail", **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="VALIDATION_FAILURE", message=msg, detail=dict(detail)),
    )


FINDING = {"op": "pay", "rule_index": 0, "severity": "error", "message": "Malformed field path 'a'"}


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(_ok(operation="pay"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "check"
        assert data["data"]["operation"] == "pay"

    def test_json_mode_error(self) -> None:
        output = format_result(_err(msg="Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["code"] == "VALIDATION_FAILURE"
        assert data["error"]["message"] == "Bad"


class TestFormatResultQuiet:
    def test_quiet_success(self) -> None:
        assert format_result(_ok(), settings=OutputSettings(quiet=True)) == "OK: check"

    def test_quiet_error(self) -> None:
        output = format_result(_err(msg="sku!"), settings=OutputSettings(quiet=True))
        assert output.startswith("ERROR: check")
        assert output.endswith("sku!")


class TestFormatResultRich:
    def test_success_lists_data(self) -> None:
        output = format_result(_ok(operation="pay", rules=2, passed=True))
        assert output.splitlines() == [
            "OK  check",
            "  operation: pay",
            "  rules: 2",
            "  passed: True",
        ]

    def test_success_with_findings_table(self) -> None:
        finding = {**FINDING, "severity": "warning", "message": "No constraint enabled"}
        output = format_result(_ok("lint", rules=1, findings=[finding]))
        assert "Severity" in output
        assert "No constraint enabled" in output
        assert "findings:" not in output

    def test_error_line(self) -> None:
        output = format_result(_err(msg="sku is required", rule_index=1))
        assert output.startswith("ERROR")
        assert output.splitlines()[0] == "ERROR  check — sku is required"
        assert "sku is required" in output
        assert "detail:" not in output

    def test_error_verbose_detail(self) -> None:
        output = format_result(
            _err(msg="sku is required", rule_index=1), settings=OutputSettings(verbose=True)
        )
        assert "detail:" in output
        assert "rule_index: 1" in output
        assert "    rule_index: 1" in output.splitlines()

    def test_error_findings_table(self) -> None:
        result = ServiceResult(
            ok=False,
            op="lint",
            error=ServiceError(
                code="MALFORMED_RULES", message="1 malformed rule(s)", detail={"findings": [FINDING]}
            ),
        )
        output = format_result(result)
        assert "Malformed field path" in output


class TestConsole:
    def test_create_console_renders_to_buffer(self) -> None:
        console = create_console()
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles(self) -> None:
        assert "guard.ok" in GUARD_THEME.styles
        assert style_for_severity("error") == "guard.error"
        assert style_for_severity("info") == ""
