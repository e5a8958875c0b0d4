"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich text) or machines
(--json). ``--quiet`` reduces output to one status line.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from argguard.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from argguard.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode selected by the global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _status_text(result)

    console = create_console()
    if result.ok:
        console.print(Text.assemble(("OK", "guard.ok"), (f"  {result.op}", "guard.op")))
        _render_data(console, result.data)
    else:
        _render_error(console, result, verbose=settings.verbose)
    return get_output(console).rstrip("\n")


def _status_text(result: ServiceResult) -> str:
    if result.ok:
        return f"OK: {result.op}"
    msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {msg}"


def _render_data(console: Console, data: dict[str, Any]) -> None:
    findings = data.get("findings")
    for key, value in data.items():
        if key == "findings":
            continue
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        console.print(Text.assemble((f"  {key}: ", "guard.key"), str(value)))
    if findings:
        console.print(_findings_table(findings))


def _findings_table(findings: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Operation", style="guard.op")
    table.add_column("Rule", justify="right")
    table.add_column("Severity")
    table.add_column("Message")
    for finding in findings:
        severity = str(finding.get("severity", ""))
        table.add_row(
            str(finding.get("op", "")),
            str(finding.get("rule_index", "")),
            Text(severity, style=style_for_severity(severity)),
            str(finding.get("message", "")),
        )
    return table


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "guard.error"), (f"  {result.op}", "guard.op"), " — ", msg)
    )
    if err and err.detail:
        findings = err.detail.get("findings")
        if findings:
            console.print(_findings_table(findings))
        if verbose:
            console.print(Text("  detail:", style="guard.key"))
            for k, v in err.detail.items():
                if k != "findings":
                    console.print(Text(f"    {k}: {v}"))
