"""CheckService — evaluate or lint rule tables outside a running service.

Backs the ``argguard check`` and ``argguard lint`` commands. Every method
returns a ServiceResult; file and table problems become error results
rather than exceptions.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from argguard.domain.errors import RuleTableError
from argguard.services.evaluator import RuleSetEvaluator
from argguard.services.result import ServiceError, ServiceResult
from argguard.services.tables import RuleTable, lint_rule_table, load_rule_table


class CheckService:
    """Run rule tables against argument files."""

    def __init__(self, evaluator: RuleSetEvaluator | None = None) -> None:
        self._evaluator = evaluator or RuleSetEvaluator()

    def check(
        self,
        table_path: Path,
        args_path: Path,
        *,
        operation: str | None = None,
    ) -> ServiceResult:
        """Evaluate one operation's rules against the JSON argument array in *args_path*."""
        op = "check"
        try:
            table = load_rule_table(table_path)
        except RuleTableError as exc:
            return _table_error(op, exc)

        selected = _select_operation(table, operation)
        if isinstance(selected, ServiceError):
            return ServiceResult(ok=False, op=op, error=selected)

        args = _load_arguments(args_path)
        if isinstance(args, ServiceError):
            return ServiceResult(ok=False, op=op, error=args)

        verdict = self._evaluator.evaluate(table[selected], args)
        if not verdict.ok:
            error = ServiceError.from_verdict(verdict)
            detail = {**error.detail, "operation": selected}
            return ServiceResult(
                ok=False, op=op, error=error.model_copy(update={"detail": detail})
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"operation": selected, "rules": len(table[selected]), "passed": True},
        )

    def lint(self, table_path: Path) -> ServiceResult:
        """Statically check every rule in the table at *table_path*."""
        op = "lint"
        try:
            table = load_rule_table(table_path)
        except RuleTableError as exc:
            return _table_error(op, exc)

        findings = [f.model_dump() for f in lint_rule_table(table)]
        errors = [f for f in findings if f["severity"] == "error"]
        data: dict[str, Any] = {
            "operations": len(table),
            "rules": sum(len(rules) for rules in table.values()),
            "error_count": len(errors),
            "warning_count": len(findings) - len(errors),
            "findings": findings,
        }
        if errors:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="MALFORMED_RULES",
                    message=f"{len(errors)} malformed rule(s) in {table_path}",
                    detail=data,
                ),
            )
        warnings = [f"{f['op']}[{f['rule_index']}]: {f['message']}" for f in findings]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)


def _table_error(op: str, exc: RuleTableError) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="INVALID_TABLE",
            message=str(exc),
            detail={"path": str(exc.path)},
        ),
    )


def _select_operation(table: RuleTable, operation: str | None) -> str | ServiceError:
    if operation is not None:
        if operation in table:
            return operation
        return ServiceError(
            code="UNKNOWN_OPERATION",
            message=f"No rules for operation '{operation}'",
            detail={"available": sorted(table)},
        )
    if len(table) == 1:
        return next(iter(table))
    if not table:
        return ServiceError(code="EMPTY_TABLE", message="Rule table declares no operations")
    return ServiceError(
        code="OPERATION_REQUIRED",
        message="Rule table has several operations; choose one with --operation",
        detail={"available": sorted(table)},
    )


def _load_arguments(args_path: Path) -> list[Any] | ServiceError:
    try:
        data = json.loads(args_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeError, json.JSONDecodeError) as exc:
        return ServiceError(
            code="INVALID_ARGS",
            message=f"Cannot read {args_path}: {exc}",
            detail={"path": str(args_path)},
        )
    if not isinstance(data, list):
        return ServiceError(
            code="INVALID_ARGS",
            message=f"{args_path} must contain a JSON array of arguments",
            detail={"path": str(args_path)},
        )
    return data
