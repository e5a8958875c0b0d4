"""Command: evaluate an operation's rules against an argument file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from argguard.commands._base import GuardCommand

if TYPE_CHECKING:
    from argguard.commands._context import AppContext


@click.command(
    cls=GuardCommand,
    examples="""\
  argguard check rules.toml args.json
  argguard check rules.yaml args.json --operation margin_pay
  argguard --json check rules.toml args.json""",
)
@click.argument("rules", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("args", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--operation", default=None, help="Operation whose rules to apply.")
@click.pass_obj
def check(app: AppContext, rules: Path, args: Path, operation: str | None) -> None:
    """Validate the JSON argument array in ARGS against the rule table RULES."""
    from argguard.services.check import CheckService

    svc = CheckService(app.settings.build_evaluator())
    app.emit(svc.check(rules, args, operation=operation))
