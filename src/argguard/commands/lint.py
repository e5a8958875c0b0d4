"""Command: static check of a rule table."""

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
  argguard lint rules.toml
  argguard --json lint rules.yaml""",
)
@click.argument("rules", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def lint(app: AppContext, rules: Path) -> None:
    """Report malformed paths and rules that can never fail in RULES."""
    from argguard.services.check import CheckService

    app.emit(CheckService().lint(rules))
