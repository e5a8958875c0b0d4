"""Subcommand modules for argguard.

Provides register_commands() which uses deferred imports to keep
``argguard --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from argguard.commands.check import check
    from argguard.commands.lint import lint

    cli.add_command(check)
    cli.add_command(lint)
