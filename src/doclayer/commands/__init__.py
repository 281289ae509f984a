"""Subcommand modules for doclayer.

Provides register_commands() which uses deferred imports to keep
``doclayer --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from doclayer.commands.check import check
    from doclayer.commands.resolve import resolve
    from doclayer.commands.scopes import scopes

    cli.add_command(check)
    cli.add_command(scopes)
    cli.add_command(resolve)
