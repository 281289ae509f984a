"""Command: list scopes and their effective layer configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from doclayer.commands._base import LayerCommand

if TYPE_CHECKING:
    from doclayer.commands._context import AppContext


@click.command(
    cls=LayerCommand,
    examples="""\
  doclayer -c httpd.conf scopes
  doclayer -v -c httpd.conf scopes      # include DocumentRoot column
  doclayer -q -c httpd.conf scopes      # scope labels only""",
)
@click.pass_obj
def scopes(app: AppContext) -> None:
    """Show every server, vhost, and location scope with its layers."""
    from doclayer.services.config import ConfigService

    app.emit(ConfigService(app.settings).scopes())
