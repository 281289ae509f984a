"""Command: validate layer directives in an httpd configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from doclayer.commands._base import LayerCommand

if TYPE_CHECKING:
    from doclayer.commands._context import AppContext


@click.command(
    cls=LayerCommand,
    examples="""\
  doclayer -c /etc/httpd/conf/httpd.conf check
  doclayer --json -c httpd.conf check
  DOCLAYER_CONF_FILE=httpd.conf doclayer check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Load the configuration and validate directive placement and values."""
    from doclayer.services.config import ConfigService

    app.emit(ConfigService(app.settings).check())
