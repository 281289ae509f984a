"""Command: show which file a request would be served from."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from doclayer.commands._base import LayerCommand

if TYPE_CHECKING:
    from doclayer.commands._context import AppContext


@click.command(
    cls=LayerCommand,
    examples="""\
  doclayer -c httpd.conf resolve /banner.png
  doclayer -c httpd.conf resolve /img/logo.png --host www.example.com
  doclayer -q -c httpd.conf resolve /index.html   # filename only""",
)
@click.argument("uri")
@click.option("--host", default=None, help="Host header used to pick the virtual host.")
@click.pass_obj
def resolve(app: AppContext, uri: str, host: str | None) -> None:
    """Resolve URI through the layers and report the final filename."""
    from doclayer.services.resolve import ResolveService

    app.emit(ResolveService(app.settings).resolve(uri, host=host))
