"""Root CLI group for doclayer with global flags and command registration."""

from __future__ import annotations

import click

from doclayer import __version__
from doclayer.commands import register_commands
from doclayer.commands._base import LayerGroup
from doclayer.commands._context import AppContext
from doclayer.config.settings import DoclayerSettings


@click.group(
    cls=LayerGroup,
    invoke_without_command=True,
    examples="""\
  doclayer -c /etc/httpd/conf/httpd.conf check
  doclayer -c httpd.conf resolve /banner.png --host www.example.com
  doclayer --json -c httpd.conf scopes""",
)
@click.version_option(version=__version__, prog_name="doclayer")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "conf_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="httpd configuration file to load.",
)
@click.option("--settings", "settings_path", default=None, help="Override doclayer.toml path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    conf_file: str | None,
    settings_path: str | None,
) -> None:
    """doclayer — layered DocumentRoot resolution for httpd-style configs."""
    ctx.ensure_object(dict)
    settings = DoclayerSettings.from_cli(
        settings_path=settings_path,
        conf_file=conf_file,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
