"""AppContext — the object every subcommand receives via ``@click.pass_obj``.

Holds the resolved settings and owns result emission: successful output
goes to stdout, warnings and failures to stderr, failures exit with 1.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from doclayer.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from doclayer.config.settings import DoclayerSettings
    from doclayer.services.result import ServiceResult


class AppContext:
    """Settings plus output routing for one CLI invocation.

    Logging is configured here, once the global flags are known. The httpd
    configuration itself is read lazily by the services.
    """

    def __init__(self, settings: DoclayerSettings) -> None:
        from doclayer.config.logging import configure_logging

        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed."""
        output = self.output
        text = format_result(result, settings=output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        # JSON output already carries the warnings list.
        if not output.json_output and not output.quiet:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
