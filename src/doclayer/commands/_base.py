"""Click command classes carrying an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints a few complete invocations
(config file, host and output mode included) and exits.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Adds the eager ``--examples`` option when examples text is given."""

    params: list[click.Parameter]
    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class LayerCommand(_ExamplesMixin, click.Command):
    """Subcommand accepting ``examples=`` in its decorator."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class LayerGroup(_ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`LayerCommand`."""

    command_class = LayerCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
