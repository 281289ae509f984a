"""Rich console and theme shared by the renderers.

Renderers draw into an in-memory console and hand back the text, so
``format_result()`` stays a plain ``str`` function. Rich drops colour codes
when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LAYER_THEME = Theme(
    {
        "layer.ok": "bold green",
        "layer.error": "bold red",
        "layer.warning": "bold yellow",
        "layer.op": "bold cyan",
        "layer.key": "dim",
        "layer.path": "bold",
        "layer.scope": "bold blue",
        "layer.on": "green",
        "layer.off": "dim",
        "layer.source.layer": "magenta",
        "layer.source.document_root": "cyan",
    }
)


def create_console(*, width: int = 120) -> Console:
    """In-memory console with the layer theme.

    The fixed width keeps tables stable when there is no terminal to size.
    """
    return Console(file=StringIO(), theme=LAYER_THEME, highlight=False, width=width)


def get_output(console: Console) -> str:
    """Everything drawn on *console* so far."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
