"""Human-readable rendering of ServiceResult.

``scopes`` is drawn as a table, ``resolve`` as the fields that explain
where the file came from. ``check`` and anything else print their data as
``key: value`` lines.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from doclayer.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from doclayer.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "resolve":
        return str(result.data.get("filename") or "")

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("scope", "")) for item in items)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


_VALUE_STYLES: dict[str, str] = {
    "filename": "layer.path",
    "document_root": "layer.path",
    "conf_file": "layer.path",
    "scope": "layer.scope",
}


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "layer.ok"), (f"  {result.op}", "layer.op")))


def _field(console: Console, key: str, value: Any) -> None:
    style = f"layer.source.{value}" if key == "source" else _VALUE_STYLES.get(key, "")
    console.print(Text.assemble((f"  {key}: ", "layer.key"), (str(value), style)))


def _enabled_text(enabled: bool) -> Text:
    return Text("On", style="layer.on") if enabled else Text("Off", style="layer.off")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """ERROR line, then the directive's ``file:line`` when known."""
    err = result.error
    message = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "layer.error"), (f"  {result.op}", "layer.op"), " — ", message)
    )
    if err is None:
        return

    location = err.detail.get("location")
    if location:
        console.print(Text(f"  at {location}", style="dim"))
    if verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"  {key}: {value}", style="dim"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_scopes(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the scope listing as a table."""
    _status_line(console, result)
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Scope", style="layer.scope")
    table.add_column("Layers")
    table.add_column("Search order")
    if verbose:
        table.add_column("DocumentRoot", style="layer.path")

    for row in result.data.get("items", []):
        label = row["scope"]
        if row.get("parent"):
            label = f"  {label}"
        cells: list[Any] = [
            label,
            _enabled_text(row["enabled"]),
            ", ".join(row["layers"]) or "-",
        ]
        if verbose:
            cells.append(row["document_root"])
        table.add_row(*cells)

    console.print(table)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render where a request's file comes from."""
    _status_line(console, result)
    data = result.data
    keys = ["uri", "host", "scope", "filename", "source", "layer"]
    if verbose:
        keys += ["locations", "document_root", "enabled", "layers", "kind", "size"]
    for key in keys:
        value = data.get(key)
        if value is None or value == []:
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        _field(console, key, value)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "scopes": _render_scopes,
    "resolve": _render_resolve,
}
