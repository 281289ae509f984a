"""Output mode selection for ServiceResult.

The CLI renders ServiceResult for humans (Rich) or machines (--json).
``--quiet`` reduces human output to the one value a script would want.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doclayer.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Flags that pick the output mode."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from doclayer.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
