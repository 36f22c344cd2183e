"""Output mode dispatch.

The CLI renders a ServiceResult for humans (Rich text), for scripts
(``--quiet``: status line or failing paths only), or for machines
(``--json``). JSON takes precedence over quiet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from confval.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from confval.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags extracted from the CLI settings."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
