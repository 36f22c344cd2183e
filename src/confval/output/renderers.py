"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from confval.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from confval.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one line, or failing paths only."""
    if result.ok:
        return f"OK: {result.op}"
    err = result.error
    failures = err.detail.get("failures") if err else None
    if failures:
        return "\n".join(str(f["path"]) for f in failures)
    msg = err.message if err else "Unknown error"
    return f"ERROR: {result.op}: {msg}"


def _status_line(console: Console, result: ServiceResult) -> None:
    line = Text("OK", style="cv.ok")
    line.append(f"  {result.op}", style="cv.op")
    console.print(line)


def _field(console: Console, key: str, value: Any, *, indent: int = 2) -> None:
    line = Text(f"{' ' * indent}{key}: ", style="cv.key")
    line.append(str(value))
    console.print(line)


def _render_values(console: Console, values: dict[str, Any], indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            console.print(Text(f"{' ' * indent}{key}:", style="cv.key"))
            _render_values(console, value, indent + 2)
        else:
            _field(console, key, repr(value), indent=indent)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "target", result.data.get("target", ""))
    values = result.data.get("values")
    if verbose and isinstance(values, dict):
        console.print(Text("  values:", style="cv.key"))
        _render_values(console, values, 4)


def _render_rules(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("rule")
    table.add_column("mutates")
    for item in result.data.get("items", []):
        mutates = Text("yes", style="cv.mutating") if item["mutates"] else Text("no")
        table.add_row(str(item["order"]), item["name"], mutates)
    console.print(table)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    line = Text("ERROR", style="cv.error")
    line.append(f"  {result.op}", style="cv.op")
    line.append(f": {msg}")
    console.print(line)
    if err is None:
        return
    for failure in err.detail.get("failures", []):
        line = Text("  ")
        line.append(str(failure["path"]), style="cv.path")
        line.append(f": {failure['message']}")
        if verbose:
            line.append(f"  [{failure['kind']}]", style="cv.kind")
        console.print(line)
    if verbose:
        for key, value in err.detail.items():
            if key not in ("failures", "count"):
                _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "check": _render_check,
    "rules": _render_rules,
}
