"""Rich Console factory and theme for confval output.

Consoles render into a StringIO buffer so renderers keep a
``ServiceResult -> str`` contract. Outside a terminal (tests, pipes)
Rich drops the color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CONFVAL_THEME = Theme(
    {
        "cv.ok": "bold green",
        "cv.error": "bold red",
        "cv.op": "bold cyan",
        "cv.key": "dim",
        "cv.path": "bold",
        "cv.kind": "yellow",
        "cv.mutating": "magenta",
    }
)


def create_console() -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(file=StringIO(), theme=CONFVAL_THEME, highlight=False, width=120)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
