"""Command: list the registered rules in evaluation order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from confval.commands._base import ConfvalCommand

if TYPE_CHECKING:
    from confval.commands._context import AppContext


@click.command(cls=ConfvalCommand)
@click.pass_obj
def rules(app: AppContext) -> None:
    """Show the annotation rules, mutating rules first."""
    from confval.services.check import CheckService

    app.emit(CheckService().rules())
