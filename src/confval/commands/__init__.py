"""Subcommand modules for confval.

Provides register_commands() which uses deferred imports so
``confval --help`` does not import the services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from confval.commands.check import check
    from confval.commands.rules import rules

    cli.add_command(check)
    cli.add_command(rules)
