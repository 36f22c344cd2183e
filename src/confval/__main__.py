"""Allow ``python -m confval``."""

from confval.cli import cli

cli()
