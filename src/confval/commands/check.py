"""Command: validate a configuration record class against the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from confval.commands._base import ConfvalCommand

if TYPE_CHECKING:
    from confval.commands._context import AppContext


@click.command(
    cls=ConfvalCommand,
    examples="""\
  confval check myapp.settings:Config
  confval check myapp.settings:Config --env PORT=8080 --env DEBUG=true
  confval check myapp.settings:Config --no-environ --env PORT=8080
  confval --json check myapp.settings:Config""",
)
@click.argument("target")
@click.option(
    "-e",
    "--env",
    "env_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Environment override (repeatable). Wins over the process environment.",
)
@click.option(
    "--no-environ",
    is_flag=True,
    help="Ignore the process environment; only --env values are visible.",
)
@click.pass_obj
def check(app: AppContext, target: str, env_pairs: tuple[str, ...], no_environ: bool) -> None:
    """Instantiate TARGET (module:ClassName) and validate it."""
    from confval.services.check import CheckService, parse_env_pairs

    try:
        overrides = parse_env_pairs(env_pairs)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--env") from exc

    log = structlog.get_logger("confval.commands.check")
    with structlog.contextvars.bound_contextvars(target=target):
        log.debug("check.start", overrides=sorted(overrides), environ=not no_environ)
        result = CheckService().check(target, env=overrides, include_environ=not no_environ)
        log.debug("check.done", ok=result.ok)
    app.emit(result)
