"""structlog setup for the confval CLI.

The library itself only logs through stdlib ``logging.getLogger(__name__)``
and never configures handlers. The CLI calls :func:`configure_logging`
once so those records (and structlog events from the command layer) are
rendered either for humans or as JSON lines on stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

LIBRARY_LOGGER = "confval"


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route confval and structlog output to stderr.

    Calling this again replaces the previous handler instead of stacking.

    Args:
        verbose: Emit confval DEBUG records (rule dispatch, env sourcing).
            Otherwise only WARNING and above.
        log_json: One JSON object per line instead of console rendering.
    """
    pre_chain = _processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LIBRARY_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
