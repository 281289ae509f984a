"""Logging setup: structlog rendering over the stdlib ``logging`` tree.

Library modules log through plain ``logging.getLogger(__name__)``; the
root handler installed here renders those records (and any structlog
loggers) either as console lines or, with ``--log-json``, as one JSON
object per line. Everything goes to stderr so stdout stays parseable.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers kept at WARNING even under --verbose.
QUIET_LOGGERS = ("pluggy",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route doclayer logging to stderr.

    Args:
        verbose: Show DEBUG records from ``doclayer.*`` (probe misses,
            skipped directives, plugin registration).
        log_json: Emit JSON lines instead of console-formatted lines.

    Safe to call repeatedly; the root handler is replaced each time.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("doclayer").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
