"""Process-wide logging setup.

Library modules only ever call ``logging.getLogger(__name__)``.  The CLI and
the server entry point call :func:`configure_logging` once at startup to
install a single root handler in one of three formats:

- ``simple``  : ``LEVEL: message``
- ``detailed``: timestamp, level, logger name, message
- ``json``    : one JSON object per line for log shippers, rendered by
  structlog (keys ``event``, ``level``, ``logger``, ``timestamp`` and, when
  present, ``exception``)
"""

from __future__ import annotations

import logging
import sys

import structlog

from rcon_bridge.config import LoggingSettings

_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
}


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Return a stdlib formatter that renders plain ``logging`` records as JSON."""
    return structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ],
    )


def configure_logging(settings: LoggingSettings) -> None:
    """Install the root handler described by ``settings``.

    Safe to call more than once; previous root handlers are replaced.
    """
    handler = logging.StreamHandler(sys.stderr)
    if settings.format == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(_FORMATS.get(settings.format, _FORMATS["detailed"])))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.level.upper())
