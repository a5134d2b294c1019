"""Logging for velcro builds.

Diagnostics about a particular file are logged with ``extra={"source": label}``
where ``label`` is the site-relative path of the file. Handlers installed by
:func:`configure_logging` print that label in front of the message, and a
:class:`DiagnosticTally` counts the diagnostics so the CLI can summarise them.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

_LOGGER_NAME = "velcro"
_CONSOLE_FORMAT = "[velcro] %(levelname)s %(location)s%(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(location)s%(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the velcro hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class SourceLabelFilter(logging.Filter):
    """Exposes the ``source`` extra as a ``location`` prefix for formatters."""

    def filter(self, record: logging.LogRecord) -> bool:
        source = getattr(record, "source", None)
        record.location = f"{source}: " if source else ""
        return True


class DiagnosticTally(logging.Handler):
    """Counts warnings and errors that name a source file."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.by_source: Counter[str] = Counter()
        self.warnings = 0
        self.errors = 0

    def emit(self, record: logging.LogRecord) -> None:
        source = getattr(record, "source", None)
        if not source:
            return
        self.by_source[str(source)] += 1
        if record.levelno >= logging.ERROR:
            self.errors += 1
        else:
            self.warnings += 1


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> DiagnosticTally:
    """Install console and optional file handlers on the velcro logger.

    Returns the tally attached to the logger for this invocation.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    labels = SourceLabelFilter()
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(labels)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(labels)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    tally = DiagnosticTally()
    logger.addHandler(tally)
    return tally


__all__ = ["DiagnosticTally", "SourceLabelFilter", "configure_logging", "get_logger"]
