import logging
import sys

import structlog

# Using this module keeps the logging configuration consistent between the CLI
# and programs embedding the SDK. All log lines go to stderr so that command
# output written to stdout stays machine readable.


def configure_logging_early(level: int = logging.WARNING):
    """Configures standard Python logging module.

    httpx and httpcore log through the standard logging module. Their log lines
    are dropped unless the module gets configured, and they are the first place
    to look when the API server can't be reached.
    """
    logging.basicConfig(
        level=level,
        # This log message format is a bit similar to the default structlog format.
        format="%(asctime)s [%(levelname)s] %(message)s logger=%(name)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def configure_development_mode_logging(level: int = logging.DEBUG):
    """Human readable, colored log lines."""
    _configure_structlog(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            _timestamper(),
            structlog.dev.ConsoleRenderer(),
        ],
        level,
    )


def configure_production_mode_logging(level: int = logging.INFO):
    """One JSON document per log line."""
    _configure_structlog(
        [
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            _timestamper(),
            structlog.processors.JSONRenderer(),
        ],
        level,
    )


def _timestamper() -> structlog.processors.TimeStamper:
    return structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False)


def _configure_structlog(processors: list, level: int):
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            *processors,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
