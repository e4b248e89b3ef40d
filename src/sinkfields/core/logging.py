"""Logging setup for sinkfields.

The resolver emits two structlog events through get_logger():
field_set_resolved (debug) and field_set_resolution_failed (warning).
Library code never configures output; the CLI calls configure_logging()
once at start-up. structlog events and stdlib records (dynaconf,
sqlalchemy) then share a single stderr handler and renderer, leaving
stdout to command output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Third-party loggers kept at WARNING or above, even when the CLI runs with --verbose
_NOISY_LOGGERS: tuple[str, ...] = ("dynaconf", "sqlalchemy")

# Applied to structlog events and to records from stdlib loggers alike
_PRE_CHAIN: tuple[Any, ...] = (
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
)


def _renderer(json_output: bool) -> Any:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        json_output: One JSON object per line instead of console output.
        level: Root log level name (DEBUG, INFO, WARNING, ERROR).
    """
    log_level = logging.getLevelNamesMapping()[level.upper()]

    structlog.configure(
        processors=[*_PRE_CHAIN, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up a later reconfiguration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[ProcessorFormatter.remove_processors_meta, _renderer(json_output)],
            foreign_pre_chain=list(_PRE_CHAIN),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound structlog logger for a module (typically called with __name__)."""
    return structlog.stdlib.get_logger(name)
