from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def setup_logging(filename: str | Path | None = None, *, verbose: bool = False) -> structlog.BoundLogger:
    """Set up structured logging for the sourceprompt package.

    Calling it again replaces the previous configuration, so the CLI can switch
    to a log file or to debug level once the flags are known.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        verbose: Emit debug events (visited paths, skip reasons) when True.

    Returns:
        A structlog logger instance configured for the sourceprompt package.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = []
    if filename:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(filename), encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger("sourceprompt")


logger = setup_logging()
