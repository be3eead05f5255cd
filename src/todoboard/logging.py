"""Logging configuration for todoboard."""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "todoboard"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so repeated setup replaces instead of stacking
_HANDLER_ATTR = "_todoboard_handler"


def level_for(verbose: int) -> int:
    """Map a -v count to a logging level (0 and 1 both mean INFO)."""
    return logging.DEBUG if verbose >= 2 else logging.INFO


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> logging.Logger:
    """Configure the todoboard logger from verbosity and an optional log file.

    Nothing is attached when neither is requested, so library use stays
    silent. Calling this again swaps out the handlers of the previous call.

    Args:
        verbose: Verbosity level (0=off, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file

    Returns:
        The configured ``todoboard`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    if verbose == 0 and log_file is None:
        return logger

    level = level_for(verbose)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = []
    if verbose > 0:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_ATTR, True)
        logger.addHandler(handler)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("=" * 60)
    logger.info(
        "todoboard starting | %s | level=%s", timestamp, logging.getLevelName(level)
    )
    logger.info("=" * 60)
    return logger
