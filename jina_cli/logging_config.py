import logging
import sys
from typing import Optional

LOGGER_NAME = "jina_cli"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_for(verbose: bool) -> str:
    """Log level for the ``--verbose`` flag."""
    return "DEBUG" if verbose else "WARNING"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Set up logging configuration for jina_cli.

    Records go to stderr, never stdout, which is reserved for command output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that also receives every record
        format_string: Optional custom format string for log messages
        force: If True, replace (and close) existing handlers

    Returns:
        The package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    if logger.handlers and not force:
        return logger

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), numeric_level, formatter))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), numeric_level, formatter))

    # Records stop here; the root logger may belong to an embedding application
    logger.propagate = False

    return logger
