"""
Logging for ray tracing runs
============================
Routes the records of the ``raytracing`` loggers, or of a logger injected
into :func:`~raytracing.ray_tracing.trace`, to the console and to a file.

The solver writes one DEBUG record per layer crossing, turn and
termination, so a DEBUG file of a whole swath is large; give each survey
line its own logger (``logging.getLogger("survey.line42")``), pass it to
``trace_swath`` and configure it here to keep its records apart.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "raytracing"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


class _ConsoleHandler(logging.StreamHandler):
    """Console handler installed by :func:`setup_logging`."""


class _FileHandler(logging.FileHandler):
    """File handler installed by :func:`setup_logging`."""


def _remove_installed_handlers(logger: logging.Logger) -> None:
    # handlers added by other code (Streamlit, pytest) are left alone
    for handler in list(logger.handlers):
        if isinstance(handler, (_ConsoleHandler, _FileHandler)):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    logger: Union[str, logging.Logger, None] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configures console and file output for ray tracing records.

    Calling it again replaces the handlers it installed before, which keeps
    the Streamlit explorer from duplicating records on every rerun.

    Args:
        level: Logging level (e.g. logging.DEBUG to follow individual rays).
        log_file: Optional path to save logs to a file, overwritten each run.
        logger: Logger or logger name to configure; the 'raytracing'
            package logger by default.
        console: Whether to echo records to stdout.

    Returns:
        The configured logger.
    """
    if logger is None:
        logger = PACKAGE_LOGGER
    if isinstance(logger, str):
        logger = logging.getLogger(logger)
    logger.setLevel(level)
    _remove_installed_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []
    if console:
        handlers.append(_ConsoleHandler(sys.stdout))
    if log_file:
        handlers.append(_FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(
        "Logging initialized for '%s' at %s%s.",
        logger.name,
        logging.getLevelName(level),
        f" (file {log_file})" if log_file else "",
    )
    return logger
