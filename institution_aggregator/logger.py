"""
Package-wide logging for the aggregator.

Every module logs through a child of the "institution_aggregator" logger,
so one call to setup_logger() decides where all pipeline messages go.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "institution_aggregator"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger and return it.

    The first call attaches a stdout handler.  Later calls re-level the
    handlers already attached instead of stacking new ones, and add a file
    handler only if log_file is given and no file handler exists yet.

    Args:
        name: Logger to configure
        level: Threshold for the logger and all of its handlers
        log_file: Also append records to this path

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    if log_file and not has_file_handler:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Logger for one pipeline module, e.g. "institution_aggregator.merge"."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
