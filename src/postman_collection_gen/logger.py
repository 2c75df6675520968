"""Logging setup for the generator.

All modules log through ``get_logger(__name__)``. Handlers are attached once,
to the package logger, so child loggers inherit its level and format.
"""

import logging
import os
import sys

PACKAGE_LOGGER = "postman_collection_gen"
LOG_FORMAT = "[%(asctime)s] %(levelname)s:%(name)s:%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV = "POSTMAN_GEN_LOG_LEVEL"


def _create_handler() -> logging.StreamHandler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def _configure_package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    # prevent duplicate handlers
    if not logger.handlers:
        logger.addHandler(_create_handler())
        logger.setLevel(level_from_env())
        logger.propagate = False
    return logger


def level_from_env() -> int:
    """Level named by $POSTMAN_GEN_LOG_LEVEL, or WARNING when unset or unknown."""
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace, configuring it on first use."""
    _configure_package_logger()
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Change the level of every logger in the package."""
    _configure_package_logger().setLevel(level)
