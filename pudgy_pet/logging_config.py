"""Logging setup for the Pudgy Pet server."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(level: str) -> logging.Logger:
    """Route package and uvicorn logs to the root handler at ``level``.

    Returns:
        The package logger (``pudgy_pet``).
    """
    resolved_level = level.upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    for name in ("pudgy_pet", *_UVICORN_LOGGERS):
        logging.getLogger(name).setLevel(resolved_level)

    return logging.getLogger("pudgy_pet")
