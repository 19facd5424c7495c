"""Logging configuration for the snapshot stack demo and exporter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "snapshotstack"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(
    *,
    level: int = logging.INFO,
    log_file: Union[str, Path, None] = None,
    include_stream: bool = True,
) -> logging.Logger:
    """Configure the package logger and return it.

    Parameters
    ----------
    level:
        Level applied to the package logger and its handlers.
    log_file:
        Optional path of a log file. Its directory is created when missing.
    include_stream:
        When ``True`` (default) also log to stderr.
    """

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if include_stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["configure_logging"]
