"""
Logging helpers for synthcore

Library modules only ask for named loggers with get_logger(); handlers are
installed by applications (the `python -m synthcore` driver does it through
set_global_logging()).

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

import logging
import sys
from typing import Optional

_ROOT = "synthcore"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def set_global_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Send log records to stdout (and optionally a file) at `level`.

    Unknown level names fall back to INFO. Only takes effect the first time
    the root logger is configured; the synthcore logger level is always set.

    Returns:
        The "synthcore" logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=format_string or _FORMAT,
        handlers=handlers,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger(_ROOT)
    logger.setLevel(log_level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for `name`, usually a module's __name__ (default: "synthcore")."""
    return logging.getLogger(name or _ROOT)
