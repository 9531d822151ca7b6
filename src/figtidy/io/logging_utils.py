"""
logging_utils.py
================

Central logging utilities.

Responsibilities
----------------
• Configure the "figtidy" package logger once
• Log to:
    - console (stderr)
    - file (optional)
• Avoid duplicate handlers

Library modules never configure logging themselves; they log through
logging.getLogger(__name__), which propagates to the logger set up here.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = "figtidy"

LOG_FORMAT = (
    "%(asctime)s | "
    "%(levelname)-8s | "
    "%(name)s | "
    "%(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ============================================================
# LOGGER SETUP
# ============================================================

def setup_logger(
    log_path: Optional[Union[str, Path]] = None,
    level: str = "INFO",
) -> logging.Logger:
    """
    Create and configure the package logger.

    Logs to:
    • console
    • file (log_path), if given

    Parameters
    ----------
    log_path : str or Path, optional
        Path to a log file. Parent directories are created.
    level : str
        Logging level:
        "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"

    Returns
    -------
    logger : logging.Logger
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Prevent duplicate handlers if setup_logger is called multiple times
    if logger.handlers:
        return logger

    level = level.upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # --------------------------------------------------------
    # Console handler
    # --------------------------------------------------------
    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # --------------------------------------------------------
    # File handler
    # --------------------------------------------------------
    if log_path is not None:
        log_path = Path(log_path).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(log_path, mode="w")
        fh.setLevel(logger.level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    logger.debug("Logger initialized")
    if log_path is not None:
        logger.info("Logging to file: %s", log_path)

    return logger


def reset_logger() -> None:
    """Remove and close all handlers of the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
