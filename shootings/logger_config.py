from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import LOG_FILE, LOG_LEVEL


CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(levelname)s : %(name)s : %(funcName)s : %(lineno)d : %(message)s"


def setup_logger(
    name: str = "shootings",
    level: str = LOG_LEVEL,
    log_file: Optional[str] = LOG_FILE,
) -> logging.Logger:
    """
    Configure the package logger with a console handler and an optional file handler.

    Calling this more than once is safe; handlers are only attached the first time.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
