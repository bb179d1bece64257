"""Logger setup shared by every StudyRoom module."""

import logging
import os
from typing import Optional

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    console: bool = True,
    settings: Optional[Settings] = None,
) -> logging.Logger:
    """Configure and return a module-level logger.

    Level and log file default to ``settings.log_level`` and
    ``settings.log_file`` (read from the environment when no settings are
    given). Calling this twice for the same name does not duplicate handlers.
    """
    if settings is None:
        settings = Settings.from_env()
    if level is None:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
    log_file = log_file or settings.log_file

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

    return logger
