import logging
import os
import sys
from typing import Optional

# Constants
LOG_FILE_NAME = "mood_analytics.log"
LOG_FORMAT = "[%(asctime)s] | %(levelname)-8s | %(name)-15s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "mood_analytics",
                 log_dir: Optional[str] = None,
                 level: int = logging.INFO) -> logging.Logger:
    """
    Configures and returns the package logger.

    Features:
    - Console Output (StreamHandler on stdout)
    - Optional File Output, overwritten on each run
    - Standardized Formatting

    Module loggers (`logging.getLogger(__name__)`) below `name` propagate here.

    Args:
        name: Logger name (the package root by default)
        log_dir: Directory for the log file; no file handler when None
        level: Logging level for logger and handlers

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, LOG_FILE_NAME)

        file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
