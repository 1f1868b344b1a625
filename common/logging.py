"""
Logging setup shared by the Pickpocket packages.

The CLI calls ``setup_logging`` once; everything else fetches the configured
logger with ``get_logger`` (or ``get_or_setup_logger`` when it may run before
the CLI, e.g. from tests or library use).
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "pickpocket"
LOG_FORMAT = "%(asctime)s | %(levelname)8s | %(message)s"

logger = None


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> None:
    """
    Initialize the Pickpocket logger.

    Parameters
    ----------
    log_file : str, optional
        Path to a log file. Records are appended to it in addition to console output.
    level : int, optional
        Logging level (default: ``logging.INFO``).
    """
    global logger
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(stream=sys.stdout)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
            print(f"Logging to file: {log_file}")
        except OSError as e:
            print(f"Warning: Could not set up logging to file {log_file}: {e}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        logger.addHandler(handler)


def get_logger() -> logging.Logger:
    """
    Get the configured logger instance.

    Returns
    -------
    logging.Logger
        The configured logger instance.

    Raises
    ------
    RuntimeError
        If setup_logging has not been called before this function.
    """
    if logger is None:
        raise RuntimeError("Logger not initialized. Call setup_logging() first.")
    return logger


def get_or_setup_logger() -> logging.Logger:
    """Return the configured logger, setting up console logging first if needed."""
    try:
        return get_logger()
    except RuntimeError:
        setup_logging()
        return get_logger()
