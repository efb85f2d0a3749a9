"""
Logging utilities for the Pizzeria Order Processor CLI tool.

The console shares the terminal with the printed report, so it gets a short
format on stderr. A log file, when requested, keeps the full record of a run
(including the DEBUG-level list of rejected orders) in the detailed format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "order_processor"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration for the CLI application.

    Args:
        level: Console logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional). The file always records DEBUG
            and above, whatever the console level.
        format_string: Custom format string applied to every handler

    Returns:
        Configured logger instance
    """
    log_level = level or "INFO"
    level_num = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    # The logger must pass DEBUG records through when a file wants them
    logger.setLevel(logging.DEBUG if log_file else level_num)

    # Clear existing handlers so repeated CLI invocations don't duplicate output
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # stdout is reserved for the report (and must stay parseable as JSON)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_num)
    console_handler.setFormatter(logging.Formatter(format_string or CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_string or FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for CLI modules.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance under the package logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
