"""
Logging configuration for the Talora interview preparation core.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOG_FILE, LOG_LEVEL, LOG_PREVIEW_CHARS


def setup_logger(
    name: str = "talora_prep",
    log_level: str = LOG_LEVEL,
    log_file: Optional[Path] = LOG_FILE,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with a console handler and an optional file handler.

    Args:
        name: Logger name
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only logs to console.
        format_string: Custom format string. If None, uses default.

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger("answer_evaluator")
        >>> logger.info("Evaluator ready")
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    if format_string is None:
        format_string = (
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(filename)s:%(lineno)d] - %(message)s"
        )

    formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def preview(text: Optional[str], limit: int = LOG_PREVIEW_CHARS) -> str:
    """Short single-line preview of candidate text, safe for logs."""
    if not text:
        return ""
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[:limit] + "..."
