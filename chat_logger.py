"""
chat_logger.py - Centralized logging configuration for the Survey Assistant

Sets up Python logging with:
- File handler: <LOG_DIR>/YYYY-MM-DD/assistant.txt (one folder per day)
- Console handler: stdout
- Configurable log level via LOG_LEVEL env variable
- Helpers that keep user text and credentials out of log lines
"""

import os
import logging
from datetime import datetime
from pathlib import Path

DEFAULT_LOGGER_NAME = "survey_assistant"


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds to the configured datefmt."""

    def formatTime(self, record, datefmt=None):
        if not datefmt:
            return super().formatTime(record, datefmt)
        s = datetime.fromtimestamp(record.created).strftime(datefmt)
        ms = int((record.created - int(record.created)) * 1000)
        return f"{s}.{ms:03d}"


def sanitize_log_string(text: str, max_length: int = 0) -> str:
    """
    Make user-supplied text safe for a single log line.

    Control characters (newlines included) become spaces so a message cannot
    forge extra log records. When max_length is set, the text is truncated
    and suffixed with '...'.
    """
    if not text:
        return text
    text = ''.join(char if ord(char) >= 32 else ' ' for char in text)
    if max_length and len(text) > max_length:
        text = text[:max_length] + "..."
    return text


def mask_secret(secret: str) -> str:
    """Show only the last four characters of an API key."""
    if not secret:
        return "<unset>"
    if len(secret) <= 4:
        return "***"
    return "***" + secret[-4:]


def setup_logger(name: str = DEFAULT_LOGGER_NAME, log_level: str = "INFO",
                 log_dir: str = "logs") -> logging.Logger:
    """
    Configure and return a logger with file and console handlers.

    Args:
        name: Logger name
        log_level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Root folder for daily log files

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Already configured by an earlier call
    if logger.handlers:
        return logger

    formatter = MillisecondFormatter(
        fmt="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # ─── File Handler ───
    today = datetime.now().strftime("%Y-%m-%d")
    day_dir = Path(log_dir) / today
    day_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(day_dir / "assistant.txt", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # ─── Console Handler ───
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get the configured logger instance, setting it up on first use
    from the LOG_LEVEL and LOG_DIR environment variables.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        setup_logger(
            name,
            os.getenv("LOG_LEVEL", "INFO"),
            os.getenv("LOG_DIR", "logs"),
        )
    return logger
