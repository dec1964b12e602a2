"""Logging infrastructure for the ChefAI suggestion service.

Provides centralized logging with configurable format (text/JSON) and level.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)
"""

import json
import logging
import os
import sys
from typing import Any


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger name, message, and optional traceback.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Traceback travels as a single string field
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Engine runs tag their records with run_id and the recipe source
        if hasattr(record, "run_id"):
            log_data["run_id"] = record.run_id
        if hasattr(record, "source"):
            log_data["source"] = record.source

        return json.dumps(log_data, ensure_ascii=False)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with emoji icons."""

    # ANSI escape per level; RESET closes every line
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "RESET": "\033[0m",
    }

    # One icon per level, INFO uses the kitchen one
    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🍳",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as colored text.

        Args:
            record: Log record to format.

        Returns:
            Formatted string with color codes and emoji icon.
        """
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        # Engine runs are tagged with the first 8 chars of their run_id
        run_tag = f"[{record.run_id[:8]}] " if hasattr(record, "run_id") else ""

        # icon, time, level, logger, optional run tag, message
        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<12} {run_tag}{record.getMessage()}{reset}"

        # Traceback goes below the coloured line
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure logger instance.

    Args:
        name: Logger name, typically module name.

    Returns:
        Configured logger instance.
    """
    logger_instance = logging.getLogger(name)

    # Return existing logger if already configured
    if logger_instance.handlers:
        return logger_instance

    # LOG_LEVEL and LOG_TYPE are read once, when the logger is first configured
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_type = os.getenv("LOG_TYPE", "text").lower()

    log_level = getattr(logging, log_level_str, logging.INFO)
    logger_instance.setLevel(log_level)

    # Single stdout handler at the same level as the logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    # "json" for log shippers, anything else gets the coloured text format
    if log_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = RichTextFormatter()

    handler.setFormatter(formatter)
    logger_instance.addHandler(handler)

    return logger_instance


# Package-wide logger imported by every chefai module
logger = get_logger("chefai")

# aiohttp access/client chatter is not useful at INFO
logging.getLogger("aiohttp").setLevel(logging.WARNING)
