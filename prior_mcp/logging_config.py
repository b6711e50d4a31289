"""Logging configuration for Prior MCP.

Logs go to files under ``<prior home>/logs``. The MCP stdio transport owns
stdout, so console output (DEBUG only) is written to stderr.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from prior_mcp.utils import get_prior_home

LOGGER_NAME = "prior_mcp"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_log_dir() -> Path:
    return get_prior_home() / "logs"


def setup_prior_logging(level: str = "INFO") -> logging.Logger:
    """Configure the ``prior_mcp`` logger.

    Args:
        level: Level name (case-insensitive). Unknown names fall back to INFO.

    Returns:
        The configured logger. Calling this again reuses existing handlers.
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        log_file = log_dir / f"local-{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if numeric_level <= logging.DEBUG and not has_console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def log_tool_call(tool_name: str, outcome: str, **details) -> None:
    """Append one line per tool invocation to the tool-events log.

    Format: ``<timestamp> | <tool> | <outcome> | k=v, k=v``
    """
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    event_file = log_dir / f"tool-events-{datetime.now().strftime('%Y-%m-%d')}.log"
    detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
    line = f"{datetime.now().isoformat()} | {tool_name} | {outcome}"
    if detail_str:
        line += f" | {detail_str}"
    with open(event_file, "a", encoding="utf-8") as f:
        f.write(line + "\n")
