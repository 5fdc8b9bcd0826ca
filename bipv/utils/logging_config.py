"""
BIPV Logging Configuration.

One root configuration shared by the library and the CLI:
- Console lines: time | level | logger | message [tile_id=..., feature_id=...]
- Optional JSON-lines file handler (always at DEBUG)
- Level from BIPV_LOG_LEVEL unless given explicitly

Tile and feature context travels through `extra=`:

    logger = get_logger(__name__)
    logger.warning("Skipping feature", extra={"tile_id": "12_34", "feature_id": "way/1"})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union


DEFAULT_LOG_LEVEL = os.environ.get("BIPV_LOG_LEVEL", "INFO").upper()

CONTEXT_KEYS = ("tile_id", "feature_id")


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return {key: getattr(record, key) for key in CONTEXT_KEYS if hasattr(record, key)}


def _level(name: Optional[str]) -> int:
    return getattr(logging, (name or DEFAULT_LOG_LEVEL).upper(), logging.INFO)


class BipvFormatter(logging.Formatter):
    """Console formatter; colors by level when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors and sys.stdout.isatty()
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        context = _context(record)
        if context:
            line += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if self.use_colors and record.levelname in self.COLORS:
            return f"{self.COLORS[record.levelname]}{line}{self.RESET}"
        return line


class FileFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if hasattr(record, "error_type"):
            entry["error_type"] = record.error_type
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger, replacing any existing handlers.

    Args:
        level: Console log level name (default: BIPV_LOG_LEVEL or INFO)
        log_file: Also write JSON lines to this path
    """
    console_level = _level(level)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(BipvFormatter(use_colors=True))
    console_handler.setLevel(console_level)
    root_logger.addHandler(console_handler)

    if log_file is None:
        root_logger.setLevel(console_level)
        return

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(FileFormatter())
    file_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (typically called with __name__)."""
    return logging.getLogger(name)


_initialized = False


def ensure_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """Configure logging once per process; later calls are no-ops."""
    global _initialized
    if not _initialized:
        setup_logging(level=level, log_file=log_file)
        _initialized = True
