"""Logging setup shared by the app entry point and tests."""

import logging
import sys
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("aiosqlite", "httpx")
"""Third-party loggers held at WARNING unless running at DEBUG."""

CONTAINER_LOG_DIR = Path("/app/logs")
LOG_FILE_NAME = "setlist-quickset.log"


def default_log_file(level: str) -> Path | None:
    """Where to write logs for ``level``; DEBUG runs log to the console only."""
    if level.upper() == "DEBUG":
        return None
    log_dir = CONTAINER_LOG_DIR if CONTAINER_LOG_DIR.exists() else Path("logs")
    return log_dir / LOG_FILE_NAME


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    format_string: str | None = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write to this file, creating its directory if needed
        format_string: Log record format; ``DEFAULT_FORMAT`` when omitted
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string or DEFAULT_FORMAT,
        handlers=handlers,
        force=True,
    )

    quiet = level.upper() != "DEBUG"
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING if quiet else logging.NOTSET)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {level} level" + (f", file {log_file}" if log_file else ""))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
